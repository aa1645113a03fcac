"""
장르 API
"""
from typing import Optional

from fastapi import APIRouter

from catalog.api.crud import build_resource_router
from catalog.genres.dependencies import get_genre_service
from catalog.schemas.genre import Genre, GenreCreate, GenreUpdate


def create_router(version: Optional[str] = None) -> APIRouter:
    return build_resource_router(
        label="genre",
        get_service=get_genre_service,
        create_schema=GenreCreate,
        update_schema=GenreUpdate,
        response_schema=Genre,
        idempotent=version is not None,
        tags=[f"Genres {version or 'legacy'}"],
    )
