"""
개발사 API
기술 시트는 개발사 요청 본문에 함께 포함된다.
"""
from typing import Optional

from fastapi import APIRouter

from catalog.api.crud import build_resource_router
from catalog.developers.dependencies import get_developer_service
from catalog.schemas.developer import Developer, DeveloperCreate, DeveloperUpdate


def create_router(version: Optional[str] = None) -> APIRouter:
    return build_resource_router(
        label="developer",
        get_service=get_developer_service,
        create_schema=DeveloperCreate,
        update_schema=DeveloperUpdate,
        response_schema=Developer,
        idempotent=version is not None,
        tags=[f"Developers {version or 'legacy'}"],
    )
