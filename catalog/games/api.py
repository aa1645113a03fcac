"""
게임 API
v2 목록은 FREE 등급 게임만 반환한다.
"""
from typing import Optional

from fastapi import APIRouter

from catalog.api.crud import build_resource_router
from catalog.games.dependencies import get_game_service
from catalog.models.enums import AgeRating
from catalog.schemas.game import Game, GameCreate, GameUpdate
from catalog.services.game_service import GameService


async def list_free_games(service: GameService):
    return await service.list_by_age_rating(AgeRating.FREE)


def create_router(version: Optional[str] = None) -> APIRouter:
    """
    Args:
        version: None(레거시), "v1", "v2"
    """
    return build_resource_router(
        label="game",
        get_service=get_game_service,
        create_schema=GameCreate,
        update_schema=GameUpdate,
        response_schema=Game,
        idempotent=version is not None,
        list_items=list_free_games if version == "v2" else None,
        tags=[f"Games {version or 'legacy'}"],
    )
