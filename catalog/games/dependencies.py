from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.cache.base import IdempotencyStore
from catalog.core.dependencies import get_db, get_idempotency_store
from catalog.services.game_service import GameService


async def get_game_service(
    session: AsyncSession = Depends(get_db),
    idempotency_store: IdempotencyStore = Depends(get_idempotency_store),
) -> GameService:
    """GameService 인스턴스를 생성하고 반환하는 의존성 함수"""
    return GameService(session, idempotency_store)
