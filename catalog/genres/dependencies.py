from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.cache.base import IdempotencyStore
from catalog.core.dependencies import get_db, get_idempotency_store
from catalog.services.genre_service import GenreService


async def get_genre_service(
    session: AsyncSession = Depends(get_db),
    idempotency_store: IdempotencyStore = Depends(get_idempotency_store),
) -> GenreService:
    """GenreService 인스턴스를 생성하고 반환하는 의존성 함수"""
    return GenreService(session, idempotency_store)
