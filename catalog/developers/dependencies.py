from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.cache.base import IdempotencyStore
from catalog.core.dependencies import get_db, get_idempotency_store
from catalog.services.developer_service import DeveloperService


async def get_developer_service(
    session: AsyncSession = Depends(get_db),
    idempotency_store: IdempotencyStore = Depends(get_idempotency_store),
) -> DeveloperService:
    """DeveloperService 인스턴스를 생성하고 반환하는 의존성 함수"""
    return DeveloperService(session, idempotency_store)
