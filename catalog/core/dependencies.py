"""
Core/Common dependencies for the API
"""
from typing import AsyncGenerator, Optional

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.cache.base import IdempotencyStore
from catalog.core.config import settings
from catalog.db.database import get_db as get_db_session

# --- Database Dependency ---

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 DB 세션 의존성"""
    async for session in get_db_session():
        yield session

# --- Idempotency Dependencies ---

def get_idempotency_store(request: Request) -> IdempotencyStore:
    """애플리케이션 시작 시 생성된 멱등성 저장소"""
    return request.app.state.idempotency_store


def get_idempotency_key(
    idempotency_key: Optional[str] = Header(
        None,
        alias=settings.IDEMPOTENCY_HEADER,
        description="동일한 생성 요청을 재시도할 때 같은 값을 보내면 최초 응답이 그대로 재생됨",
    ),
) -> Optional[str]:
    return idempotency_key
