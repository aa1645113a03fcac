"""
데이터베이스 연결 및 세션 관리
"""
import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalog.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    """드라이버별 엔진 옵션 (SQLite는 풀 옵션을 받지 않음)"""
    kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_pre_ping=True,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return kwargs


def enable_sqlite_foreign_keys(engine) -> None:
    """SQLite에서 외래키 제약조건 활성화"""
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


database_url = str(settings.SQLALCHEMY_DATABASE_URI)
engine = create_async_engine(database_url, **_engine_kwargs(database_url))
if database_url.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine)

session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

# SQLAlchemy 기본 모델
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 DB 세션 제공 (커밋/롤백은 서비스 계층이 담당)"""
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


async def init_models() -> None:
    """스키마 생성 (마이그레이션 도구 없이 로컬 실행 시 사용)"""
    # 모델을 메타데이터에 등록
    import catalog.models.domain  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured.")
