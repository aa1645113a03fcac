# tests/conftest.py
import os

# 앱 모듈 임포트 전에 테스트 환경 변수 설정
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog.cache.memory_cache import MemoryIdempotencyStore
from catalog.core.config import Settings
from catalog.core.dependencies import get_db
from catalog.db.database import Base, enable_sqlite_foreign_keys
from catalog.main import get_application
import catalog.models.domain  # noqa: F401  (메타데이터 등록)

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """각 테스트 함수를 위한 격리된 Settings 객체 (속도 제한 비활성화)"""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL=TEST_DB_URL,
        ENABLE_RATE_LIMITING=False,
        IDEMPOTENCY_BACKEND="memory",
    )


@pytest.fixture(scope="function")
async def db_engine():
    """인메모리 SQLite 엔진 생성 및 스키마 생성 (함수 스코프)"""
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def idempotency_store() -> MemoryIdempotencyStore:
    return MemoryIdempotencyStore()


def build_test_app(app_settings: Settings, session_factory: async_sessionmaker):
    """테스트 DB 세션을 주입한 앱 생성"""
    app = get_application(app_settings)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
def test_app(test_settings, session_factory):
    return build_test_app(test_settings, session_factory)


@pytest.fixture(scope="function")
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def api_headers(test_settings) -> Dict[str, str]:
    """버전 경로(/v1, /v2) 호출에 필요한 API 키 헤더"""
    return {test_settings.API_KEY_HEADER: test_settings.API_KEY}


@pytest.fixture
def app_factory(session_factory):
    """설정을 바꿔 앱을 새로 만들 때 사용"""
    def _build(app_settings: Settings):
        return build_test_app(app_settings, session_factory)
    return _build
