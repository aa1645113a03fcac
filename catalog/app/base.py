import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.app.lifespan import lifespan
from catalog.cache import create_idempotency_store, create_redis_client
from catalog.core.config import Settings, settings
from catalog.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    app_settings = app_settings or settings
    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        description=app_settings.PROJECT_DESCRIPTION,
        version=app_settings.VERSION,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # 멱등성 저장소: 앱 수명 동안 하나, 종료 시 lifespan에서 정리
    app.state.idempotency_store = create_idempotency_store(app_settings)

    # 속도 제한 카운터: REDIS_URL이 있으면 Redis, 없으면 프로세스 메모리
    redis_client = create_redis_client(app_settings.REDIS_URL) if app_settings.REDIS_URL else None
    app.state.rate_limiter = RateLimiter(app_settings.RATE_LIMITS, redis_client=redis_client)

    if app_settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin).rstrip("/") for origin in app_settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.info(f"CORS middleware added with origins: {app_settings.BACKEND_CORS_ORIGINS}")
    else:
        logger.info("CORS middleware not added (no origins configured)")

    return app
