import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from catalog.db.database import engine, init_models

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    logger.info("Lifespan: Startup")
    await init_models()
    yield
    logger.info("Lifespan: Shutdown")

    store = getattr(app.state, "idempotency_store", None)
    if store is not None:
        await store.close()

    limiter = getattr(app.state, "rate_limiter", None)
    if limiter is not None and limiter.redis is not None:
        await limiter.redis.aclose()

    await engine.dispose()
    logger.info("Database connections closed successfully.")
