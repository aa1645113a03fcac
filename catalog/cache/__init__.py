"""
멱등성 저장소
설정(IDEMPOTENCY_BACKEND)에 따라 메모리 또는 Redis 구현을 선택
"""
import logging

from catalog.cache.base import CachedResponse, IdempotencyStore
from catalog.cache.memory_cache import MemoryIdempotencyStore
from catalog.cache.redis_cache import RedisIdempotencyStore, create_redis_client

__all__ = [
    'CachedResponse',
    'IdempotencyStore',
    'MemoryIdempotencyStore',
    'RedisIdempotencyStore',
    'create_redis_client',
    'create_idempotency_store',
]

logger = logging.getLogger(__name__)


def create_idempotency_store(settings) -> IdempotencyStore:
    """
    멱등성 저장소 인스턴스 생성

    Returns:
        IdempotencyStore: backend가 'redis'면 RedisIdempotencyStore, 그 외에는 MemoryIdempotencyStore
    """
    backend = (settings.IDEMPOTENCY_BACKEND or "memory").lower()
    if backend == "redis":
        logger.info("Using Redis idempotency store")
        return RedisIdempotencyStore(
            create_redis_client(settings.REDIS_URL),
            prefix=settings.IDEMPOTENCY_KEY_PREFIX,
        )
    if backend != "memory":
        raise ValueError(f"Unknown IDEMPOTENCY_BACKEND: {settings.IDEMPOTENCY_BACKEND}")
    logger.info("Using in-memory idempotency store")
    return MemoryIdempotencyStore()
