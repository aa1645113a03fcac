"""
Redis 멱등성 저장소 및 클라이언트 생성
여러 프로세스가 같은 토큰 공간을 공유해야 할 때 사용
"""
import json
import logging
from typing import Optional
from urllib.parse import urlparse

import redis.asyncio as redis
from redis.exceptions import RedisError

from catalog.cache.base import CachedResponse, IdempotencyStore

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379/0"


def create_redis_client(redis_url: Optional[str]) -> redis.Redis:
    """
    Redis 클라이언트 생성 (연결은 첫 명령 실행 시 이루어짐)

    Args:
        redis_url: redis://, rediss://, unix:// 형식의 URL

    Returns:
        redis.Redis: Redis 클라이언트
    """
    url = redis_url or DEFAULT_REDIS_URL
    parsed_url = urlparse(url)
    if parsed_url.scheme not in ("redis", "rediss", "unix"):
        logger.warning(f"Invalid Redis URL scheme: {parsed_url.scheme}. Using default URL.")
        url = DEFAULT_REDIS_URL

    return redis.from_url(
        url,
        decode_responses=False,
        socket_timeout=2.0,
        socket_connect_timeout=2.0,
        retry_on_timeout=True,
    )


class RedisIdempotencyStore(IdempotencyStore):
    """SET NX (TTL 없음)로 최초 응답만 보관"""

    def __init__(self, client: redis.Redis, prefix: str = "idempotency"):
        self.client = client
        self.prefix = prefix

    def _build_key(self, token: str) -> str:
        return f"{self.prefix}:{token}"

    @staticmethod
    def _serialize(response: CachedResponse) -> bytes:
        return json.dumps(response.to_dict()).encode("utf-8")

    @staticmethod
    def _deserialize(value: Optional[bytes]) -> Optional[CachedResponse]:
        if value is None:
            return None
        return CachedResponse.from_dict(json.loads(value.decode("utf-8")))

    async def lookup(self, token: str) -> Optional[CachedResponse]:
        cache_key = self._build_key(token)
        try:
            return self._deserialize(await self.client.get(cache_key))
        except RedisError as e:
            logger.error(f"Redis get error for idempotency key {cache_key}: {e}")
            raise

    async def record(self, token: str, response: CachedResponse) -> CachedResponse:
        cache_key = self._build_key(token)
        try:
            stored = await self.client.set(cache_key, self._serialize(response), nx=True)
            if stored:
                return response
            # 다른 요청이 먼저 기록함
            existing = self._deserialize(await self.client.get(cache_key))
            return existing or response
        except RedisError as e:
            logger.error(f"Redis set error for idempotency key {cache_key}: {e}")
            raise

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("Redis idempotency store connection closed")
