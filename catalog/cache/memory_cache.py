"""
메모리 멱등성 저장소
단일 프로세스용. 항목은 만료되지 않으며 재시작 시 사라진다.
"""
import logging
import threading
from typing import Dict, Optional

from catalog.cache.base import CachedResponse, IdempotencyStore

logger = logging.getLogger(__name__)


class MemoryIdempotencyStore(IdempotencyStore):
    """RLock으로 보호되는 dict 기반 저장소"""

    def __init__(self):
        self._cache: Dict[str, CachedResponse] = {}
        self._lock = threading.RLock()

    async def lookup(self, token: str) -> Optional[CachedResponse]:
        with self._lock:
            return self._cache.get(token)

    async def record(self, token: str, response: CachedResponse) -> CachedResponse:
        with self._lock:
            existing = self._cache.get(token)
            if existing is not None:
                logger.debug("Idempotency token already recorded; keeping first response")
                return existing
            self._cache[token] = response
            return response

    async def close(self) -> None:
        with self._lock:
            size = len(self._cache)
            self._cache.clear()
        logger.info(f"Memory idempotency store closed ({size} entries discarded)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
