import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from redis.asyncio import Redis
from starlette.requests import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """속도 제한 확인 결과"""
    limited: bool
    count: int
    limit: int
    window: int
    reset_at: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)

    def retry_after(self, now: int) -> int:
        return max(self.reset_at - now, 1)


class RateLimiter:
    """
    API 요청 속도 제한 클래스

    경로 접두사(API 버전)별 고정 윈도우 알고리즘을 사용하며, 클라이언트 IP 단위로 계수한다.
    Redis 클라이언트가 주어지면 INCR/EXPIRE로, 없으면 프로세스 메모리에서 계수한다.
    """

    def __init__(
        self,
        limits: Dict[str, Dict[str, int]],
        redis_client: Optional[Redis] = None,
        clock: Callable[[], float] = time.time,
    ):
        # 가장 구체적인(긴) 접두사가 먼저 매칭되도록 정렬
        self.limits = dict(sorted(limits.items(), key=lambda item: len(item[0]), reverse=True))
        self.redis = redis_client
        self.clock = clock
        self._local_counts: Dict[str, Tuple[int, int]] = {}
        self._lock = threading.Lock()

    def get_limit_for_path(self, path: str) -> Optional[Tuple[str, Dict[str, int]]]:
        """
        경로에 적용할 제한 설정 조회

        Returns:
            (접두사, {"limit", "window"}) 또는 제한 대상이 아니면 None
        """
        for prefix, config in self.limits.items():
            if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                return prefix, config
        return None

    @staticmethod
    def get_client_ip(request: Request) -> str:
        # X-Forwarded-For 헤더를 확인 (프록시 뒤에 있는 경우)
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    async def _incr_redis(self, window_key: str, window: int) -> int:
        count = await self.redis.incr(window_key)
        # 첫 번째 요청인 경우 만료 시간 설정
        if count == 1:
            await self.redis.expire(window_key, window)
        return count

    def _incr_local(self, window_key: str, window_start: int) -> int:
        with self._lock:
            # 지난 윈도우 카운터 정리
            stale = [key for key, (_, start) in self._local_counts.items() if start < window_start]
            for key in stale:
                del self._local_counts[key]

            count, _ = self._local_counts.get(window_key, (0, window_start))
            count += 1
            self._local_counts[window_key] = (count, window_start)
            return count

    async def hit(self, request: Request) -> Optional[RateLimitResult]:
        """
        요청 한 건을 계수하고 제한 여부 반환

        Returns:
            RateLimitResult, 제한 대상 경로가 아니면 None
        """
        matched = self.get_limit_for_path(request.url.path)
        if matched is None:
            return None
        prefix, config = matched
        limit = int(config["limit"])
        window = int(config["window"])

        current_time = int(self.clock())
        window_start = current_time - (current_time % window)
        window_key = f"rate_limit:ip:{self.get_client_ip(request)}:{prefix}:{window_start}"

        if self.redis is not None:
            count = await self._incr_redis(window_key, window)
        else:
            count = self._incr_local(window_key, window_start)

        return RateLimitResult(
            limited=count > limit,
            count=count,
            limit=limit,
            window=window,
            reset_at=window_start + window,
        )
