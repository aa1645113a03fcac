"""
멱등성 저장소 공통 타입
"""
import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CachedResponse:
    """
    재생 가능한 HTTP 응답 스냅샷.
    status_code, headers(Location 포함), body 바이트를 그대로 보관해 재전송 시 동일한 응답을 보장한다.
    """
    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    media_type: Optional[str] = "application/json"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status_code": self.status_code,
            "headers": dict(self.headers),
            "media_type": self.media_type,
            "body": base64.b64encode(self.body).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CachedResponse":
        return cls(
            status_code=int(data["status_code"]),
            headers=dict(data.get("headers") or {}),
            media_type=data.get("media_type"),
            body=base64.b64decode(data.get("body") or ""),
        )


class IdempotencyStore(ABC):
    """토큰 → 최초 응답 매핑. 한 번 기록된 항목은 덮어쓰거나 만료시키지 않는다."""

    @abstractmethod
    async def lookup(self, token: str) -> Optional[CachedResponse]:
        """저장된 응답 조회 (없으면 None)"""

    @abstractmethod
    async def record(self, token: str, response: CachedResponse) -> CachedResponse:
        """
        없을 때만 저장 (put-if-absent).

        Returns:
            실제로 보관된 응답. 먼저 기록된 응답이 있으면 그것을 반환한다.
        """

    async def close(self) -> None:
        """저장소 정리 (기본 구현은 아무 작업도 하지 않음)"""
