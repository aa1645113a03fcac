import logging
import secrets
from typing import List, Optional

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from catalog.core.config import settings

logger = logging.getLogger(__name__)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """
    API 키 인증 미들웨어

    보호 경로(/v1, /v2)로 들어오는 요청의 API 키 헤더를 설정값과 비교한다.
    키가 없거나 다르면 401 {status, message}로 즉시 응답한다.
    """

    def __init__(
        self,
        app: ASGIApp,
        api_key: Optional[str] = None,
        header_name: Optional[str] = None,
        protected_prefixes: Optional[List[str]] = None,
    ):
        super().__init__(app)
        self.api_key = api_key or settings.API_KEY
        self.header_name = header_name or settings.API_KEY_HEADER
        self.protected_prefixes = protected_prefixes or settings.PROTECTED_PATH_PREFIXES

    def _is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix.rstrip("/") + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._is_protected(request.url.path):
            return await call_next(request)

        provided = request.headers.get(self.header_name)
        if not provided or not secrets.compare_digest(provided.encode("utf-8"), self.api_key.encode("utf-8")):
            logger.warning(f"Rejected request without valid API key: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "status": status.HTTP_401_UNAUTHORIZED,
                    "message": f"Access denied. Invalid or missing API key in the {self.header_name} header.",
                },
            )

        return await call_next(request)
