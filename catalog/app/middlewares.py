import logging
import time
import uuid

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from catalog.middlewares.auth_middleware import ApiKeyMiddleware
from catalog.middlewares.rate_limit_middleware import RateLimitMiddleware

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        logger.info(f"Request started: {request.method} {request.url.path} (ID: {request_id})")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} (ID: {request_id}) - {e}", exc_info=True)
            raise
        response.headers["X-Request-ID"] = request_id
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Request finished: {request.method} {request.url.path} - {response.status_code} "
            f"in {elapsed_ms:.1f}ms (ID: {request_id})"
        )
        return response


def register_middlewares(app: FastAPI) -> None:
    """Register middlewares for the FastAPI app.

    Starlette는 나중에 추가된 미들웨어를 바깥쪽에 둔다:
    RequestID → 속도 제한 → API 키 → 라우터 순으로 요청이 흐른다.
    """
    app_settings = app.state.settings
    app.add_middleware(
        ApiKeyMiddleware,
        api_key=app_settings.API_KEY,
        header_name=app_settings.API_KEY_HEADER,
        protected_prefixes=app_settings.PROTECTED_PATH_PREFIXES,
    )
    app.add_middleware(RateLimitMiddleware, enabled=app_settings.ENABLE_RATE_LIMITING)
    app.add_middleware(RequestIDMiddleware)
