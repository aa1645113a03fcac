import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from catalog.core.exceptions import RateLimitExceededError
from catalog.core.schemas import ErrorResponse

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    요청 속도 제한 미들웨어

    API 버전 경로별 고정 윈도우 제한을 적용한다. 제한기는 app.state.rate_limiter에서 가져온다.
    """

    def __init__(self, app: ASGIApp, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        limiter = getattr(request.app.state, "rate_limiter", None)
        if not self.enabled or limiter is None:
            return await call_next(request)

        try:
            result = await limiter.hit(request)
        except RedisError as e:
            # 카운터 저장소 장애 시 제한 없이 요청 처리
            logger.error(f"Error during rate limiting check: {e}", exc_info=True)
            return await call_next(request)

        if result is None:
            return await call_next(request)

        headers = {
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(result.reset_at),
        }

        if result.limited:
            retry_after = result.retry_after(int(limiter.clock()))
            error = RateLimitExceededError(result.limit, result.window, retry_after)
            logger.warning(
                f"Rate limit exceeded for {limiter.get_client_ip(request)} on {request.url.path}. "
                f"Count: {result.count}/{result.limit}"
            )
            headers["Retry-After"] = str(retry_after)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=ErrorResponse(
                    status=error.status_code, message=error.message, error_code=error.error_code
                ).model_dump(),
                headers=headers,
            )

        response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response
