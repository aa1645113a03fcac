import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from catalog.core.exceptions import (
    AppException,
    AuthenticationError,
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    RateLimitExceededError,
)
from catalog.core.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_json(exc: AppException, message: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            status=exc.status_code,
            message=message or exc.message,
            error_code=exc.error_code,
        ).model_dump(),
    )


def register_exception_handlers(app: FastAPI):
    """Register custom exception handlers for the FastAPI app."""

    @app.exception_handler(NotFoundError)
    async def not_found_exception_handler(request: Request, exc: NotFoundError):
        logger.info(f"Resource not found: {exc}")
        return _error_json(exc)

    @app.exception_handler(InvalidReferenceError)
    async def invalid_reference_exception_handler(request: Request, exc: InvalidReferenceError):
        logger.info(f"Invalid reference: {exc}")
        return _error_json(exc)

    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(request: Request, exc: ConflictError):
        logger.info(f"Conflict error: {exc}")
        return _error_json(exc)

    @app.exception_handler(AuthenticationError)
    async def authentication_exception_handler(request: Request, exc: AuthenticationError):
        logger.warning(f"Authentication error: {exc}")
        return _error_json(exc)

    @app.exception_handler(RateLimitExceededError)
    async def rate_limit_exception_handler(request: Request, exc: RateLimitExceededError):
        logger.warning(f"Rate limit exceeded: {exc}")
        response = _error_json(exc)
        if exc.retry_after is not None:
            response.headers["Retry-After"] = str(exc.retry_after)
        return response

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        logger.error(f"Application error: {exc}", exc_info=True)
        return _error_json(exc)

    # Keep the general Exception handler as a catch-all
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="An unexpected internal server error occurred.",
                error_code="internal_server_error",
            ).model_dump(),
        )

    logger.info("Standard exception handlers registered.")
