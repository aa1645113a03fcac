"""
API 키 관리 API (개발용 데모)
"""
import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Key Management"])


class ApiKeyResponse(BaseModel):
    api_key: str
    warning: str


@router.get(
    "/keys/generate",
    response_model=ApiKeyResponse,
    summary="개발용 API 키 발급 (데모 전용)",
)
async def generate_key(request: Request):
    """설정된 고정 개발 키를 반환한다. 새 키를 만들거나 저장하지 않는다."""
    app_settings = request.app.state.settings
    logger.info("Development API key requested")
    return ApiKeyResponse(
        api_key=app_settings.API_KEY,
        warning="This key is fixed and intended for the DEV environment only.",
    )
