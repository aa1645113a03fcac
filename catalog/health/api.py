"""
헬스 체크 API
"""
import logging
from typing import Dict

from fastapi import APIRouter, Request, status

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "",
    summary="기본 시스템 상태 확인",
    response_model=Dict[str, str],
    responses={
        status.HTTP_200_OK: {
            "description": "시스템 정상 작동 중",
            "content": {
                "application/json": {
                    "example": {"status": "ok", "version": "1.0.0", "environment": "prod"}
                }
            },
        }
    },
)
async def health_check(request: Request) -> Dict[str, str]:
    app_settings = request.app.state.settings
    return {"status": "ok", "version": app_settings.VERSION, "environment": app_settings.ENVIRONMENT}
