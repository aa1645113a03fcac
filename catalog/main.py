"""
FastAPI 애플리케이션 진입점
애플리케이션 생성 및 설정을 app 모듈에 위임
"""
import logging
from typing import Optional

from fastapi import FastAPI

from catalog.api.api import setup_api
from catalog.app.base import create_app
from catalog.app.exceptions import register_exception_handlers
from catalog.app.middlewares import register_middlewares
from catalog.core.config import Settings, settings
from catalog.core.logging import configure_logging

# 애플리케이션 생성 전 로깅 설정 적용
configure_logging(
    log_level=settings.LOG_LEVEL,
    json_logs=settings.JSON_LOGS,
    log_file=settings.LOG_FILE,
)

logger = logging.getLogger(__name__)


def get_application(app_settings: Optional[Settings] = None) -> FastAPI:
    """앱 생성 → 미들웨어 → 예외 핸들러 → 라우터 순으로 조립"""
    application = create_app(app_settings)
    register_middlewares(application)
    register_exception_handlers(application)
    setup_api(application)
    return application


app = get_application()
