from fastapi import APIRouter, FastAPI
import logging

from catalog.auth import api as auth_api
from catalog.developers import api as developers_api
from catalog.games import api as games_api
from catalog.genres import api as genres_api
from catalog.health import api as health_api

logger = logging.getLogger(__name__)

API_VERSIONS = (None, "v1", "v2")


def build_version_router(version=None) -> APIRouter:
    """한 API 버전(레거시는 None)의 리소스 라우터 묶음"""
    version_router = APIRouter()
    version_router.include_router(games_api.create_router(version), prefix="/games")
    version_router.include_router(genres_api.create_router(version), prefix="/genres")
    version_router.include_router(developers_api.create_router(version), prefix="/developers")
    return version_router


def setup_api(app: FastAPI) -> None:
    """API 라우터 등록 (레거시, v1, v2, 관리, 헬스)"""
    for version in API_VERSIONS:
        prefix = f"/{version}" if version else ""
        app.include_router(build_version_router(version), prefix=prefix)

    app.include_router(auth_api.router, prefix="/management")
    app.include_router(health_api.router, prefix="/health")
    logger.info("API routers registered: legacy, v1, v2, management, health")
