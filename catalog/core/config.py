import os
from typing import Any, Dict, List, Optional, Union

from pydantic import AnyHttpUrl, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 기본 설정
    PROJECT_NAME: str = "Game Catalog API"
    PROJECT_DESCRIPTION: str = "Catalog of games, genres and developers"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "dev"  # dev, test, prod
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False
    LOG_FILE: Optional[str] = None

    # CORS 설정
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 데이터베이스 설정
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "game_catalog"
    POSTGRES_PORT: str = "5432"
    SQLALCHEMY_DATABASE_URI: Optional[str] = Field(default=None, validate_default=True)
    DB_ECHO: bool = False
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    @field_validator("SQLALCHEMY_DATABASE_URI", mode="before")
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> Any:
        # DATABASE_URL이 있으면 우선 사용 (예: sqlite+aiosqlite:///./catalog.db)
        database_url_from_env = info.data.get("DATABASE_URL")
        if database_url_from_env:
            return database_url_from_env
        if isinstance(v, str):
            return v

        values = info.data
        db_name = values.get("POSTGRES_DB")
        if values.get("ENVIRONMENT") == "test":
            db_name = f"{db_name}_test"
        # asyncpg 드라이버 사용 명시
        return (
            f"postgresql+asyncpg://{values.get('POSTGRES_USER')}:{values.get('POSTGRES_PASSWORD')}"
            f"@{values.get('POSTGRES_SERVER')}:{values.get('POSTGRES_PORT')}/{db_name}"
        )

    # Redis 설정 (멱등성 저장소 / 속도 제한 카운터 공용)
    REDIS_URL: Optional[str] = None

    # 멱등성 설정
    IDEMPOTENCY_BACKEND: str = "memory"  # memory 또는 redis
    IDEMPOTENCY_HEADER: str = "Idempotency-Key"
    IDEMPOTENCY_KEY_PREFIX: str = "idempotency"

    # API 키 설정 (버전 경로 보호)
    API_KEY: str = "DEV_API_GAME_CATALOG_12345"
    API_KEY_HEADER: str = "X-API-KEY"
    PROTECTED_PATH_PREFIXES: List[str] = ["/v1", "/v2"]

    # API 속도 제한 설정 (경로 접두사별 고정 윈도우)
    ENABLE_RATE_LIMITING: bool = True
    RATE_LIMITS: Dict[str, Dict[str, int]] = {
        "/v1": {"limit": 5, "window": 1},
        "/v2": {"limit": 20, "window": 1},
    }

    # 검색 설정
    SEARCH_DEFAULT_PAGE_SIZE: int = 5
    SEARCH_MAX_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


def get_settings() -> Settings:
    """
    설정 인스턴스 생성

    ENVIRONMENT 값에 따라 `.env.<environment>` 파일을 함께 읽는다 (prod는 `.env`).

    Returns:
        Settings: 설정 객체
    """
    environment = os.getenv("ENVIRONMENT", "dev").lower()
    env_file = f".env.{environment}" if environment != "prod" else ".env"
    return Settings(_env_file=env_file)


settings = get_settings()
