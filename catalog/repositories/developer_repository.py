"""
개발사 데이터 접근 로직 (Repository)
"""
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.repository import BaseRepository
from catalog.models.domain.developer import Developer


class DeveloperRepository(BaseRepository[Developer]):
    """개발사 관련 데이터베이스 작업을 처리합니다. 기술 시트는 개발사와 함께 로드된다."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Developer)
