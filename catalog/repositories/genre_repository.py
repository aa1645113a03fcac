"""
장르 데이터 접근 로직 (Repository)
"""
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.repository import BaseRepository
from catalog.models.domain.genre import Genre


class GenreRepository(BaseRepository[Genre]):
    """장르 관련 데이터베이스 작업을 처리합니다."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Genre)
