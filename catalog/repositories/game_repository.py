"""
게임 데이터 접근 로직 (Repository)
"""
import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.repository import BaseRepository
from catalog.models.domain.game import Game, game_genres
from catalog.models.enums import AgeRating

logger = logging.getLogger(__name__)


class GameRepository(BaseRepository[Game]):
    """게임 및 게임-장르 연결 관련 데이터베이스 작업을 처리합니다."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Game)

    async def list_by_age_rating(self, age_rating: AgeRating) -> List[Game]:
        """특정 연령 등급의 게임 목록 (id 오름차순)"""
        return await self.find_many(limit=0, filters={"age_rating": age_rating})

    async def count_by_developer(self, developer_id: int) -> int:
        """해당 개발사를 참조하는 게임 수"""
        return await self.count(filters={"developer_id": developer_id})

    async def count_by_genre(self, genre_id: int) -> int:
        """해당 장르를 참조하는 game_genres 연결 행 수"""
        result = await self.db.execute(
            select(func.count()).select_from(game_genres).where(game_genres.c.genre_id == genre_id)
        )
        return result.scalar_one()

    async def clear_genres(self, game: Game) -> None:
        """게임의 장르 연결을 모두 해제 (게임 삭제 전 단계)"""
        game.genres = []
        await self.db.flush()
        logger.debug(f"Cleared genre links for Game ID: {game.id}")
