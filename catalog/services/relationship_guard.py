"""
삭제 전 종속 레코드 검사 (Relationship Guard)

개발사나 장르를 참조하는 게임이 남아 있으면 삭제를 막는다.
검사와 삭제는 별도 단계이며, 남은 경합은 DB 외래키 제약이 잡아낸다.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.exceptions import DependentRecordsError
from catalog.repositories.game_repository import GameRepository

logger = logging.getLogger(__name__)


class DependencyRule:
    """대상 레코드에 연결된 종속 레코드 수를 세는 규칙"""
    resource_label: str = "record"
    dependent_label: str = "record"

    async def count_dependents(self, db: AsyncSession, resource_id: int) -> int:
        raise NotImplementedError


class DeveloperGamesRule(DependencyRule):
    """developer_id가 해당 개발사인 게임 수"""
    resource_label = "developer"
    dependent_label = "game"

    async def count_dependents(self, db: AsyncSession, resource_id: int) -> int:
        return await GameRepository(db).count_by_developer(resource_id)


class GenreGamesRule(DependencyRule):
    """해당 장르를 참조하는 game_genres 연결 수"""
    resource_label = "genre"
    dependent_label = "game"

    async def count_dependents(self, db: AsyncSession, resource_id: int) -> int:
        return await GameRepository(db).count_by_genre(resource_id)


class RelationshipGuard:
    """규칙이 없으면 (게임 등) 검사 없이 통과"""

    def __init__(self, rule: Optional[DependencyRule] = None):
        self.rule = rule

    async def ensure_deletable(self, db: AsyncSession, resource_id: int) -> None:
        """
        종속 레코드가 하나라도 있으면 DependentRecordsError(409) 발생

        Raises:
            DependentRecordsError: 종속 레코드 수가 0보다 클 때
        """
        if self.rule is None:
            return

        count = await self.rule.count_dependents(db, resource_id)
        if count > 0:
            logger.info(
                f"Delete blocked: {self.rule.resource_label} {resource_id} has {count} "
                f"linked {self.rule.dependent_label}(s)"
            )
            raise DependentRecordsError(self.rule.resource_label, self.rule.dependent_label, count)
