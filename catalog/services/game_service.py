"""
게임 서비스
개발사/장르 참조 해석과 삭제 전 장르 연결 해제를 담당한다.
"""
from typing import List

from catalog.core.exceptions import InvalidReferenceError
from catalog.core.service import ResourceDescriptor, ResourceService
from catalog.models.domain.game import Game
from catalog.models.enums import AgeRating
from catalog.repositories.developer_repository import DeveloperRepository
from catalog.repositories.game_repository import GameRepository
from catalog.repositories.genre_repository import GenreRepository
from catalog.schemas.game import Game as GameSchema, GameCreate

GAME_RESOURCE = ResourceDescriptor(
    name="games",
    label="game",
    model_class=Game,
    repository_class=GameRepository,
    response_schema=GameSchema,
    business_key="title",
    sortable_fields=("id", "title", "release_year"),
    search_fields=("title",),
    numeric_search_field="release_year",
    relation_fields=frozenset({"developer_id", "genre_ids"}),
)


class GameService(ResourceService):
    descriptor = GAME_RESOURCE
    repository: GameRepository

    async def _apply_relations(self, entity: Game, data: GameCreate) -> None:
        # 개발사 참조
        if data.developer_id is None:
            entity.developer = None
        else:
            developer = await DeveloperRepository(self.db).find_by_id(data.developer_id)
            if developer is None:
                raise InvalidReferenceError("developer", data.developer_id)
            entity.developer = developer

        # 장르 참조 (중복 제거, 입력 순서 유지)
        genre_ids = list(dict.fromkeys(data.genre_ids))
        found = {genre.id: genre for genre in await GenreRepository(self.db).find_by_ids(genre_ids)}
        for genre_id in genre_ids:
            if genre_id not in found:
                raise InvalidReferenceError("genre", genre_id)
        entity.genres = [found[genre_id] for genre_id in genre_ids]

    async def _before_delete(self, entity: Game) -> None:
        await self.repository.clear_genres(entity)

    async def list_by_age_rating(self, age_rating: AgeRating) -> List[GameSchema]:
        """연령 등급별 목록 (v2 목록은 FREE만 노출)"""
        games = await self.repository.list_by_age_rating(age_rating)
        self.logger.debug(
            f"Listed {len(games)} game(s) rated {age_rating.value}",
            operation="list",
            context={"age_rating": age_rating.value},
        )
        return [self._to_schema(game) for game in games]
