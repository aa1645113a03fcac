"""
Pydantic 스키마 - 게임
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.models.enums import AgeRating
from catalog.schemas.developer import DeveloperSummary
from catalog.schemas.genre import Genre


class GameBase(BaseModel):
    title: str = Field(..., description="게임 제목 (고유)", min_length=1, max_length=200)
    description: str = Field(..., description="게임 설명", min_length=1, max_length=2000)
    release_year: int = Field(..., description="출시 연도", ge=1950, le=9999)
    age_rating: AgeRating = Field(..., description="연령 등급")


class GameCreate(GameBase):
    developer_id: Optional[int] = Field(None, description="개발사 ID (선택)")
    genre_ids: List[int] = Field(default_factory=list, description="장르 ID 목록")


class GameUpdate(GameCreate):
    # 스칼라 필드는 무조건 덮어쓰고, 관계 필드는 다시 해석됨
    pass


class Game(GameBase):
    id: int
    developer: Optional[DeveloperSummary] = None
    genres: List[Genre] = []
    model_config = ConfigDict(from_attributes=True)
