"""
Pydantic 스키마 - 장르
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GenreBase(BaseModel):
    name: str = Field(..., description="장르 이름 (고유)", min_length=2, max_length=50)
    description: Optional[str] = Field(None, description="장르 설명", max_length=200)


class GenreCreate(GenreBase):
    pass


class GenreUpdate(GenreBase):
    # PUT은 전체 교체이므로 생성 스키마와 동일한 필드를 요구
    pass


class Genre(GenreBase):
    id: int
    model_config = ConfigDict(from_attributes=True)
