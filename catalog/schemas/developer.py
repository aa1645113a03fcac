"""
Pydantic 스키마 - 개발사
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TechnicalSheetBase(BaseModel):
    history: Optional[str] = Field(None, description="개발사 역사", max_length=2000)
    notable_games: Optional[str] = Field(None, description="대표 게임", max_length=200)
    awards: Optional[str] = Field(None, description="수상 및 인정 내역")


class TechnicalSheet(TechnicalSheetBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


class DeveloperBase(BaseModel):
    name: str = Field(..., description="개발사 이름 (고유)", min_length=2, max_length=100)
    founded_on: Optional[date] = Field(None, description="설립일 (과거 날짜)")
    country: str = Field(..., description="설립 국가", min_length=1, max_length=80)

    @field_validator("founded_on")
    @classmethod
    def founded_in_past(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v >= date.today():
            raise ValueError("founding date must be in the past")
        return v


class DeveloperCreate(DeveloperBase):
    technical_sheet: Optional[TechnicalSheetBase] = Field(None, description="기술 시트 (선택)")


class DeveloperUpdate(DeveloperCreate):
    # technical_sheet를 null/생략하면 기존 기술 시트가 제거됨
    pass


class DeveloperSummary(BaseModel):
    """게임 응답에 포함되는 개발사 요약"""
    id: int
    name: str
    country: str
    model_config = ConfigDict(from_attributes=True)


class Developer(DeveloperBase):
    id: int
    technical_sheet: Optional[TechnicalSheet] = None
    model_config = ConfigDict(from_attributes=True)
