from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

# Generic TypeVar for data payload
T = TypeVar('T')


class ErrorResponse(BaseModel):
    """표준 에러 응답 스키마"""
    success: bool = False
    status: int = Field(..., description="HTTP 상태 코드")
    message: str = Field(..., description="사람이 읽을 수 있는 오류 설명")
    error_code: Optional[str] = Field(None, description="기계 판독용 오류 코드 (예: conflict)")

    model_config = ConfigDict(json_schema_extra={
        "examples": [
            {
                "success": False,
                "status": 409,
                "message": "A genre with name 'RPG' is already registered.",
                "error_code": "conflict",
            }
        ]
    })


class SearchResponse(BaseModel, Generic[T]):
    """검색/페이지네이션 응답 형식"""
    items: List[T]
    total: int
    total_pages: int = Field(..., alias="totalPages")
    has_more: bool = Field(..., alias="hasMore")
    next_page: str = Field("", alias="nextPage")

    model_config = ConfigDict(populate_by_name=True)
