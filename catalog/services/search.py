"""
검색/페이지네이션 엔진

세 리소스(게임, 장르, 개발사)가 공유하는 검색 로직.
정렬 필드는 화이트리스트로 제한되며, 허용되지 않은 값은 id로 대체된다.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Sequence, TypeVar
from urllib.parse import urlencode

from sqlalchemy import false, func, or_

from catalog.core.repository import BaseRepository, is_storable_integer

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_SORT_FIELD = "id"


@dataclass
class SearchPage(Generic[T]):
    """한 페이지 분량의 검색 결과"""
    items: List[T]
    total: int
    total_pages: int
    has_more: bool
    next_page: str = ""


@dataclass(frozen=True)
class SearchQuery:
    """정규화된 검색 파라미터"""
    q: str = ""
    sort: str = DEFAULT_SORT_FIELD
    direction: str = "asc"
    page: int = 0
    size: int = 5


def resolve_direction(direction: Optional[str]) -> str:
    """'desc'(대소문자 무시)만 내림차순, 그 외 모든 값은 오름차순"""
    if direction and direction.strip().lower() == "desc":
        return "desc"
    return "asc"


def build_next_page_url(base_url: str, query: SearchQuery) -> str:
    """다음 페이지 URL 생성 (q, page, size, sort, direction 순서)"""
    params = urlencode({
        "q": query.q,
        "page": query.page + 1,
        "size": query.size,
        "sort": query.sort,
        "direction": query.direction,
    })
    return f"{base_url}?{params}"


class SearchPaginateEngine(Generic[T]):
    """
    리소스 종류별 검색 규칙을 적용해 레포지토리를 조회한다.

    Parameters:
        repository: 대상 모델의 BaseRepository
        sortable_fields: 허용된 정렬 필드 (id 포함)
        search_fields: 부분 일치(OR) 대상 텍스트 필드
        numeric_search_field: 질의가 정수일 때 정확히 일치시킬 필드 (없으면 None)
    """

    def __init__(
        self,
        repository: BaseRepository[T],
        sortable_fields: Sequence[str],
        search_fields: Sequence[str],
        numeric_search_field: Optional[str] = None,
    ):
        self.repository = repository
        self.sortable_fields = frozenset(sortable_fields) | {DEFAULT_SORT_FIELD}
        self.search_fields = tuple(search_fields)
        self.numeric_search_field = numeric_search_field

    def normalize(
        self,
        q: Optional[str] = None,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        page: int = 0,
        size: int = 5,
    ) -> SearchQuery:
        resolved_sort = sort if sort in self.sortable_fields else DEFAULT_SORT_FIELD
        return SearchQuery(
            q=(q or "").strip(),
            sort=resolved_sort,
            direction=resolve_direction(direction),
            page=max(page, 0),
            size=max(size, 1),
        )

    def _where_clause(self, q: str) -> Optional[Any]:
        if not q:
            return None

        model = self.repository.model_class
        if self.numeric_search_field:
            try:
                number = int(q)
            except ValueError:
                number = None
            if number is not None:
                if not is_storable_integer(number):
                    return false()
                return getattr(model, self.numeric_search_field) == number

        pattern = f"%{q.lower()}%"
        conditions = [func.lower(getattr(model, name)).like(pattern) for name in self.search_fields]
        return or_(*conditions)

    async def search(self, query: SearchQuery, base_url: str = "") -> SearchPage[T]:
        """정규화된 질의로 한 페이지를 조회하고 페이지 메타데이터를 계산"""
        where = self._where_clause(query.q)

        total = await self.repository.count(where=where)
        offset = query.page * query.size
        items: List[T] = []
        # 마지막 페이지 이후는 조회 없이 빈 페이지
        if offset < total:
            items = await self.repository.find_many(
                skip=offset,
                limit=min(query.size, total - offset),
                where=where,
                sort_by=query.sort,
                sort_order=query.direction,
            )

        total_pages = math.ceil(total / query.size) if total else 0
        has_more = query.page < total_pages - 1
        next_page = build_next_page_url(base_url, query) if has_more else ""

        logger.debug(
            f"Search on {self.repository.model_class.__name__}: q='{query.q}' page={query.page} "
            f"size={query.size} total={total}"
        )
        return SearchPage(
            items=items,
            total=total,
            total_pages=total_pages,
            has_more=has_more,
            next_page=next_page,
        )
