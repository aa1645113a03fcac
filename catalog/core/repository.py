from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union
import logging

from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

T = TypeVar('T')  # 데이터베이스 모델 타입

logger = logging.getLogger(__name__)

# Integer 컬럼이 담을 수 있는 최대값 (32비트)
INTEGER_MAX = 2_147_483_647


def is_storable_integer(value: int) -> bool:
    return -INTEGER_MAX - 1 <= value <= INTEGER_MAX


class BaseRepository(Generic[T]):
    """
    모든 레포지토리의 기본 클래스.
    데이터베이스 액세스를 캡슐화하고 표준화합니다.
    """

    def __init__(self, db: AsyncSession, model_class: Type[T]):
        """
        Parameters:
            db: SQLAlchemy 비동기 세션
            model_class: 이 레포지토리가 다루는 모델 클래스
        """
        if db is None:
            raise ValueError("Database session is required for BaseRepository.")
        if not model_class:
            raise ValueError("Model class is required for BaseRepository.")

        self.db = db
        self.model_class = model_class
        self.id_field_name = "id"

    def _apply_filters(self, query, filters: Optional[Dict[str, Any]] = None):
        """
        쿼리에 필터 조건 적용 (AND 결합).
        Supports equality and the operators 'in', 'icontains'.
        Example: filters = {"age_rating": "FREE", "title__icontains": "zelda"}
        """
        if not filters:
            return query

        for key, value in filters.items():
            if value is None:
                continue

            field_name, _, operator = key.partition("__")
            if not hasattr(self.model_class, field_name):
                logger.warning(f"Filtering skipped: Field '{field_name}' not found on model {self.model_class.__name__}.")
                continue

            column = getattr(self.model_class, field_name)
            if operator == "in":
                query = query.where(column.in_(list(value)))
            elif operator == "icontains":
                query = query.where(func.lower(column).like(f"%{str(value).lower()}%"))
            elif not operator:
                query = query.where(column == value)
            else:
                logger.warning(f"Unsupported filter operator '{operator}' for key '{key}'. Skipping.")

        return query

    def _apply_ordering(self, query, sort_by: Optional[str], sort_order: str):
        """정렬 적용. id가 아닌 필드로 정렬하면 id를 보조 정렬키로 추가해 페이지 경계를 안정화한다."""
        id_column = getattr(self.model_class, self.id_field_name)
        direction = desc if sort_order.lower() == "desc" else asc

        if sort_by and sort_by != self.id_field_name:
            if not hasattr(self.model_class, sort_by):
                logger.warning(f"Sorting skipped: Sort field '{sort_by}' not found on model {self.model_class.__name__}.")
                return query.order_by(direction(id_column))
            return query.order_by(direction(getattr(self.model_class, sort_by)), direction(id_column))
        return query.order_by(direction(id_column))

    async def find_one(self, filters: Dict[str, Any]) -> Optional[T]:
        """
        필터 조건에 맞는 단일 항목 조회

        Parameters:
            filters: 필터 조건 딕셔너리 (예: {"id": 1})

        Returns:
            조건에 맞는 항목 또는 None
        """
        query = self._apply_filters(select(self.model_class), filters)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def find_by_id(self, item_id: Union[int, str]) -> Optional[T]:
        # 컬럼 범위를 벗어난 ID는 저장될 수 없으므로 조회하지 않음
        if isinstance(item_id, int) and not is_storable_integer(item_id):
            return None
        return await self.find_one({self.id_field_name: item_id})

    async def find_by_ids(self, item_ids: Sequence[int]) -> List[T]:
        ids = [item_id for item_id in item_ids if is_storable_integer(item_id)]
        if not ids:
            return []
        return await self.find_many(limit=0, filters={f"{self.id_field_name}__in": ids})

    async def find_many(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        where: Optional[ColumnElement] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[T]:
        """
        필터링, 정렬, 페이지네이션을 지원하는 다중 항목 조회

        Parameters:
            skip: 건너뛸 항목 수 (0 이상)
            limit: 반환할 최대 항목 수 (0이면 제한 없음)
            filters: AND 결합 필터 조건 딕셔너리
            where: 추가 SQL 조건식 (예: OR 검색 조건)
            sort_by: 정렬 기준 필드 이름
            sort_order: 정렬 방향 ("asc" 또는 "desc")

        Returns:
            조건에 맞는 항목 목록
        """
        if skip < 0:
            raise ValueError("Skip must be non-negative.")
        if limit < 0:
            raise ValueError("Limit must be non-negative.")

        query = self._apply_filters(select(self.model_class), filters)
        if where is not None:
            query = query.where(where)
        query = self._apply_ordering(query, sort_by, sort_order)

        if skip > 0:
            query = query.offset(skip)
        if limit > 0:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
        where: Optional[ColumnElement] = None,
    ) -> int:
        """필터 조건에 맞는 항목 개수 조회"""
        id_column = getattr(self.model_class, self.id_field_name)
        query = self._apply_filters(select(func.count(id_column)).select_from(self.model_class), filters)
        if where is not None:
            query = query.where(where)
        result = await self.db.execute(query)
        return result.scalar_one_or_none() or 0

    async def exists(self, filters: Dict[str, Any]) -> bool:
        return await self.count(filters=filters) > 0

    # --- Create, Delete methods ---

    async def add(self, item: T) -> T:
        """새 항목을 세션에 추가하고 flush하여 ID를 확보"""
        self.db.add(item)
        await self.db.flush()
        logger.debug(f"Created {self.model_class.__name__} record with ID: {getattr(item, self.id_field_name, 'N/A')}")
        return item

    async def delete(self, item: T) -> None:
        """항목 물리 삭제"""
        await self.db.delete(item)
        await self.db.flush()
        logger.info(f"Hard deleted {self.model_class.__name__} record with ID: {getattr(item, self.id_field_name, 'N/A')}")
