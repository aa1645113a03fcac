import time
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Type

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.cache.base import CachedResponse, IdempotencyStore
from catalog.core.exceptions import (
    AppException,
    ConflictError,
    DuplicateBusinessKeyError,
    InvalidReferenceError,
    NotFoundError,
)
from catalog.core.logging import StructuredLogger
from catalog.core.repository import BaseRepository
from catalog.core.schemas import ErrorResponse, SearchResponse
from catalog.services.relationship_guard import DependencyRule, RelationshipGuard
from catalog.services.search import SearchPaginateEngine


@dataclass(frozen=True)
class ResourceDescriptor:
    """리소스 종류별 메타데이터 (서비스 동작을 결정)"""
    name: str                                   # 경로/로그용 이름 (예: "games")
    label: str                                  # 메시지용 단수 라벨 (예: "game")
    model_class: Type[Any]
    repository_class: Type[BaseRepository]
    response_schema: Type[BaseModel]
    business_key: str                           # 고유 비즈니스 키 필드 (title, name)
    sortable_fields: Sequence[str]
    search_fields: Sequence[str]
    numeric_search_field: Optional[str] = None
    dependency_rule: Optional[DependencyRule] = None
    relation_fields: FrozenSet[str] = field(default_factory=frozenset)


class ResourceService:
    """
    세 리소스가 공유하는 생성/수정/삭제/조회 흐름.

    도메인 오류(NotFound, Conflict, InvalidReference)는 이 경계에서 잡혀
    CachedResponse 결과로 반환되며, 라우터까지 전파되지 않는다.
    하위 클래스는 참조 해석(_apply_relations)과 삭제 전 처리(_before_delete)만 제공한다.
    """

    descriptor: ResourceDescriptor

    def __init__(self, db: AsyncSession, idempotency_store: Optional[IdempotencyStore] = None):
        self.db = db
        self.idempotency_store = idempotency_store
        self.repository = self.descriptor.repository_class(db)
        self.guard = RelationshipGuard(self.descriptor.dependency_rule)
        self.search_engine = SearchPaginateEngine(
            self.repository,
            sortable_fields=self.descriptor.sortable_fields,
            search_fields=self.descriptor.search_fields,
            numeric_search_field=self.descriptor.numeric_search_field,
        )
        self.logger = StructuredLogger(f"service.{self.descriptor.name}")

    # --- 하위 클래스 훅 ---

    async def _apply_relations(self, entity: Any, data: BaseModel) -> None:
        """참조(외래키, 소유 객체) 적용. 해석 실패 시 InvalidReferenceError."""

    async def _before_delete(self, entity: Any) -> None:
        """삭제 직전 처리 (예: 연결 해제)"""

    # --- 응답 변환 ---

    def _to_schema(self, entity: Any) -> BaseModel:
        return self.descriptor.response_schema.model_validate(entity)

    def _entity_response(self, entity: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> CachedResponse:
        body = self._to_schema(entity).model_dump_json().encode("utf-8")
        return CachedResponse(status_code=status_code, body=body, headers=headers or {})

    @staticmethod
    def _error_response(error: AppException) -> CachedResponse:
        payload = ErrorResponse(status=error.status_code, message=error.message, error_code=error.error_code)
        return CachedResponse(status_code=error.status_code, body=payload.model_dump_json().encode("utf-8"))

    # --- 공통 유틸 ---

    def _scalar_values(self, data: BaseModel) -> Dict[str, Any]:
        return data.model_dump(exclude=set(self.descriptor.relation_fields))

    async def get_or_404(self, id_value: int) -> Any:
        entity = await self.repository.find_by_id(id_value)
        if entity is None:
            raise NotFoundError(self.descriptor.label.capitalize(), id_value)
        return entity

    async def _remember(self, token: str, outcome: CachedResponse) -> CachedResponse:
        """토큰이 있으면 결과를 저장. 같은 토큰의 동시 요청에서 먼저 저장된 응답은 덮어쓰지 않으며,
        호출자는 항상 자신의 결과를 받는다."""
        if token and self.idempotency_store is not None:
            await self.idempotency_store.record(token, outcome)
        return outcome

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return round((time.perf_counter() - start) * 1000, 2)

    # --- 조회 ---

    async def get(self, id_value: int) -> CachedResponse:
        """ID로 항목 조회 (200 또는 404)"""
        try:
            entity = await self.get_or_404(id_value)
        except NotFoundError as e:
            self.logger.info(e.message, operation="get", entity_id=id_value)
            return self._error_response(e)
        return self._entity_response(entity)

    async def list_all(self, filters: Optional[Dict[str, Any]] = None) -> List[BaseModel]:
        """전체 목록 (id 오름차순)"""
        start = time.perf_counter()
        entities = await self.repository.find_many(limit=0, filters=filters)
        self.logger.debug(
            f"Listed {len(entities)} {self.descriptor.label}(s)",
            operation="list",
            duration_ms=self._elapsed_ms(start),
            context={"filters": filters},
        )
        return [self._to_schema(entity) for entity in entities]

    async def search(
        self,
        q: Optional[str] = None,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        page: int = 0,
        size: int = 5,
        base_url: str = "",
    ) -> SearchResponse:
        """검색 + 페이지네이션"""
        query = self.search_engine.normalize(q=q, sort=sort, direction=direction, page=page, size=size)
        result = await self.search_engine.search(query, base_url=base_url)
        return SearchResponse(
            items=[self._to_schema(entity) for entity in result.items],
            total=result.total,
            total_pages=result.total_pages,
            has_more=result.has_more,
            next_page=result.next_page,
        )

    # --- 변경 ---

    async def create(self, data: BaseModel, idempotency_key: Optional[str] = None, location_base: str = "") -> CachedResponse:
        """
        새 항목 생성

        멱등 토큰이 있으면 저장된 응답을 그대로 재생한다. 중복 키(409)와 생성 성공(201)은
        토큰과 함께 저장되고, 잘못된 참조(400)는 저장하지 않는다.
        """
        start = time.perf_counter()
        token = (idempotency_key or "").strip()
        key_field = self.descriptor.business_key
        key_value = getattr(data, key_field)

        if token and self.idempotency_store is not None:
            cached = await self.idempotency_store.lookup(token)
            if cached is not None:
                self.logger.info(
                    f"Replaying stored response for {self.descriptor.label} creation",
                    operation="create",
                    context={"status_code": cached.status_code},
                )
                return cached

        self.logger.info(
            f"Attempting to create new {self.descriptor.label}",
            operation="create",
            context={"data": data.model_dump(mode="json")},
        )

        try:
            if await self.repository.exists({key_field: key_value}):
                raise DuplicateBusinessKeyError(self.descriptor.label, key_field, key_value)

            entity = self.descriptor.model_class(**self._scalar_values(data))
            await self._apply_relations(entity, data)
            await self.repository.add(entity)
            await self.db.commit()
        except ConflictError as e:
            await self.db.rollback()
            self.logger.warning(e.message, operation="create")
            return await self._remember(token, self._error_response(e))
        except IntegrityError as e:
            await self.db.rollback()
            conflict = DuplicateBusinessKeyError(self.descriptor.label, key_field, key_value)
            self.logger.warning(conflict.message, operation="create", context={"db_error": str(e.orig)})
            return await self._remember(token, self._error_response(conflict))
        except InvalidReferenceError as e:
            await self.db.rollback()
            self.logger.warning(e.message, operation="create")
            return self._error_response(e)
        except AppException as e:
            await self.db.rollback()
            self.logger.error(f"Failed to create {self.descriptor.label}", exception=e, operation="create")
            return self._error_response(e)
        except Exception as e:
            await self.db.rollback()
            self.logger.error(f"Failed to create {self.descriptor.label}", exception=e, operation="create")
            raise

        location = f"{location_base.rstrip('/')}/{entity.id}"
        outcome = self._entity_response(entity, status_code=201, headers={"Location": location})
        self.logger.info(
            f"Successfully created {self.descriptor.label}",
            operation="create",
            entity_id=entity.id,
            duration_ms=self._elapsed_ms(start),
        )
        return await self._remember(token, outcome)

    async def update(self, id_value: int, data: BaseModel) -> CachedResponse:
        """항목 전체 수정 (200, 404, 400)"""
        start = time.perf_counter()
        key_field = self.descriptor.business_key
        self.logger.info(
            f"Attempting to update {self.descriptor.label}",
            operation="update",
            entity_id=id_value,
            context={"data": data.model_dump(mode="json")},
        )

        try:
            entity = await self.get_or_404(id_value)
            for name, value in self._scalar_values(data).items():
                setattr(entity, name, value)
            await self._apply_relations(entity, data)
            await self.db.flush()
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            conflict = DuplicateBusinessKeyError(self.descriptor.label, key_field, getattr(data, key_field))
            self.logger.warning(conflict.message, operation="update", entity_id=id_value, context={"db_error": str(e.orig)})
            return self._error_response(conflict)
        except AppException as e:
            await self.db.rollback()
            self.logger.warning(e.message, operation="update", entity_id=id_value)
            return self._error_response(e)
        except Exception as e:
            await self.db.rollback()
            self.logger.error(f"Failed to update {self.descriptor.label}", exception=e, operation="update", entity_id=id_value)
            raise

        self.logger.info(
            f"Successfully updated {self.descriptor.label}",
            operation="update",
            entity_id=id_value,
            duration_ms=self._elapsed_ms(start),
        )
        return self._entity_response(entity)

    async def delete(self, id_value: int) -> CachedResponse:
        """항목 삭제 (204, 404, 409)"""
        start = time.perf_counter()
        self.logger.info(f"Attempting to delete {self.descriptor.label}", operation="delete", entity_id=id_value)

        try:
            entity = await self.get_or_404(id_value)
            await self.guard.ensure_deletable(self.db, id_value)
            await self._before_delete(entity)
            await self.repository.delete(entity)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            conflict = ConflictError(
                f"Cannot delete the {self.descriptor.label}. It is still referenced by other records."
            )
            self.logger.warning(conflict.message, operation="delete", entity_id=id_value, context={"db_error": str(e.orig)})
            return self._error_response(conflict)
        except AppException as e:
            await self.db.rollback()
            self.logger.warning(e.message, operation="delete", entity_id=id_value)
            return self._error_response(e)
        except Exception as e:
            await self.db.rollback()
            self.logger.error(f"Failed to delete {self.descriptor.label}", exception=e, operation="delete", entity_id=id_value)
            raise

        self.logger.info(
            f"Successfully deleted {self.descriptor.label}",
            operation="delete",
            entity_id=id_value,
            duration_ms=self._elapsed_ms(start),
        )
        return CachedResponse(status_code=204, media_type=None)
