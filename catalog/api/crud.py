"""
리소스 공통 CRUD 라우터 생성
게임, 장르, 개발사 라우터가 같은 경로 구성을 공유한다.
"""
import logging
from typing import Any, Callable, List, Optional, Type

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from pydantic import BaseModel

from catalog.core.config import settings
from catalog.core.dependencies import get_idempotency_key
from catalog.core.schemas import ErrorResponse, SearchResponse
from catalog.core.service import ResourceService
from catalog.utils.response import collection_url, replay_response

logger = logging.getLogger(__name__)


def build_resource_router(
    *,
    label: str,
    get_service: Callable[..., Any],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
    idempotent: bool,
    list_items: Optional[Callable[..., Any]] = None,
    tags: Optional[List[str]] = None,
) -> APIRouter:
    """
    단일 리소스의 목록/검색/조회/생성/수정/삭제 라우터 생성

    Args:
        label: 문서용 리소스 라벨 (예: "game")
        get_service: ResourceService 의존성 함수
        idempotent: True이면 생성 시 Idempotency-Key 헤더를 사용 (버전 경로 전용)
        list_items: 목록 조회 재정의 (서비스를 받아 목록을 반환하는 코루틴)
    """
    router = APIRouter(tags=tags)

    @router.get(
        "",
        response_model=List[response_schema],
        summary=f"List all {label}s",
    )
    async def list_resources(service: ResourceService = Depends(get_service)):
        if list_items is not None:
            return await list_items(service)
        return await service.list_all()

    @router.get(
        "/search",
        response_model=SearchResponse[response_schema],
        response_model_by_alias=True,
        summary=f"Search {label}s with pagination",
    )
    async def search_resources(
        request: Request,
        q: Optional[str] = Query(None, description="검색어 (비어 있으면 전체)"),
        sort: str = Query("id", description="정렬 필드 (허용되지 않으면 id)"),
        direction: str = Query("asc", description="asc 또는 desc"),
        page: int = Query(0, description="0부터 시작하는 페이지 번호"),
        size: int = Query(settings.SEARCH_DEFAULT_PAGE_SIZE, description="페이지 크기"),
        service: ResourceService = Depends(get_service),
    ):
        search_url = collection_url(request)
        return await service.search(
            q=q,
            sort=sort,
            direction=direction,
            page=page,
            size=min(size, settings.SEARCH_MAX_PAGE_SIZE),
            base_url=search_url,
        )

    @router.get(
        "/{resource_id}",
        response_model=response_schema,
        responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
        summary=f"Get a {label} by id",
    )
    async def get_resource(
        resource_id: int = Path(..., description=f"{label} ID"),
        service: ResourceService = Depends(get_service),
    ) -> Response:
        return replay_response(await service.get(resource_id))

    if idempotent:
        async def resolve_key(key: Optional[str] = Depends(get_idempotency_key)) -> Optional[str]:
            return key
    else:
        async def resolve_key() -> Optional[str]:
            return None

    @router.post(
        "",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "존재하지 않는 참조"},
            status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "비즈니스 키 중복"},
        },
        summary=f"Create a {label}",
    )
    async def create_resource(
        request: Request,
        payload: create_schema,  # type: ignore[valid-type]
        idempotency_key: Optional[str] = Depends(resolve_key),
        service: ResourceService = Depends(get_service),
    ) -> Response:
        outcome = await service.create(
            payload,
            idempotency_key=idempotency_key,
            location_base=collection_url(request),
        )
        return replay_response(outcome)

    @router.put(
        "/{resource_id}",
        response_model=response_schema,
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
            status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        },
        summary=f"Replace a {label}",
    )
    async def update_resource(
        payload: update_schema,  # type: ignore[valid-type]
        resource_id: int = Path(..., description=f"{label} ID"),
        service: ResourceService = Depends(get_service),
    ) -> Response:
        return replay_response(await service.update(resource_id, payload))

    @router.delete(
        "/{resource_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        responses={
            status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
            status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "연결된 게임이 있음"},
        },
        summary=f"Delete a {label}",
    )
    async def delete_resource(
        resource_id: int = Path(..., description=f"{label} ID"),
        service: ResourceService = Depends(get_service),
    ) -> Response:
        return replay_response(await service.delete(resource_id))

    return router
