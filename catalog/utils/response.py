from fastapi import Request, Response

from catalog.cache.base import CachedResponse


def replay_response(outcome: CachedResponse) -> Response:
    """서비스 결과(CachedResponse)를 그대로 HTTP 응답으로 변환

    Args:
        outcome: 상태 코드, 헤더, 본문 바이트를 담은 결과

    Returns:
        저장된 바이트를 변형 없이 담은 Response
    """
    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        headers=dict(outcome.headers),
        media_type=outcome.media_type,
    )


def collection_url(request: Request) -> str:
    """쿼리 문자열을 제외한 현재 컬렉션 URL (Location/nextPage 생성용)"""
    return str(request.url.replace(query="")).rstrip("/")
