from unittest.mock import AsyncMock

import pytest
from fastapi import status
from redis.exceptions import ConnectionError as RedisConnectionError

from catalog.core.config import Settings
from catalog.core.rate_limit import RateLimiter
from httpx import ASGITransport, AsyncClient

GAME = {
    "title": "Zelda",
    "description": "Adventure in Hyrule",
    "release_year": 2017,
    "age_rating": "NOT_UNDER_10",
}


@pytest.mark.asyncio
async def test_genre_game_delete_scenario(client, api_headers):
    """장르 생성 → 중복 409 → 장르를 가진 게임 생성 → 장르 삭제 409 → 게임 삭제 → 장르 삭제"""
    response = await client.post("/v1/genres", json={"name": "RPG"}, headers=api_headers)
    assert response.status_code == status.HTTP_201_CREATED
    genre = response.json()
    assert response.headers["Location"] == f"http://test/v1/genres/{genre['id']}"

    duplicate = await client.post("/v1/genres", json={"name": "RPG"}, headers=api_headers)
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["message"] == "A genre with name 'RPG' is already registered."

    response = await client.post("/v1/games", json={**GAME, "genre_ids": [genre["id"]]}, headers=api_headers)
    assert response.status_code == status.HTTP_201_CREATED
    game = response.json()
    assert [g["name"] for g in game["genres"]] == ["RPG"]

    blocked = await client.delete(f"/v1/genres/{genre['id']}", headers=api_headers)
    assert blocked.status_code == status.HTTP_409_CONFLICT
    assert "1 game(s)" in blocked.json()["message"]

    assert (await client.delete(f"/v1/games/{game['id']}", headers=api_headers)).status_code == status.HTTP_204_NO_CONTENT
    assert (await client.delete(f"/v1/genres/{genre['id']}", headers=api_headers)).status_code == status.HTTP_204_NO_CONTENT
    assert (await client.get(f"/v1/genres/{genre['id']}", headers=api_headers)).status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_idempotency_key_replays_identical_response(client, api_headers):
    headers = {**api_headers, "Idempotency-Key": "create-rpg-1"}

    first = await client.post("/v1/genres", json={"name": "RPG"}, headers=headers)
    second = await client.post("/v1/genres", json={"name": "RPG"}, headers=headers)

    assert first.status_code == second.status_code == status.HTTP_201_CREATED
    assert first.content == second.content
    assert first.headers["Location"] == second.headers["Location"]


@pytest.mark.asyncio
async def test_idempotency_tokens_are_shared_across_versions(client, api_headers):
    headers = {**api_headers, "Idempotency-Key": "shared-token"}

    first = await client.post("/v1/genres", json={"name": "RPG"}, headers=headers)
    replay = await client.post("/v2/genres", json={"name": "Strategy"}, headers=headers)

    assert replay.content == first.content
    listing = await client.get("/v2/genres", headers=api_headers)
    assert [g["name"] for g in listing.json()] == ["RPG"]


@pytest.mark.asyncio
async def test_legacy_surface_ignores_idempotency_key(client):
    headers = {"Idempotency-Key": "legacy-token"}

    first = await client.post("/genres", json={"name": "RPG"}, headers=headers)
    second = await client.post("/genres", json={"name": "RPG"}, headers=headers)

    assert first.status_code == status.HTTP_201_CREATED
    assert first.headers["Location"].startswith("http://test/genres/")
    assert second.status_code == status.HTTP_409_CONFLICT


@pytest.mark.asyncio
async def test_unknown_developer_is_bad_request_and_nothing_persisted(client, api_headers):
    response = await client.post("/v1/games", json={**GAME, "developer_id": 999}, headers=api_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error_code"] == "invalid_reference"
    assert (await client.get("/v1/games", headers=api_headers)).json() == []


@pytest.mark.asyncio
async def test_invalid_payload_is_rejected_before_core(client, api_headers):
    response = await client.post("/v1/games", json={**GAME, "release_year": 1900}, headers=api_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_v2_games_listing_only_returns_free_games(client, api_headers):
    await client.post("/v1/games", json={**GAME, "title": "Tetris", "age_rating": "FREE"}, headers=api_headers)
    await client.post("/v1/games", json={**GAME, "title": "Doom", "age_rating": "NOT_UNDER_18"}, headers=api_headers)

    v1 = await client.get("/v1/games", headers=api_headers)
    v2 = await client.get("/v2/games", headers=api_headers)

    assert sorted(g["title"] for g in v1.json()) == ["Doom", "Tetris"]
    assert [g["title"] for g in v2.json()] == ["Tetris"]


@pytest.mark.asyncio
async def test_search_wire_format(client, api_headers):
    for name in ["Action", "Adventure", "Puzzle"]:
        await client.post("/v1/genres", json={"name": name}, headers=api_headers)

    response = await client.get(
        "/v1/genres/search",
        params={"q": "", "sort": "bogus", "direction": "asc", "page": 0, "size": 2},
        headers=api_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert set(body) == {"items", "total", "totalPages", "hasMore", "nextPage"}
    assert [g["name"] for g in body["items"]] == ["Action", "Adventure"]
    assert body["total"] == 3
    assert body["totalPages"] == 2
    assert body["hasMore"] is True
    assert body["nextPage"] == "http://test/v1/genres/search?q=&page=1&size=2&sort=id&direction=asc"


@pytest.mark.asyncio
async def test_developer_lifecycle_over_http(client, api_headers):
    payload = {
        "name": "Nintendo",
        "country": "Japan",
        "founded_on": "1889-09-23",
        "technical_sheet": {"history": "Hanafuda cards"},
    }
    developer = (await client.post("/v1/developers", json=payload, headers=api_headers)).json()
    game = (await client.post("/v1/games", json={**GAME, "developer_id": developer["id"]}, headers=api_headers)).json()
    assert game["developer"]["name"] == "Nintendo"

    blocked = await client.delete(f"/v1/developers/{developer['id']}", headers=api_headers)
    assert blocked.status_code == status.HTTP_409_CONFLICT
    assert blocked.json()["error_code"] == "dependent_records"

    await client.delete(f"/v1/games/{game['id']}", headers=api_headers)
    response = await client.delete(f"/v1/developers/{developer['id']}", headers=api_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.content == b""


@pytest.mark.asyncio
async def test_update_replaces_resource(client, api_headers):
    genre = (await client.post("/v1/genres", json={"name": "RPG", "description": "Role playing"}, headers=api_headers)).json()

    response = await client.put(f"/v1/genres/{genre['id']}", json={"name": "JRPG"}, headers=api_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": genre["id"], "name": "JRPG", "description": None}
    missing = await client.put("/v1/genres/999", json={"name": "JRPG"}, headers=api_headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_versioned_paths_require_api_key(client):
    response = await client.get("/v1/games")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["status"] == 401

    wrong = await client.get("/v2/games", headers={"X-API-KEY": "wrong"})
    assert wrong.status_code == status.HTTP_401_UNAUTHORIZED

    non_ascii = await client.get("/v1/games", headers={"X-API-KEY": "cl\u00e9".encode("latin-1")})
    assert non_ascii.status_code == status.HTTP_401_UNAUTHORIZED
    assert non_ascii.json()["status"] == 401

    legacy = await client.get("/games")
    assert legacy.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_management_key_and_health_are_public(client, test_settings):
    key = await client.get("/management/keys/generate")
    assert key.status_code == status.HTTP_200_OK
    assert key.json()["api_key"] == test_settings.API_KEY

    health = await client.get("/health")
    assert health.json()["status"] == "ok"
    assert "X-Request-ID" in health.headers


class FixedClock:
    def __call__(self) -> float:
        return 1000.0


@pytest.mark.asyncio
async def test_rate_limit_returns_429_with_retry_after(app_factory):
    limits = {"/v1": {"limit": 2, "window": 60}, "/v2": {"limit": 20, "window": 60}}
    app_settings = Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite://",
        ENABLE_RATE_LIMITING=True,
        RATE_LIMITS=limits,
    )
    app = app_factory(app_settings)
    app.state.rate_limiter = RateLimiter(limits, clock=FixedClock())
    headers = {app_settings.API_KEY_HEADER: app_settings.API_KEY}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as limited_client:
        statuses = [(await limited_client.get("/v1/genres", headers=headers)).status_code for _ in range(3)]
        over = await limited_client.get("/v1/genres", headers=headers)
        other_version = await limited_client.get("/v2/genres", headers=headers)
        legacy = await limited_client.get("/genres")

    assert statuses == [200, 200, 429]
    assert over.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert over.json()["error_code"] == "rate_limit_exceeded"
    # 고정 시계 1000초, 60초 윈도우 -> 1020초에 재설정
    assert over.headers["Retry-After"] == "20"
    assert over.headers["X-RateLimit-Reset"] == "1020"
    assert other_version.status_code == status.HTTP_200_OK
    assert legacy.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_rate_limit_store_outage_lets_requests_through(app_factory):
    limits = {"/v1": {"limit": 2, "window": 60}}
    app_settings = Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite://",
        ENABLE_RATE_LIMITING=True,
        RATE_LIMITS=limits,
    )
    redis_client = AsyncMock()
    redis_client.incr.side_effect = RedisConnectionError("connection refused")
    app = app_factory(app_settings)
    app.state.rate_limiter = RateLimiter(limits, redis_client=redis_client, clock=FixedClock())
    headers = {app_settings.API_KEY_HEADER: app_settings.API_KEY}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as limited_client:
        responses = [await limited_client.get("/v1/genres", headers=headers) for _ in range(3)]

    assert [r.status_code for r in responses] == [200, 200, 200]
    assert "X-RateLimit-Limit" not in responses[0].headers
    assert redis_client.incr.await_count == 3


@pytest.mark.asyncio
async def test_search_with_huge_page_returns_empty_page(client, api_headers):
    await client.post("/v1/genres", json={"name": "RPG"}, headers=api_headers)

    response = await client.get(
        "/v1/genres/search", params={"page": "10000000000000000000", "size": 5}, headers=api_headers
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["items"] == []
    assert body["total"] == 1
    assert body["hasMore"] is False
    assert body["nextPage"] == ""


@pytest.mark.asyncio
async def test_out_of_range_id_is_not_found(client, api_headers):
    response = await client.get("/v1/games/99999999999999999999", headers=api_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error_code"] == "resource_not_found"
