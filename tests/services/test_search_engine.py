import pytest

from catalog.models.domain import Developer, Game, Genre
from catalog.models.enums import AgeRating
from catalog.repositories.developer_repository import DeveloperRepository
from catalog.repositories.game_repository import GameRepository
from catalog.repositories.genre_repository import GenreRepository
from catalog.services.search import (
    SearchPaginateEngine,
    SearchQuery,
    build_next_page_url,
    resolve_direction,
)

SEARCH_URL = "http://test/v1/genres/search"


@pytest.fixture
async def seeded_genres(db_session):
    names = ["Action", "Adventure", "Puzzle", "RPG", "Racing", "Shooter", "Strategy"]
    for name in names:
        db_session.add(Genre(name=name, description=f"{name} games"))
    await db_session.commit()
    return names


@pytest.fixture
def genre_engine(db_session):
    return SearchPaginateEngine(
        GenreRepository(db_session),
        sortable_fields=("id", "name", "description"),
        search_fields=("name", "description"),
    )


@pytest.fixture
def game_engine(db_session):
    return SearchPaginateEngine(
        GameRepository(db_session),
        sortable_fields=("id", "title", "release_year"),
        search_fields=("title",),
        numeric_search_field="release_year",
    )


def test_resolve_direction_is_case_insensitive():
    assert resolve_direction("DESC") == "desc"
    assert resolve_direction("desc") == "desc"
    assert resolve_direction("asc") == "asc"
    assert resolve_direction("sideways") == "asc"
    assert resolve_direction(None) == "asc"


def test_normalize_clamps_page_and_size(genre_engine):
    query = genre_engine.normalize(q="  rpg ", sort="name", direction="Desc", page=-3, size=0)
    assert query == SearchQuery(q="rpg", sort="name", direction="desc", page=0, size=1)


def test_normalize_falls_back_to_id_for_unknown_sort(genre_engine):
    assert genre_engine.normalize(sort="bogus").sort == "id"
    assert genre_engine.normalize(sort="country").sort == "id"


def test_next_page_url_encodes_all_parameters():
    url = build_next_page_url(SEARCH_URL, SearchQuery(q="role playing", sort="name", direction="desc", page=1, size=3))
    assert url == f"{SEARCH_URL}?q=role+playing&page=2&size=3&sort=name&direction=desc"


@pytest.mark.asyncio
async def test_fixed_size_pages_cover_all_records_without_gaps(genre_engine, seeded_genres):
    """size=3으로 모든 페이지를 돌면 전체 항목이 중복/누락 없이 나옴"""
    seen = []
    page = 0
    while True:
        result = await genre_engine.search(genre_engine.normalize(sort="name", page=page, size=3), base_url=SEARCH_URL)
        assert result.total == len(seeded_genres)
        assert result.total_pages == 3
        seen.extend(genre.name for genre in result.items)
        if not result.has_more:
            assert result.next_page == ""
            break
        assert f"page={page + 1}" in result.next_page
        page += 1

    assert seen == sorted(seeded_genres)
    assert page == 2


@pytest.mark.asyncio
async def test_bogus_sort_is_equivalent_to_id(genre_engine, seeded_genres):
    by_bogus = await genre_engine.search(genre_engine.normalize(sort="bogus", size=10))
    by_id = await genre_engine.search(genre_engine.normalize(sort="id", size=10))
    assert [g.id for g in by_bogus.items] == [g.id for g in by_id.items]


@pytest.mark.asyncio
async def test_descending_order(genre_engine, seeded_genres):
    result = await genre_engine.search(genre_engine.normalize(sort="name", direction="DESC", size=2))
    assert [g.name for g in result.items] == ["Strategy", "Shooter"]


@pytest.mark.asyncio
async def test_genre_query_matches_name_or_description(db_session, genre_engine):
    db_session.add_all([
        Genre(name="Roguelike", description="Procedural dungeons"),
        Genre(name="Platformer", description="Jump and run, sometimes roguelike"),
        Genre(name="Sports", description="Ball games"),
    ])
    await db_session.commit()

    result = await genre_engine.search(genre_engine.normalize(q="ROGUE"))
    assert sorted(g.name for g in result.items) == ["Platformer", "Roguelike"]
    assert result.total == 2


@pytest.mark.asyncio
async def test_empty_result_has_zero_pages(genre_engine, seeded_genres):
    result = await genre_engine.search(genre_engine.normalize(q="no-such-genre"))
    assert result.total == 0
    assert result.total_pages == 0
    assert result.has_more is False
    assert result.next_page == ""


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(genre_engine, seeded_genres):
    result = await genre_engine.search(genre_engine.normalize(page=10, size=5))
    assert result.items == []
    assert result.total == len(seeded_genres)
    assert result.has_more is False


@pytest.mark.asyncio
async def test_numeric_game_query_matches_release_year_only(db_session, game_engine):
    db_session.add_all([
        Game(title="Skyward 2017", description="d", release_year=2011, age_rating=AgeRating.FREE),
        Game(title="Breath", description="d", release_year=2017, age_rating=AgeRating.NOT_UNDER_10),
    ])
    await db_session.commit()

    result = await game_engine.search(game_engine.normalize(q="2017"))
    assert [g.title for g in result.items] == ["Breath"]

    result = await game_engine.search(game_engine.normalize(q="sky"))
    assert [g.title for g in result.items] == ["Skyward 2017"]


@pytest.mark.asyncio
async def test_developer_query_matches_country(db_session):
    db_session.add_all([
        Developer(name="Nintendo", country="Japan"),
        Developer(name="CD Projekt", country="Poland"),
    ])
    await db_session.commit()
    engine = SearchPaginateEngine(
        DeveloperRepository(db_session),
        sortable_fields=("id", "name", "country"),
        search_fields=("name", "country"),
    )

    result = await engine.search(engine.normalize(q="jap"))
    assert [d.name for d in result.items] == ["Nintendo"]


@pytest.mark.asyncio
async def test_huge_page_number_returns_empty_page(genre_engine, seeded_genres):
    result = await genre_engine.search(genre_engine.normalize(page=10_000_000_000_000_000_000, size=5))
    assert result.items == []
    assert result.total == len(seeded_genres)
    assert result.total_pages == 2
    assert result.has_more is False
    assert result.next_page == ""


@pytest.mark.asyncio
async def test_last_page_holds_only_remaining_items(genre_engine, seeded_genres):
    result = await genre_engine.search(genre_engine.normalize(page=1, size=5))
    assert [g.name for g in result.items] == seeded_genres[5:]


@pytest.mark.asyncio
async def test_out_of_range_year_query_matches_nothing(db_session, game_engine):
    db_session.add(Game(title="Breath", description="d", release_year=2017, age_rating=AgeRating.FREE))
    await db_session.commit()

    result = await game_engine.search(game_engine.normalize(q="99999999999999999999"))
    assert result.items == []
    assert result.total == 0
