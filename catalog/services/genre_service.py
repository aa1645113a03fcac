"""
장르 서비스
"""
from catalog.core.service import ResourceDescriptor, ResourceService
from catalog.models.domain.genre import Genre
from catalog.repositories.genre_repository import GenreRepository
from catalog.schemas.genre import Genre as GenreSchema
from catalog.services.relationship_guard import GenreGamesRule

GENRE_RESOURCE = ResourceDescriptor(
    name="genres",
    label="genre",
    model_class=Genre,
    repository_class=GenreRepository,
    response_schema=GenreSchema,
    business_key="name",
    sortable_fields=("id", "name", "description"),
    search_fields=("name", "description"),
    dependency_rule=GenreGamesRule(),
)


class GenreService(ResourceService):
    """장르는 참조 필드가 없으므로 공통 흐름만 사용"""
    descriptor = GENRE_RESOURCE
