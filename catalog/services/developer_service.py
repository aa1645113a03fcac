"""
개발사 서비스
기술 시트는 개발사와 생명주기를 공유한다.
"""
from catalog.core.service import ResourceDescriptor, ResourceService
from catalog.models.domain.developer import Developer, TechnicalSheet
from catalog.repositories.developer_repository import DeveloperRepository
from catalog.schemas.developer import Developer as DeveloperSchema, DeveloperCreate
from catalog.services.relationship_guard import DeveloperGamesRule

DEVELOPER_RESOURCE = ResourceDescriptor(
    name="developers",
    label="developer",
    model_class=Developer,
    repository_class=DeveloperRepository,
    response_schema=DeveloperSchema,
    business_key="name",
    sortable_fields=("id", "name", "country"),
    search_fields=("name", "country"),
    dependency_rule=DeveloperGamesRule(),
    relation_fields=frozenset({"technical_sheet"}),
)


class DeveloperService(ResourceService):
    descriptor = DEVELOPER_RESOURCE

    async def _apply_relations(self, entity: Developer, data: DeveloperCreate) -> None:
        """
        기술 시트 적용
        - 입력이 null이면 기존 시트 제거 (delete-orphan)
        - 기존 시트가 있으면 하위 필드 덮어쓰기
        - 없으면 새로 생성
        """
        sheet_data = data.technical_sheet
        if sheet_data is None:
            entity.technical_sheet = None
            return

        values = sheet_data.model_dump()
        if entity.technical_sheet is not None:
            for name, value in values.items():
                setattr(entity.technical_sheet, name, value)
        else:
            entity.technical_sheet = TechnicalSheet(**values)
