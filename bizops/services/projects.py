"""Project service."""

from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.domain.project import Project
from bizops.repositories.organization import OrganizationRepository
from bizops.repositories.project import ProjectRepository
from bizops.schemas.project import ProjectOut
from bizops.services.base import EntityService, require_reference


class ProjectService(EntityService[Project]):
    repository_class = ProjectRepository
    table = "projects"
    out_schema = ProjectOut

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._orgs = OrganizationRepository(session)

    async def list_projects(self, params: TableQueryParams, organization_id: str | None = None) -> dict:
        return await self.list_page(params, organization_id=organization_id)

    async def _check_references(self, values, current=None) -> None:
        await require_reference(self._orgs, values.get("organization_id"))
