"""Organization and Contact services."""

from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.domain.organization import Contact, Organization
from bizops.domain.project import Project
from bizops.repositories.organization import ContactRepository, OrganizationRepository
from bizops.repositories.project import ProjectRepository
from bizops.schemas.organization import ContactOut, OrganizationOut
from bizops.services.base import EntityService, require_reference


class OrganizationService(EntityService[Organization]):
    repository_class = OrganizationRepository
    table = "organizations"
    out_schema = OrganizationOut
    cache_namespace = "organizations"

    async def list_contacts(self, organization_id: str) -> list[Contact]:
        await self.get(organization_id)
        return await ContactRepository(self._session).list_all(
            order_by="name", order="asc", filters={"organization_id": organization_id}
        )

    async def list_projects(self, organization_id: str) -> list[Project]:
        await self.get(organization_id)
        return await ProjectRepository(self._session).list_all(
            filters={"organization_id": organization_id}
        )


class ContactService(EntityService[Contact]):
    repository_class = ContactRepository
    table = "contacts"
    out_schema = ContactOut

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._orgs = OrganizationRepository(session)

    async def list_contacts(self, params: TableQueryParams, organization_id: str | None = None) -> dict:
        return await self.list_page(params, organization_id=organization_id)

    async def _check_references(self, values, current=None) -> None:
        await require_reference(self._orgs, values.get("organization_id"))
