"""Service catalog repository."""

from collections.abc import Iterable

from bizops.domain.catalog import Service
from bizops.repositories.base import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    model = Service
    entity_name = "Service"

    async def get_many(self, service_ids: Iterable[str]) -> dict[str, Service]:
        """Return ``{id: Service}`` for the ids that exist."""
        ids = {sid for sid in service_ids if sid}
        if not ids:
            return {}
        result = await self._session.execute(
            self._base_query().where(Service.id.in_(ids))
        )
        return {service.id: service for service in result.scalars().all()}
