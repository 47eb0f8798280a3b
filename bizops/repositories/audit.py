"""Audit trail repository (insert only)."""

from bizops.domain.audit import AuditTrail
from bizops.repositories.base import BaseRepository


class AuditRepository(BaseRepository[AuditTrail]):
    model = AuditTrail
    entity_name = "Audit entry"

    async def record(self, **kwargs) -> None:
        self._session.add(AuditTrail(**kwargs))
        await self._session.flush()
