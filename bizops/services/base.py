"""Entity service base — the pattern every CRUD service follows.

How to add a new service:
  1. Subclass EntityService with the repository, list table key and output schema
  2. Override ``_check_references`` to validate foreign keys in the payload
  3. Override ``_after_write`` for side effects (default flags, cache invalidation)

Rule: services raise AppException subclasses; routers never catch.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.cache import invalidate
from bizops.core.exceptions import BadRequestError, NotFoundError
from bizops.core.pagination import TableQueryParams
from bizops.repositories.base import BaseRepository
from bizops.services.listing import table_page

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


async def require_reference(repo: BaseRepository, entity_id: Optional[str]) -> None:
    """Reject a payload that points at a row that does not exist."""
    if entity_id and not await repo.exists(entity_id):
        raise BadRequestError(f"{repo.entity_name} '{entity_id}' does not exist")


class EntityService(Generic[ModelT]):
    repository_class: ClassVar[type[BaseRepository]]
    table: ClassVar[str]
    out_schema: ClassVar[type[BaseModel]]
    # Lookup-cache namespace to drop after writes (see services/lookups.py)
    cache_namespace: ClassVar[Optional[str]] = None

    def __init__(self, session: AsyncSession):
        self._session = session
        self._repo = self.repository_class(session)

    @property
    def entity_name(self) -> str:
        return self._repo.entity_name

    async def list_page(self, params: TableQueryParams, **filters: Any) -> dict:
        items = await self._repo.list_all(filters=filters or None)
        return table_page(self.table, items, self.out_schema, params)

    async def get(self, entity_id: str) -> ModelT:
        instance = await self._repo.get_by_id(entity_id)
        if not instance:
            raise NotFoundError(self.entity_name, entity_id)
        return instance

    async def create(self, data: BaseModel) -> ModelT:
        values = data.model_dump(exclude_none=True)
        await self._check_references(values)
        instance = await self._repo.create(**values)
        logger.info("Created %s %s", self.entity_name.lower(), instance.id)
        return await self._after_write(instance)

    async def update(self, entity_id: str, data: BaseModel) -> ModelT:
        instance = await self.get(entity_id)  # raises 404 if missing
        values = data.model_dump(exclude_unset=True)
        await self._check_references(values, current=instance)
        updated = await self._repo.update(instance, **values)
        return await self._after_write(updated)

    async def delete(self, entity_id: str) -> None:
        deleted = await self._repo.delete(entity_id)
        if not deleted:
            raise NotFoundError(self.entity_name, entity_id)
        logger.info("Deleted %s %s", self.entity_name.lower(), entity_id)
        self._invalidate()

    async def _check_references(self, values: dict[str, Any], current: Any = None) -> None:
        return None

    async def _after_write(self, instance: ModelT) -> ModelT:
        self._invalidate()
        return instance

    def _invalidate(self) -> None:
        if self.cache_namespace:
            invalidate(self.cache_namespace)
