"""Generic async repository: reads, writes and hard deletes for one model."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.exceptions import RelatedRecordsError
from bizops.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository.

    Reads always refresh rows already in the session (``populate_existing``)
    so a read after a write sees the new values and reloaded relationships.
    Deletes are hard deletes; a foreign-key violation surfaces as
    :class:`RelatedRecordsError` (409).
    """

    model: type[ModelT]
    # Human-readable name used in error messages
    entity_name: str = "record"

    def __init__(self, session: AsyncSession):
        self._session = session

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self):
        return select(self.model).execution_options(populate_existing=True)

    def _column(self, name: str):
        return self.model.__table__.columns.get(name)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            self._base_query().where(self.model.id == entity_id)
        )
        return result.scalars().first()

    async def list_all(
        self,
        *,
        order_by: str = "created_at",
        order: str = "desc",
        filters: dict[str, Any] | None = None,
    ) -> list[ModelT]:
        """Return every row, optionally narrowed by column equality filters."""
        q = self._base_query()
        if filters:
            for col_name, value in filters.items():
                if value is not None and self._column(col_name) is not None:
                    q = q.where(getattr(self.model, col_name) == value)

        col = self._column(order_by)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())

        items = (await self._session.execute(q)).scalars().all()
        return list(items)

    async def exists(self, entity_id: str) -> bool:
        result = await self._session.execute(
            select(self.model.id).where(self.model.id == entity_id)
        )
        return result.first() is not None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(**kwargs)
        self._session.add(instance)
        await self._session.flush()  # populate id, surface constraint errors
        return await self.get_by_id(instance.id)  # type: ignore[return-value]

    async def update(self, instance: ModelT, **kwargs: Any) -> ModelT:
        kwargs.pop("id", None)
        for name, value in kwargs.items():
            column = self._column(name)
            if column is None:
                continue
            # None means "leave alone" for NOT NULL columns
            if value is None and not column.nullable:
                continue
            setattr(instance, name, value)
        await self._session.flush()
        return await self.get_by_id(instance.id)  # type: ignore[return-value]

    async def delete(self, entity_id: str) -> bool:
        try:
            result = await self._session.execute(
                delete(self.model).where(self.model.id == entity_id)
            )
            await self._session.flush()
        except IntegrityError as exc:
            raise RelatedRecordsError(self.entity_name) from exc
        return result.rowcount > 0
