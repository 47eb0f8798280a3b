"""Stored Idempotency-Key responses."""

from datetime import datetime

from sqlalchemy import delete, select

from bizops.domain.idempotency import IdempotencyKey
from bizops.repositories.base import BaseRepository


class IdempotencyRepository(BaseRepository[IdempotencyKey]):
    model = IdempotencyKey
    entity_name = "Idempotency key"

    async def get_by_hash(self, key_hash: str) -> IdempotencyKey | None:
        result = await self._session.execute(
            select(IdempotencyKey).where(IdempotencyKey.key_hash == key_hash)
        )
        return result.scalars().first()

    async def purge_expired(self, now: datetime) -> None:
        await self._session.execute(
            delete(IdempotencyKey).where(IdempotencyKey.expires_at <= now)
        )
