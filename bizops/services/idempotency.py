"""Idempotency-Key support for POST creates.

The first successful (2xx) response for a ``(scope, key)`` pair is stored for
``settings.idempotency_window_hours`` and replayed verbatim for repeats of
the same key inside that window.
"""

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.config import settings
from bizops.domain.idempotency import IdempotencyKey
from bizops.domain.mixins import utcnow
from bizops.repositories.idempotency import IdempotencyRepository

logger = logging.getLogger(__name__)


def hash_key(scope: str, key: str) -> str:
    return hashlib.sha256(f"{scope}:{key}".encode("utf-8")).hexdigest()


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class IdempotencyService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._repo = IdempotencyRepository(session)

    async def lookup(self, scope: str, key: str) -> Optional[IdempotencyKey]:
        """Return the stored response for this key, or None if absent/expired."""
        row = await self._repo.get_by_hash(hash_key(scope, key))
        if row is None:
            return None
        if _aware(row.expires_at) <= utcnow():
            await self._repo.delete(row.id)
            return None
        logger.info("Replaying stored response for idempotency scope %s", scope)
        return row

    async def store(self, scope: str, key: str, status_code: int, response_data: Any) -> None:
        if not 200 <= status_code < 300:
            return
        now = utcnow()
        await self._repo.purge_expired(now)
        await self._repo.create(
            key_hash=hash_key(scope, key),
            scope=scope,
            status_code=status_code,
            response_data=response_data,
            expires_at=now + timedelta(hours=settings.idempotency_window_hours),
        )
