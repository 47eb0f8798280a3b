"""Audit logging middleware — records every state-changing request to audit_trail."""


import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from typing import Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Strong references to in-flight audit writes; the loop only keeps weak ones
_pending_tasks: set[asyncio.Task] = set()


def _looks_like_id(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def infer_entity(path: str) -> tuple[str, Optional[str]]:
    """``/api/v1/offers/<id>/accept`` -> ("offers", "<id>")."""
    parts = [p for p in path.strip("/").split("/") if p]
    if parts[:2] == ["api", "v1"]:
        parts = parts[2:]
    if parts and parts[0] == "public":
        parts = parts[1:]
    if not parts:
        return "unknown", None
    entity_id = next((p for p in parts[1:] if _looks_like_id(p)), None)
    return parts[0], entity_id


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs all write operations.

    Each audit row is written in a background task AFTER the response is
    produced so it never adds latency to the request. Failures in audit
    logging are logged and never raised to the caller.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if request.method in _WRITE_METHODS:
            # Fire-and-forget: don't await here so the response is not delayed
            task = asyncio.create_task(
                self._record(request, response.status_code, duration_ms)
            )
            _pending_tasks.add(task)
            task.add_done_callback(_pending_tasks.discard)

        return response

    async def _record(
        self, request: Request, status_code: int, duration_ms: int
    ) -> None:
        """Persist an audit row on its own session."""
        from bizops.db.base import async_session_factory
        from bizops.repositories.audit import AuditRepository

        path = request.url.path
        entity_type, entity_id = infer_entity(path)
        try:
            async with async_session_factory() as session:
                await AuditRepository(session).record(
                    ip_address=request.client.host if request.client else None,
                    user_agent=request.headers.get("user-agent"),
                    method=request.method,
                    path=path,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    status_code=status_code,
                    duration_ms=duration_ms,
                    description=f"{request.method} {path} -> {status_code} ({duration_ms}ms)",
                )
                await session.commit()
        except Exception:  # pragma: no cover
            logger.exception("Failed to write audit row for %s %s", request.method, path)
