"""Helpers shared by the v1 routers: Idempotency-Key replay and client IP."""

from collections.abc import Awaitable, Callable
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.services.idempotency import IdempotencyService

IDEMPOTENCY_HEADER = "Idempotency-Key"
REPLAY_HEADER = "Idempotent-Replayed"


def client_ip(request: Request) -> Optional[str]:
    """First hop of X-Forwarded-For, else X-Real-IP, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


async def idempotent_create(
    request: Request,
    session: AsyncSession,
    scope: str,
    create: Callable[[], Awaitable[BaseModel]],
) -> JSONResponse:
    """Run ``create`` once per Idempotency-Key; repeats replay the stored body.

    ``create`` returns the output schema for the new row; the response is the
    usual ``{"data": ...}`` envelope with status 201.
    """
    key = (request.headers.get(IDEMPOTENCY_HEADER) or "").strip()
    service = IdempotencyService(session)

    if key:
        stored = await service.lookup(scope, key)
        if stored is not None:
            return JSONResponse(
                status_code=stored.status_code,
                content=stored.response_data,
                headers={REPLAY_HEADER: "true"},
            )

    out = await create()
    body = {"data": out.model_dump(mode="json", by_alias=True)}
    if key:
        await service.store(scope, key, status.HTTP_201_CREATED, body)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=body)
