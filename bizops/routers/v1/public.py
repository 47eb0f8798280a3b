"""Public (unauthenticated) offer and project pages."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.response import DataResponse
from bizops.db.base import get_db
from bizops.routers.v1.common import client_ip
from bizops.schemas.public import (
    PublicAcceptIn,
    PublicAcceptOut,
    PublicOfferOut,
    PublicProjectOut,
)
from bizops.services.public import PublicService

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/offers/{offer_id}", response_model=DataResponse[PublicOfferOut])
async def view_offer(
    offer_id: str,
    request: Request,
    email: Optional[str] = Query(default=None, description="Viewer email; logs the visit when given"),
    session: AsyncSession = Depends(get_db),
):
    offer = await PublicService(session).view_offer(
        offer_id,
        email=email,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return {"data": offer}


@router.post("/offers/{offer_id}/accept", response_model=DataResponse[PublicAcceptOut])
async def accept_offer(
    offer_id: str,
    body: PublicAcceptIn,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    offer = await PublicService(session).accept_offer(
        offer_id,
        body,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return {"data": PublicAcceptOut.model_validate(offer)}


@router.get("/projects/{project_id}", response_model=DataResponse[PublicProjectOut])
async def view_project(
    project_id: str,
    session: AsyncSession = Depends(get_db),
):
    return {"data": await PublicService(session).view_project(project_id)}
