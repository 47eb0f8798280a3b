"""Offer router: CRUD, pricing preview, status, internal accept and access logs."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.core.response import DataResponse, ListResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.domain.offer import Offer
from bizops.routers.v1.common import idempotent_create
from bizops.schemas.offer import (
    AccessLogsOut,
    OfferAcceptIn,
    OfferCreate,
    OfferLineOut,
    OfferOut,
    OfferStatusUpdate,
    OfferUpdate,
    PricingOut,
    QuoteOut,
    QuoteRequest,
)
from bizops.services.offers import OfferService, offer_totals

router = APIRouter(
    prefix="/offers",
    tags=["Offers"],
    dependencies=[Depends(require_dashboard_auth)],
)


def offer_out(offer: Offer) -> OfferOut:
    """Detail view: the stored offer plus its freshly computed pricing breakdown."""
    out = OfferOut.model_validate(offer)
    out.pricing = PricingOut.model_validate(offer_totals(offer).as_dict())
    return out


@router.get("", response_model=ListResponse[OfferOut])
async def list_offers(
    organization_id: Optional[str] = Query(default=None),
    params: TableQueryParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    return await OfferService(session).list_offers(params, organization_id=organization_id)


@router.post("", response_model=DataResponse[OfferOut], status_code=status.HTTP_201_CREATED)
async def create_offer(
    body: OfferCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    """Create an offer with its lines and selected links; ``totalAmount`` is computed."""
    async def create():
        return offer_out(await OfferService(session).create_offer(body))

    return await idempotent_create(request, session, "offers", create)


@router.post("/quote", response_model=DataResponse[QuoteOut])
async def quote_offer(
    body: QuoteRequest,
    session: AsyncSession = Depends(get_db),
):
    """Price a set of lines without saving anything."""
    totals = await OfferService(session).quote(body)
    return {"data": {"lines": totals.line_totals(), "pricing": totals.as_dict()}}


@router.get("/{offer_id}", response_model=DataResponse[OfferOut])
async def get_offer(
    offer_id: str,
    session: AsyncSession = Depends(get_db),
):
    return {"data": offer_out(await OfferService(session).get_offer(offer_id))}


@router.put("/{offer_id}", response_model=DataResponse[OfferOut])
async def update_offer(
    offer_id: str,
    body: OfferUpdate,
    session: AsyncSession = Depends(get_db),
):
    return {"data": offer_out(await OfferService(session).update_offer(offer_id, body))}


@router.delete("/{offer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offer(
    offer_id: str,
    session: AsyncSession = Depends(get_db),
):
    await OfferService(session).delete_offer(offer_id)


@router.put("/{offer_id}/status", response_model=DataResponse[OfferOut])
async def set_offer_status(
    offer_id: str,
    body: OfferStatusUpdate,
    session: AsyncSession = Depends(get_db),
):
    return {"data": offer_out(await OfferService(session).set_status(offer_id, body.status))}


@router.post("/{offer_id}/accept", response_model=DataResponse[OfferOut])
async def accept_offer(
    offer_id: str,
    body: OfferAcceptIn,
    session: AsyncSession = Depends(get_db),
):
    return {"data": offer_out(await OfferService(session).accept_offer(offer_id, body))}


@router.get("/{offer_id}/access-logs", response_model=DataResponse[AccessLogsOut])
async def get_access_logs(
    offer_id: str,
    session: AsyncSession = Depends(get_db),
):
    """Views of the public offer page, newest first."""
    return {"data": await OfferService(session).access_logs(offer_id)}


@router.get("/{offer_id}/services", response_model=DataResponse[list[OfferLineOut]])
async def list_offer_lines(
    offer_id: str,
    session: AsyncSession = Depends(get_db),
):
    lines = await OfferService(session).list_lines(offer_id)
    return {"data": [OfferLineOut.model_validate(line) for line in lines]}
