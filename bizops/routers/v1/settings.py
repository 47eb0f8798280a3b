"""Settings routers: corporate entities, payment terms, delivery conditions, offer links.

The four kinds share one endpoint shape, so their routers come from
:func:`build_settings_router`.
"""

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.core.response import DataResponse, ListResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.routers.v1.common import idempotent_create
from bizops.schemas.settings import (
    CorporateEntityCreate,
    CorporateEntityOut,
    CorporateEntityUpdate,
    OfferLinkCreate,
    OfferLinkOut,
    OfferLinkUpdate,
    TermCreate,
    TermOut,
    TermUpdate,
)
from bizops.services.settings import (
    CorporateEntityService,
    DeliveryConditionService,
    OfferLinkService,
    PaymentTermService,
    SettingsService,
)


def build_settings_router(
    prefix: str,
    tag: str,
    service_class: type[SettingsService],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    out_schema: type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag], dependencies=[Depends(require_dashboard_auth)])
    scope = prefix.strip("/")

    @router.get("", response_model=ListResponse[out_schema])
    async def list_rows(
        params: TableQueryParams = Depends(),
        session: AsyncSession = Depends(get_db),
    ):
        return await service_class(session).list_page(params)

    @router.post("", response_model=DataResponse[out_schema], status_code=status.HTTP_201_CREATED)
    async def create_row(
        body: create_schema,
        request: Request,
        session: AsyncSession = Depends(get_db),
    ):
        async def create():
            return out_schema.model_validate(await service_class(session).create(body))

        return await idempotent_create(request, session, scope, create)

    @router.get("/{row_id}", response_model=DataResponse[out_schema])
    async def get_row(
        row_id: str,
        session: AsyncSession = Depends(get_db),
    ):
        return {"data": out_schema.model_validate(await service_class(session).get(row_id))}

    @router.put("/{row_id}", response_model=DataResponse[out_schema])
    async def update_row(
        row_id: str,
        body: update_schema,
        session: AsyncSession = Depends(get_db),
    ):
        """Partial update; ``isDefault: true`` clears the flag on the other rows."""
        return {"data": out_schema.model_validate(await service_class(session).update(row_id, body))}

    @router.delete("/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_row(
        row_id: str,
        session: AsyncSession = Depends(get_db),
    ):
        await service_class(session).delete(row_id)

    return router


corporate_entities_router = build_settings_router(
    "/corporate-entities", "Corporate Entities", CorporateEntityService,
    CorporateEntityCreate, CorporateEntityUpdate, CorporateEntityOut,
)
payment_terms_router = build_settings_router(
    "/payment-terms", "Payment Terms", PaymentTermService, TermCreate, TermUpdate, TermOut,
)
delivery_conditions_router = build_settings_router(
    "/delivery-conditions", "Delivery Conditions", DeliveryConditionService, TermCreate, TermUpdate, TermOut,
)
offer_links_router = build_settings_router(
    "/offer-links", "Offer Links", OfferLinkService, OfferLinkCreate, OfferLinkUpdate, OfferLinkOut,
)

routers = [
    corporate_entities_router,
    payment_terms_router,
    delivery_conditions_router,
    offer_links_router,
]
