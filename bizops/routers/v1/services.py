"""Service catalog router (``/services``: the products an offer is built from)."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.core.response import DataResponse, ListResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.routers.v1.common import idempotent_create
from bizops.schemas.service import ServiceCreate, ServiceOut, ServiceUpdate
from bizops.services.catalog import CatalogService

router = APIRouter(
    prefix="/services",
    tags=["Services"],
    dependencies=[Depends(require_dashboard_auth)],
)


@router.get("", response_model=ListResponse[ServiceOut])
async def list_services(
    params: TableQueryParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    return await CatalogService(session).list_page(params)


@router.post("", response_model=DataResponse[ServiceOut], status_code=status.HTTP_201_CREATED)
async def create_service(
    body: ServiceCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    async def create():
        return ServiceOut.model_validate(await CatalogService(session).create(body))

    return await idempotent_create(request, session, "services", create)


@router.get("/{service_id}", response_model=DataResponse[ServiceOut])
async def get_service(
    service_id: str,
    session: AsyncSession = Depends(get_db),
):
    service = await CatalogService(session).get(service_id)
    return {"data": ServiceOut.model_validate(service)}


@router.put("/{service_id}", response_model=DataResponse[ServiceOut])
async def update_service(
    service_id: str,
    body: ServiceUpdate,
    session: AsyncSession = Depends(get_db),
):
    service = await CatalogService(session).update(service_id, body)
    return {"data": ServiceOut.model_validate(service)}


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: str,
    session: AsyncSession = Depends(get_db),
):
    """409 while offers still use the service."""
    await CatalogService(session).delete(service_id)
