"""Organization and Contact CRUD routers.

Pattern shared by every v1 CRUD router:
  1. Declare a router with prefix and tags (dashboard auth on the router)
  2. Inject the DB session via Depends and instantiate the service
  3. Call service methods and wrap results in the response envelope
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.core.response import DataResponse, ListResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.routers.v1.common import idempotent_create
from bizops.schemas.offer import OfferOut
from bizops.schemas.organization import (
    ContactCreate,
    ContactOut,
    ContactUpdate,
    OrganizationCreate,
    OrganizationOut,
    OrganizationUpdate,
)
from bizops.schemas.project import ProjectOut
from bizops.services.offers import OfferService
from bizops.services.organizations import ContactService, OrganizationService

router = APIRouter(
    prefix="/organizations",
    tags=["Organizations"],
    dependencies=[Depends(require_dashboard_auth)],
)
contacts_router = APIRouter(
    prefix="/contacts",
    tags=["Contacts"],
    dependencies=[Depends(require_dashboard_auth)],
)


# ------------------------------------------------------------------
# Organizations
# ------------------------------------------------------------------

@router.get("", response_model=ListResponse[OrganizationOut])
async def list_organizations(
    params: TableQueryParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    """List organizations. Supports ?q=, ?filter=key:op:value, ?sort=, ?order=."""
    return await OrganizationService(session).list_page(params)


@router.post("", response_model=DataResponse[OrganizationOut], status_code=status.HTTP_201_CREATED)
async def create_organization(
    body: OrganizationCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    async def create():
        organization = await OrganizationService(session).create(body)
        return OrganizationOut.model_validate(organization)

    return await idempotent_create(request, session, "organizations", create)


@router.get("/{organization_id}", response_model=DataResponse[OrganizationOut])
async def get_organization(
    organization_id: str,
    session: AsyncSession = Depends(get_db),
):
    organization = await OrganizationService(session).get(organization_id)
    return {"data": OrganizationOut.model_validate(organization)}


@router.put("/{organization_id}", response_model=DataResponse[OrganizationOut])
async def update_organization(
    organization_id: str,
    body: OrganizationUpdate,
    session: AsyncSession = Depends(get_db),
):
    organization = await OrganizationService(session).update(organization_id, body)
    return {"data": OrganizationOut.model_validate(organization)}


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(
    organization_id: str,
    session: AsyncSession = Depends(get_db),
):
    """Hard delete. 409 while contacts, projects or offers still reference it."""
    await OrganizationService(session).delete(organization_id)


@router.get("/{organization_id}/contacts", response_model=DataResponse[list[ContactOut]])
async def list_organization_contacts(
    organization_id: str,
    session: AsyncSession = Depends(get_db),
):
    contacts = await OrganizationService(session).list_contacts(organization_id)
    return {"data": [ContactOut.model_validate(c) for c in contacts]}


@router.get("/{organization_id}/projects", response_model=DataResponse[list[ProjectOut]])
async def list_organization_projects(
    organization_id: str,
    session: AsyncSession = Depends(get_db),
):
    projects = await OrganizationService(session).list_projects(organization_id)
    return {"data": [ProjectOut.model_validate(p) for p in projects]}


@router.get("/{organization_id}/offers", response_model=DataResponse[list[OfferOut]])
async def list_organization_offers(
    organization_id: str,
    session: AsyncSession = Depends(get_db),
):
    offers = await OfferService(session).list_for_organization(organization_id)
    return {"data": [OfferOut.model_validate(o) for o in offers]}


# ------------------------------------------------------------------
# Contacts
# ------------------------------------------------------------------

@contacts_router.get("", response_model=ListResponse[ContactOut])
async def list_contacts(
    organization_id: Optional[str] = Query(default=None, alias="organization_id"),
    params: TableQueryParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    return await ContactService(session).list_contacts(params, organization_id=organization_id)


@contacts_router.post("", response_model=DataResponse[ContactOut], status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    async def create():
        contact = await ContactService(session).create(body)
        return ContactOut.model_validate(contact)

    return await idempotent_create(request, session, "contacts", create)


@contacts_router.get("/{contact_id}", response_model=DataResponse[ContactOut])
async def get_contact(
    contact_id: str,
    session: AsyncSession = Depends(get_db),
):
    contact = await ContactService(session).get(contact_id)
    return {"data": ContactOut.model_validate(contact)}


@contacts_router.put("/{contact_id}", response_model=DataResponse[ContactOut])
async def update_contact(
    contact_id: str,
    body: ContactUpdate,
    session: AsyncSession = Depends(get_db),
):
    contact = await ContactService(session).update(contact_id, body)
    return {"data": ContactOut.model_validate(contact)}


@contacts_router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: str,
    session: AsyncSession = Depends(get_db),
):
    await ContactService(session).delete(contact_id)
