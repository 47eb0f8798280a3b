"""Dashboard members router."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.core.response import DataResponse, ListResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.routers.v1.common import idempotent_create
from bizops.schemas.member import MemberCreate, MemberOut, MemberUpdate
from bizops.services.members import MemberService

router = APIRouter(
    prefix="/members",
    tags=["Members"],
    dependencies=[Depends(require_dashboard_auth)],
)


@router.get("", response_model=ListResponse[MemberOut])
async def list_members(
    params: TableQueryParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    return await MemberService(session).list_page(params)


@router.post("", response_model=DataResponse[MemberOut], status_code=status.HTTP_201_CREATED)
async def create_member(
    body: MemberCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    """Add a member. 409 when the email is already taken."""
    async def create():
        return MemberOut.model_validate(await MemberService(session).create(body))

    return await idempotent_create(request, session, "members", create)


@router.get("/{member_id}", response_model=DataResponse[MemberOut])
async def get_member(
    member_id: str,
    session: AsyncSession = Depends(get_db),
):
    member = await MemberService(session).get(member_id)
    return {"data": MemberOut.model_validate(member)}


@router.put("/{member_id}", response_model=DataResponse[MemberOut])
async def update_member(
    member_id: str,
    body: MemberUpdate,
    session: AsyncSession = Depends(get_db),
):
    member = await MemberService(session).update(member_id, body)
    return {"data": MemberOut.model_validate(member)}


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: str,
    session: AsyncSession = Depends(get_db),
):
    await MemberService(session).delete(member_id)
