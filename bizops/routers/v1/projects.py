"""Project CRUD router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.pagination import TableQueryParams
from bizops.core.response import DataResponse, ListResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.routers.v1.common import idempotent_create
from bizops.schemas.project import ProjectCreate, ProjectOut, ProjectUpdate
from bizops.services.projects import ProjectService

router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
    dependencies=[Depends(require_dashboard_auth)],
)


@router.get("", response_model=ListResponse[ProjectOut])
async def list_projects(
    organization_id: Optional[str] = Query(default=None),
    params: TableQueryParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    """List projects, optionally only those of ?organization_id=."""
    return await ProjectService(session).list_projects(params, organization_id=organization_id)


@router.post("", response_model=DataResponse[ProjectOut], status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    request: Request,
    session: AsyncSession = Depends(get_db),
):
    async def create():
        return ProjectOut.model_validate(await ProjectService(session).create(body))

    return await idempotent_create(request, session, "projects", create)


@router.get("/{project_id}", response_model=DataResponse[ProjectOut])
async def get_project(
    project_id: str,
    session: AsyncSession = Depends(get_db),
):
    project = await ProjectService(session).get(project_id)
    return {"data": ProjectOut.model_validate(project)}


@router.put("/{project_id}", response_model=DataResponse[ProjectOut])
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    session: AsyncSession = Depends(get_db),
):
    project = await ProjectService(session).update(project_id, body)
    return {"data": ProjectOut.model_validate(project)}


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    session: AsyncSession = Depends(get_db),
):
    await ProjectService(session).delete(project_id)
