"""Form and table metadata routers used by the dashboard UI."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.exceptions import BadRequestError
from bizops.core.response import DataResponse
from bizops.core.security import require_dashboard_auth
from bizops.db.base import get_db
from bizops.schemas.form import FormOut, FormValidationOut
from bizops.schemas.table import TableConfigOut
from bizops.services.forms import MODE_CREATE, FormService
from bizops.services.listing import describe_table

router = APIRouter(
    prefix="/forms",
    tags=["Forms"],
    dependencies=[Depends(require_dashboard_auth)],
)
tables_router = APIRouter(
    prefix="/tables",
    tags=["Tables"],
    dependencies=[Depends(require_dashboard_auth)],
)


@router.get("/{entity}", response_model=DataResponse[FormOut])
async def render_form(
    entity: str,
    request: Request,
    mode: str = Query(default=MODE_CREATE, pattern="^(create|edit)$"),
    record_id: Optional[str] = Query(default=None, alias="id"),
    session: AsyncSession = Depends(get_db),
):
    """Describe the form for an entity; other query params pre-fill a create form."""
    prefill = {k: v for k, v in request.query_params.items() if k not in ("mode", "id")}
    form = await FormService(session).render(entity, mode=mode, record_id=record_id, prefill=prefill)
    return {"data": form}


@router.post("/{entity}/validate", response_model=DataResponse[FormValidationOut])
async def validate_form(
    entity: str,
    request: Request,
    mode: str = Query(default=MODE_CREATE, pattern="^(create|edit)$"),
    session: AsyncSession = Depends(get_db),
):
    """Validate a submission posted as JSON or as form data."""
    raw: Any
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            raw = await request.json()
        except ValueError as exc:
            raise BadRequestError("Request body is not valid JSON") from exc
        if not isinstance(raw, dict):
            raise BadRequestError("Request body must be a JSON object")
    else:
        form = await request.form()
        raw = list(form.multi_items())
    return {"data": FormService(session).validate(entity, raw, mode=mode)}


@tables_router.get("/{entity}", response_model=DataResponse[TableConfigOut])
async def get_table_config(
    entity: str,
    session: AsyncSession = Depends(get_db),
):
    """Search fields, filter options (with lookup values) and default sort for a list."""
    return {"data": await describe_table(session, entity)}
