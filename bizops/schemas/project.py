"""Project Pydantic schemas."""

from datetime import date, datetime
from typing import Annotated, Literal, Optional

from pydantic import BeforeValidator, Field

from bizops.schemas.common import (
    CamelModel,
    OptionalDate,
    OptionalId,
    OptionalUrl,
    blank_to_none,
    optional_text,
)
from bizops.schemas.organization import OrganizationBrief

ProjectStatus = Literal["Active", "Paused", "Archived"]


def _status_or_default(value):
    return blank_to_none(value) or "Active"


class ProjectCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: optional_text(2000) = None
    url: OptionalUrl = None
    organization_id: OptionalId = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    status: Annotated[ProjectStatus, BeforeValidator(_status_or_default)] = "Active"


class ProjectUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: optional_text(2000) = None
    url: OptionalUrl = None
    organization_id: OptionalId = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    status: Optional[ProjectStatus] = None


class ProjectOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    organization_id: Optional[str] = None
    organization: Optional[OrganizationBrief] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str
    created_at: datetime
    updated_at: datetime
