"""Dashboard member schemas."""

from datetime import datetime
from typing import Literal, Optional

from bizops.schemas.common import CamelModel, RequiredEmail, optional_text

MemberRole = Literal["admin", "member"]


class MemberCreate(CamelModel):
    email: RequiredEmail
    full_name: optional_text(255) = None
    role: MemberRole = "member"
    is_active: bool = True


class MemberUpdate(CamelModel):
    email: Optional[RequiredEmail] = None
    full_name: optional_text(255) = None
    role: Optional[MemberRole] = None
    is_active: Optional[bool] = None


class MemberOut(CamelModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    is_active: bool
    last_sign_in_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
