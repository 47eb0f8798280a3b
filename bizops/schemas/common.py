"""Shared Pydantic schema base with camelCase aliases, plus reusable field types.

Dashboard forms post empty strings, ``"none"`` and ``"__placeholder__"`` for
"nothing selected"; the ``Optional*`` annotated types below turn those into
``None`` before validation so every create/update schema treats them alike.
"""

from __future__ import annotations

import re
import uuid
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    Field,
    PlainSerializer,
    StringConstraints,
)
from pydantic.alias_generators import to_camel

_BLANK_VALUES = {"", "none", "null", "__placeholder__"}
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CamelModel(BaseModel):
    """All API schemas inherit from this to auto-generate camelCase aliases."""

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True,
    }


class HealthResponse(BaseModel):
    """Health-check response returned by /health."""
    status: str = "ok"
    app: str
    env: str


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _BLANK_VALUES:
        return None
    return value


def _check_uuid(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        uuid.UUID(value)
    except ValueError as exc:
        raise ValueError("Invalid UUID format") from exc
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not _EMAIL_RE.match(value):
        raise ValueError("Invalid email address")
    return value


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise ValueError("Invalid URL")
    return value


OptionalStr = Annotated[Optional[str], BeforeValidator(blank_to_none)]
OptionalId = Annotated[Optional[str], BeforeValidator(blank_to_none), AfterValidator(_check_uuid)]
RequiredId = Annotated[str, AfterValidator(_check_uuid)]
OptionalEmail = Annotated[Optional[str], BeforeValidator(blank_to_none), AfterValidator(_check_email)]
RequiredEmail = Annotated[str, AfterValidator(_check_email)]
OptionalUrl = Annotated[Optional[str], BeforeValidator(blank_to_none), AfterValidator(_check_url)]
OptionalDate = Annotated[Optional[date], BeforeValidator(blank_to_none)]

Percentage = Annotated[Decimal, Field(ge=0, le=100)]

# Decimals go over the wire as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class OptionOut(CamelModel):
    value: str
    label: str


def optional_text(max_length: int) -> Any:
    """Blank-to-None string with a length cap, e.g. ``legal_name: optional_text(200) = None``."""
    return Annotated[
        Optional[Annotated[str, StringConstraints(max_length=max_length)]],
        BeforeValidator(blank_to_none),
    ]
