"""Service catalog Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BeforeValidator, Field

from bizops.schemas.common import CamelModel, Money, OptionalUrl, blank_to_none, optional_text

GroupType = Annotated[
    Optional[Literal["Base", "Research", "Optional", "License"]],
    BeforeValidator(blank_to_none),
]
Category = Annotated[
    Optional[Literal["visualization", "architecture", "signals"]],
    BeforeValidator(blank_to_none),
]


class ServiceCreate(CamelModel):
    name: str = Field(min_length=2, max_length=200)
    summary: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    price: Decimal = Field(ge=0)
    is_recurring: bool = False
    recurring_interval: optional_text(50) = None
    url: OptionalUrl = None
    icon: optional_text(100) = None
    group_type: GroupType = None
    category: Category = None
    is_public: bool = False
    allow_multiple: bool = False
    is_default: bool = False


class ServiceUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    summary: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=10, max_length=2000)
    price: Optional[Decimal] = Field(default=None, ge=0)
    is_recurring: Optional[bool] = None
    recurring_interval: optional_text(50) = None
    url: OptionalUrl = None
    icon: optional_text(100) = None
    group_type: GroupType = None
    category: Category = None
    is_public: Optional[bool] = None
    allow_multiple: Optional[bool] = None
    is_default: Optional[bool] = None


class ServiceOut(CamelModel):
    id: str
    name: str
    summary: str
    description: str
    price: Money
    is_recurring: bool = False
    recurring_interval: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    group_type: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = False
    allow_multiple: bool = False
    is_default: bool = False
    created_at: datetime
