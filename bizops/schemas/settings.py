"""Schemas for the settings entities offers reference."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from bizops.schemas.common import CamelModel, OptionalUrl, optional_text


class CorporateEntityCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    legal_name: optional_text(200) = None
    address: optional_text(500) = None
    postcode: optional_text(20) = None
    city: optional_text(100) = None
    country: optional_text(100) = None
    vat_id: optional_text(50) = None
    tax_id: optional_text(50) = None
    logo_url: OptionalUrl = None
    is_default: bool = False


class CorporateEntityUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    legal_name: optional_text(200) = None
    address: optional_text(500) = None
    postcode: optional_text(20) = None
    city: optional_text(100) = None
    country: optional_text(100) = None
    vat_id: optional_text(50) = None
    tax_id: optional_text(50) = None
    logo_url: OptionalUrl = None
    is_default: Optional[bool] = None


class CorporateEntityOut(CamelModel):
    id: str
    name: str
    legal_name: Optional[str] = None
    address: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    vat_id: Optional[str] = None
    tax_id: Optional[str] = None
    logo_url: Optional[str] = None
    is_default: bool = False
    created_at: datetime
    updated_at: datetime


class TermCreate(CamelModel):
    """Payment terms and delivery conditions share one shape."""

    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    is_active: bool = True
    is_default: bool = False


class TermUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None


class TermOut(CamelModel):
    id: str
    title: str
    description: str = ""
    is_active: bool = True
    is_default: bool = False
    created_at: datetime
    updated_at: datetime


class OfferLinkCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    url: str = Field(min_length=1, max_length=500)
    icon: optional_text(100) = None
    is_active: bool = True
    is_default: bool = False


class OfferLinkUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    url: Optional[str] = Field(default=None, min_length=1, max_length=500)
    icon: optional_text(100) = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None


class OfferLinkOut(CamelModel):
    id: str
    title: str
    url: str
    icon: Optional[str] = None
    is_active: bool = True
    is_default: bool = False
    created_at: datetime
    updated_at: datetime
