"""Organization and Contact Pydantic schemas (request DTOs and response models)."""

from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BeforeValidator, Field

from bizops.schemas.common import (
    CamelModel,
    OptionalEmail,
    OptionalId,
    OptionalUrl,
    blank_to_none,
    optional_text,
)

CompanySize = Annotated[
    Optional[Literal["1-10", "11-50", "51-200", "201-500", "501-1000", "1001+"]],
    BeforeValidator(blank_to_none),
]


class OrganizationCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    legal_name: optional_text(200) = None
    address: optional_text(500) = None
    postcode: optional_text(20) = None
    city: optional_text(100) = None
    country: optional_text(100) = None
    vat_id: optional_text(50) = None
    tax_id: optional_text(50) = None
    website: OptionalUrl = None
    industry: optional_text(100) = None
    size: CompanySize = None
    founded: optional_text(50) = None
    hq_location: optional_text(200) = None
    company_type: optional_text(100) = None
    linkedin_url: OptionalUrl = None
    logo_image_url: OptionalUrl = None
    profile_image_url: OptionalUrl = None
    is_agency: bool = False


class OrganizationUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    legal_name: optional_text(200) = None
    address: optional_text(500) = None
    postcode: optional_text(20) = None
    city: optional_text(100) = None
    country: optional_text(100) = None
    vat_id: optional_text(50) = None
    tax_id: optional_text(50) = None
    website: OptionalUrl = None
    industry: optional_text(100) = None
    size: CompanySize = None
    founded: optional_text(50) = None
    hq_location: optional_text(200) = None
    company_type: optional_text(100) = None
    linkedin_url: OptionalUrl = None
    logo_image_url: OptionalUrl = None
    profile_image_url: OptionalUrl = None
    is_agency: Optional[bool] = None


class OrganizationBrief(CamelModel):
    id: str
    name: str
    legal_name: Optional[str] = None
    country: Optional[str] = None
    logo_image_url: Optional[str] = None


class OrganizationOut(CamelModel):
    id: str
    name: str
    legal_name: Optional[str] = None
    address: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    vat_id: Optional[str] = None
    tax_id: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    founded: Optional[str] = None
    hq_location: Optional[str] = None
    company_type: Optional[str] = None
    linkedin_url: Optional[str] = None
    logo_image_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_agency: bool = False
    created_at: datetime
    updated_at: datetime


class ContactCreate(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    email: OptionalEmail = None
    organization_id: OptionalId = None
    linkedin_url: OptionalUrl = None
    company_role: optional_text(200) = None
    headline: optional_text(200) = None
    location: optional_text(200) = None
    country: optional_text(100) = None
    corporate_email: OptionalEmail = None
    profile_image_url: OptionalUrl = None


class ContactUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: OptionalEmail = None
    organization_id: OptionalId = None
    linkedin_url: OptionalUrl = None
    company_role: optional_text(200) = None
    headline: optional_text(200) = None
    location: optional_text(200) = None
    country: optional_text(100) = None
    corporate_email: OptionalEmail = None
    profile_image_url: OptionalUrl = None


class ContactOut(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    organization_id: Optional[str] = None
    organization: Optional[OrganizationBrief] = None
    linkedin_url: Optional[str] = None
    company_role: Optional[str] = None
    headline: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    corporate_email: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
