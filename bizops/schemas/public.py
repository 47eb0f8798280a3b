"""Schemas for the unauthenticated offer/project pages."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import Field

from bizops.schemas.common import CamelModel, Money, OptionalEmail, OptionalStr
from bizops.schemas.offer import PricingOut
from bizops.schemas.organization import OrganizationOut
from bizops.schemas.settings import CorporateEntityOut


class PublicAcceptIn(CamelModel):
    name: OptionalStr = None
    email: OptionalEmail = None
    email_for_access: OptionalEmail = None
    metadata: Optional[dict[str, Any]] = None


class PublicAcceptOut(CamelModel):
    id: str
    is_accepted: bool
    accepted_at: Optional[datetime] = None
    accepted_by_name: Optional[str] = None
    accepted_by_email: Optional[str] = None


class PublicLineOut(CamelModel):
    id: str
    service_id: Optional[str] = None
    service_name: Optional[str] = None
    description: Optional[str] = None
    group_type: str = "Other"
    is_recurring: bool = False
    recurring_interval: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    quantity: int
    price: Money
    discount_percentage: Money
    is_custom: bool = False


class PublicLinkOut(CamelModel):
    id: str
    title: str
    url: str
    icon: Optional[str] = None


class PublicOfferOut(CamelModel):
    id: str
    title: Optional[str] = None
    status: str
    currency: str
    valid_until: Optional[date] = None
    is_expired: bool
    total_amount: Money
    discount_type: Optional[str] = None
    global_discount_percentage: Money
    discount_reason: Optional[str] = None
    tax_percentage: Optional[Money] = None
    tax_reason: Optional[str] = None
    comments: Optional[str] = None
    payment_terms_text: Optional[str] = None
    delivery_conditions_text: Optional[str] = None

    is_accepted: bool = False
    accepted_at: Optional[datetime] = None
    accepted_by_name: Optional[str] = None

    agreement_date: Optional[date] = None
    agreement_start_date: Optional[date] = None
    agreement_end_date: Optional[date] = None
    agreement_notice_email: Optional[str] = None
    agreement_include_annex: bool = True
    agreement_terms_override: Optional[str] = None
    billing_contact_email: Optional[str] = None
    billing_po_number: Optional[str] = None
    billing_vat_id: Optional[str] = None

    organization: Optional[OrganizationOut] = None
    corporate_entity: Optional[CorporateEntityOut] = None
    lines: list[PublicLineOut] = Field(default_factory=list)
    links: list[PublicLinkOut] = Field(default_factory=list)
    pricing: PricingOut
    created_at: datetime


class DeliverableGroupOut(CamelModel):
    group_type: str
    items: list[PublicLineOut]


class PublicProjectOfferOut(CamelModel):
    id: str
    title: Optional[str] = None
    status: str
    currency: str
    valid_until: Optional[date] = None
    total_amount: Money
    is_accepted: bool = False
    created_at: datetime
    deliverables: list[DeliverableGroupOut] = Field(default_factory=list)


class PublicProjectOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    status: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    organization: Optional[OrganizationOut] = None
    offers: list[PublicProjectOfferOut] = Field(default_factory=list)
