"""Offer Pydantic schemas: create/update DTOs, line items, pricing and access logs."""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional

from pydantic import BeforeValidator, Field, field_validator, model_validator

from bizops.core.config import settings
from bizops.schemas.common import (
    CamelModel,
    Money,
    OptionalDate,
    OptionalEmail,
    OptionalId,
    OptionalStr,
    RequiredId,
    blank_to_none,
    optional_text,
)
from bizops.schemas.organization import OrganizationBrief
from bizops.schemas.service import ServiceOut
from bizops.schemas.settings import CorporateEntityOut, OfferLinkOut

OfferStatus = Literal["draft", "sent"]
DiscountType = Literal["global", "per_line"]

OptionalPercentage = Annotated[
    Optional[Annotated[Decimal, Field(ge=0, le=100)]],
    BeforeValidator(blank_to_none),
]
OptionalDiscountType = Annotated[Optional[DiscountType], BeforeValidator(blank_to_none)]


def _parse_lines(value: Any) -> Any:
    """Accept a list of lines or the JSON string a hidden form input carries."""
    value = blank_to_none(value)
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError as exc:
            raise ValueError("Services must be a JSON array") from exc
        if not isinstance(value, list):
            raise ValueError("Services must be a JSON array")
    return value


def _parse_link_ids(value: Any) -> Any:
    # A malformed JSON string means "no links", as the dashboard form posts it
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []
    return value


def _draft_if_blank(value: Any) -> Any:
    return blank_to_none(value) or "draft"


LinkIdList = Annotated[Optional[list[RequiredId]], BeforeValidator(_parse_link_ids)]


class OfferLineIn(CamelModel):
    """One submitted OfferService: a catalog service reference or a custom entry."""

    service_id: OptionalId = None
    quantity: int = Field(default=1, ge=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    is_custom: bool = False
    custom_title: optional_text(200) = None
    custom_description: OptionalStr = None

    @model_validator(mode="after")
    def _custom_or_catalog(self) -> "OfferLineIn":
        if self.is_custom:
            if not self.custom_title:
                raise ValueError("Custom lines require a custom title")
            if self.price is None:
                raise ValueError("Custom lines require a price")
        elif not self.service_id:
            raise ValueError("A line must reference a service or be marked custom")
        return self


LineList = Annotated[list[OfferLineIn], BeforeValidator(_parse_lines)]


class _OfferFields(CamelModel):
    title: optional_text(200) = None
    contact_id: OptionalId = None
    corporate_entity_id: OptionalId = None
    payment_term_id: OptionalId = None
    delivery_condition_id: OptionalId = None
    is_accepted: Optional[bool] = None
    is_self_submitted: Optional[bool] = None
    global_discount_percentage: OptionalPercentage = None
    discount_type: OptionalDiscountType = None
    discount_reason: OptionalStr = None
    tax_percentage: OptionalPercentage = None
    tax_reason: OptionalStr = None
    comments: OptionalStr = None
    payment_terms_text: OptionalStr = None
    delivery_conditions_text: OptionalStr = None
    created_at: OptionalDate = None

    agreement_date: OptionalDate = None
    agreement_start_date: OptionalDate = None
    agreement_end_date: OptionalDate = None
    agreement_notice_email: OptionalEmail = None
    agreement_include_annex: Optional[bool] = None
    agreement_terms_override: OptionalStr = None

    billing_contact_email: OptionalEmail = None
    billing_po_number: optional_text(100) = None
    billing_vat_id: optional_text(50) = None
    service_inputs: Optional[dict[str, Any]] = None

    offer_selected_link_ids: LinkIdList = None

    @field_validator("currency", mode="after", check_fields=False)
    @classmethod
    def _upper_currency(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value


class OfferCreate(_OfferFields):
    organization_id: RequiredId
    status: Annotated[OfferStatus, BeforeValidator(_draft_if_blank)] = "draft"
    currency: str = Field(
        default_factory=lambda: settings.default_currency, pattern=r"^[A-Za-z]{3}$"
    )
    valid_until: date
    services: LineList = Field(default_factory=list)


class OfferUpdate(_OfferFields):
    """Partial update. ``services``/``offer_selected_link_ids`` left out keep the current rows."""

    organization_id: OptionalId = None
    status: Optional[OfferStatus] = None
    currency: Optional[str] = Field(default=None, pattern=r"^[A-Za-z]{3}$")
    valid_until: OptionalDate = None
    services: Optional[LineList] = None


class OfferStatusUpdate(CamelModel):
    status: OfferStatus


class OfferAcceptIn(CamelModel):
    name: optional_text(255) = None
    email: OptionalEmail = None
    metadata: Optional[dict[str, Any]] = None


class QuoteRequest(CamelModel):
    services: LineList = Field(default_factory=list)
    global_discount_percentage: OptionalPercentage = None
    tax_percentage: OptionalPercentage = None
    discount_type: OptionalDiscountType = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class PricedLineOut(CamelModel):
    service_id: Optional[str] = None
    title: Optional[str] = None
    is_custom: bool = False
    quantity: int
    price: Money
    discount_percentage: Money
    line_total: Money


class PricingOut(CamelModel):
    discount_type: str
    subtotal: Money
    discount_amount: Money
    discounted_total: Money
    tax_amount: Money
    grand_total: Money


class QuoteOut(CamelModel):
    lines: list[PricedLineOut]
    pricing: PricingOut


class OfferLineOut(CamelModel):
    id: str
    service_id: Optional[str] = None
    position: int = 0
    quantity: int
    price: Money
    discount_percentage: Money
    is_custom: bool = False
    custom_title: Optional[str] = None
    custom_description: Optional[str] = None
    service_name: Optional[str] = None
    service: Optional[ServiceOut] = None


class OfferSelectedLinkOut(CamelModel):
    id: str
    link_id: str
    is_enabled: bool = True
    link: Optional[OfferLinkOut] = None


class OfferOut(CamelModel):
    id: str
    title: Optional[str] = None
    organization_id: Optional[str] = None
    organization: Optional[OrganizationBrief] = None
    contact_id: Optional[str] = None
    corporate_entity_id: Optional[str] = None
    corporate_entity: Optional[CorporateEntityOut] = None
    payment_term_id: Optional[str] = None
    delivery_condition_id: Optional[str] = None
    valid_until: Optional[date] = None
    status: str
    is_self_submitted: bool = False
    currency: str
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
    accepted_by_email: Optional[str] = None
    accepted_ip: Optional[str] = None
    accepted_user_agent: Optional[str] = None
    accepted_metadata: Optional[dict[str, Any]] = None

    agreement_date: Optional[date] = None
    agreement_start_date: Optional[date] = None
    agreement_end_date: Optional[date] = None
    agreement_notice_email: Optional[str] = None
    agreement_include_annex: bool = True
    agreement_terms_override: Optional[str] = None

    billing_contact_email: Optional[str] = None
    billing_po_number: Optional[str] = None
    billing_vat_id: Optional[str] = None
    service_inputs: Optional[dict[str, Any]] = None

    lines: list[OfferLineOut] = Field(default_factory=list)
    selected_links: list[OfferSelectedLinkOut] = Field(default_factory=list)
    pricing: Optional[PricingOut] = None

    created_at: datetime
    updated_at: datetime


class AccessLogOut(CamelModel):
    id: str
    accessed_email: Optional[str] = None
    accessed_at: Optional[datetime] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class AccessLogsOut(CamelModel):
    offer_id: str
    public_url: str
    total_views: int
    unique_emails: int
    logs: list[AccessLogOut]
