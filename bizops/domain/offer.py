"""SQLAlchemy ORM models for Offers, their line items, selected links and access logs."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bizops.db.base import Base
from bizops.domain.catalog import Service
from bizops.domain.mixins import CreatedAtMixin, TimestampMixin, new_id
from bizops.domain.organization import Organization
from bizops.domain.settings import CorporateEntity, OfferLinkPreset


class Offer(Base, TimestampMixin):
    __tablename__ = "offers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    organization_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=True, index=True
    )
    contact_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True
    )
    corporate_entity_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("corporate_entities.id"), nullable=True
    )
    payment_term_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("settings_payment_terms.id", ondelete="SET NULL"), nullable=True
    )
    delivery_condition_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("settings_delivery_conditions.id", ondelete="SET NULL"), nullable=True
    )

    valid_until: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    # "draft" | "sent"
    status: Mapped[str] = mapped_column(String(20), default="draft", nullable=False, index=True)
    is_self_submitted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Pricing (total_amount is derived from lines + discount/tax and recomputed on write)
    currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    # "global" | "per_line"
    discount_type: Mapped[str] = mapped_column(String(20), default="global", nullable=False)
    global_discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    discount_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tax_percentage: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    tax_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Snapshots of the referenced settings text at the time of writing
    payment_terms_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    delivery_conditions_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Acceptance record
    is_accepted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_by_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    accepted_by_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    accepted_ip: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    accepted_user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    accepted_metadata: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    # Agreement
    agreement_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    agreement_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    agreement_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    agreement_notice_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    agreement_include_annex: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    agreement_terms_override: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Billing
    billing_contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    billing_po_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    billing_vat_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    service_inputs: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)

    organization: Mapped[Optional[Organization]] = relationship(lazy="selectin")
    corporate_entity: Mapped[Optional[CorporateEntity]] = relationship(lazy="selectin")
    lines: Mapped[List["OfferLine"]] = relationship(
        lazy="selectin",
        order_by="OfferLine.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    selected_links: Mapped[List["OfferSelectedLink"]] = relationship(
        lazy="selectin", cascade="all, delete-orphan", passive_deletes=True
    )


class OfferLine(Base, CreatedAtMixin):
    """One OfferService row: either a catalog Service reference or a custom-priced entry."""

    __tablename__ = "offer_services"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    offer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("offers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("services.id"), nullable=True, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), nullable=False
    )
    is_custom: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    custom_title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    custom_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    service: Mapped[Optional[Service]] = relationship(lazy="selectin")

    @property
    def service_name(self) -> Optional[str]:
        if self.is_custom:
            return self.custom_title
        return self.service.name if self.service else None


class OfferSelectedLink(Base, CreatedAtMixin):
    __tablename__ = "offer_selected_links"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    offer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("offers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    link_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("settings_offer_links.id", ondelete="CASCADE"), nullable=False
    )
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    link: Mapped[OfferLinkPreset] = relationship(lazy="selectin")


class OfferAccessLog(Base, CreatedAtMixin):
    """One row per public view of an offer made with an e-mail address."""

    __tablename__ = "offer_access_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    offer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("offers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    accessed_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    accessed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
