"""SQLAlchemy ORM models for Organizations and their Contacts."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bizops.db.base import Base
from bizops.domain.mixins import TimestampMixin, new_id


class Organization(Base, TimestampMixin):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    legal_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    postcode: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    vat_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # "1-10" | "11-50" | "51-200" | "201-500" | "501-1000" | "1001+"
    size: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    founded: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    hq_location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    company_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    logo_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_agency: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Contact(Base, TimestampMixin):
    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    organization_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=True, index=True
    )

    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    company_role: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    headline: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    corporate_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    organization: Mapped[Optional[Organization]] = relationship(lazy="selectin")
