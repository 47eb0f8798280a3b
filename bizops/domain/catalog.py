"""SQLAlchemy ORM model for the service catalog."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from bizops.db.base import Base
from bizops.domain.mixins import new_id, utcnow

# Catalog items whose offer price is set per line instead of taken from the catalog
CUSTOM_DEVELOPMENT = "Custom Development"
CUSTOM_LICENSE = "Custom License"
CUSTOM_PRICED_SERVICE_NAMES = frozenset({CUSTOM_DEVELOPMENT, CUSTOM_LICENSE})


class Service(Base):
    """A sellable catalog item (no updated_at, matching the catalog table)."""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    summary: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)

    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recurring_interval: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # "Base" | "Research" | "Optional" | "License"
    group_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allow_multiple: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    @property
    def is_custom_priced(self) -> bool:
        return self.name in CUSTOM_PRICED_SERVICE_NAMES
