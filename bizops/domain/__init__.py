"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  organization.py — Organizations and Contacts
  project.py      — Projects (belong to an Organization)
  catalog.py      — Service catalog items
  settings.py     — Corporate entities, payment terms, delivery conditions, offer link presets
  offer.py        — Offers, line items (offer_services), selected links, access logs
  member.py       — Dashboard members
  idempotency.py  — Stored responses for Idempotency-Key replays
  audit.py        — Immutable request audit trail
  mixins.py       — Shared timestamp columns and id factory
"""

from bizops.domain.audit import AuditTrail
from bizops.domain.catalog import Service
from bizops.domain.idempotency import IdempotencyKey
from bizops.domain.member import AuthUser
from bizops.domain.offer import Offer, OfferAccessLog, OfferLine, OfferSelectedLink
from bizops.domain.organization import Contact, Organization
from bizops.domain.project import Project
from bizops.domain.settings import (
    CorporateEntity,
    DeliveryCondition,
    OfferLinkPreset,
    PaymentTerm,
)

__all__ = [
    "AuditTrail",
    "AuthUser",
    "Contact",
    "CorporateEntity",
    "DeliveryCondition",
    "IdempotencyKey",
    "Offer",
    "OfferAccessLog",
    "OfferLine",
    "OfferLinkPreset",
    "OfferSelectedLink",
    "Organization",
    "PaymentTerm",
    "Project",
    "Service",
]
