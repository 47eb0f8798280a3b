"""Unauthenticated offer/project pages and the public accept-offer flow."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.exceptions import BadRequestError, ConflictError, NotFoundError
from bizops.domain.mixins import utcnow
from bizops.domain.offer import Offer, OfferLine
from bizops.repositories.offer import OfferRepository
from bizops.repositories.project import ProjectRepository
from bizops.repositories.settings import DeliveryConditionRepository, PaymentTermRepository
from bizops.schemas.public import PublicAcceptIn
from bizops.services.offers import offer_totals

logger = logging.getLogger(__name__)

# Deliverable groups on the public project page, in display order
GROUP_ORDER = ("Base", "Research", "Optional", "Custom", "License")
FALLBACK_GROUP = "Other"


def _require_uuid(value: str, label: str) -> None:
    try:
        uuid.UUID(value)
    except ValueError as exc:
        raise BadRequestError(f"Invalid {label} id") from exc


def _today() -> Any:
    return datetime.now(timezone.utc).date()


def is_expired(offer: Offer) -> bool:
    return offer.valid_until is not None and offer.valid_until < _today()


def public_line(line: OfferLine) -> dict[str, Any]:
    service = line.service
    if line.is_custom:
        group = "Custom"
    else:
        group = (service.group_type if service else None) or FALLBACK_GROUP
    return {
        "id": line.id,
        "service_id": line.service_id,
        "service_name": line.service_name,
        "description": line.custom_description if line.is_custom else (service.description if service else None),
        "group_type": group,
        "is_recurring": bool(service.is_recurring) if service else False,
        "recurring_interval": service.recurring_interval if service else None,
        "url": service.url if service else None,
        "icon": service.icon if service else None,
        "quantity": line.quantity,
        "price": line.price,
        "discount_percentage": line.discount_percentage,
        "is_custom": line.is_custom,
    }


def group_deliverables(lines: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Group public lines by service group: known groups first, the rest by first appearance."""
    groups: dict[str, list[dict[str, Any]]] = {}
    for line in lines:
        groups.setdefault(line["group_type"], []).append(line)
    ordered = [name for name in GROUP_ORDER if name in groups]
    ordered += [name for name in groups if name not in GROUP_ORDER]
    return [{"group_type": name, "items": groups[name]} for name in ordered]


class PublicService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._offers = OfferRepository(session)
        self._projects = ProjectRepository(session)
        self._payment_terms = PaymentTermRepository(session)
        self._delivery_conditions = DeliveryConditionRepository(session)

    async def _get_offer(self, offer_id: str) -> Offer:
        _require_uuid(offer_id, "offer")
        offer = await self._offers.get_by_id(offer_id)
        if not offer:
            raise NotFoundError("Offer", offer_id)
        return offer

    async def view_offer(
        self,
        offer_id: str,
        email: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> dict[str, Any]:
        offer = await self._get_offer(offer_id)

        if email and email.strip():
            await self._offers.add_access_log(
                offer_id=offer.id,
                accessed_email=email.strip(),
                accessed_at=utcnow(),
                ip_address=ip_address,
                user_agent=user_agent,
            )
            logger.info("Offer %s viewed by %s", offer.id, email.strip())

        payment_terms_text = offer.payment_terms_text
        if not payment_terms_text and offer.payment_term_id:
            term = await self._payment_terms.get_by_id(offer.payment_term_id)
            payment_terms_text = term.description if term else None
        delivery_conditions_text = offer.delivery_conditions_text
        if not delivery_conditions_text and offer.delivery_condition_id:
            condition = await self._delivery_conditions.get_by_id(offer.delivery_condition_id)
            delivery_conditions_text = condition.description if condition else None

        created_on = offer.created_at.date()
        links = [
            selected.link
            for selected in offer.selected_links
            if selected.is_enabled and selected.link is not None and selected.link.is_active
        ]
        return {
            "id": offer.id,
            "title": offer.title,
            "status": offer.status,
            "currency": offer.currency,
            "valid_until": offer.valid_until,
            "is_expired": is_expired(offer),
            "total_amount": offer.total_amount,
            "discount_type": offer.discount_type,
            "global_discount_percentage": offer.global_discount_percentage,
            "discount_reason": offer.discount_reason,
            "tax_percentage": offer.tax_percentage,
            "tax_reason": offer.tax_reason,
            "comments": offer.comments,
            "payment_terms_text": payment_terms_text,
            "delivery_conditions_text": delivery_conditions_text,
            "is_accepted": offer.is_accepted,
            "accepted_at": offer.accepted_at,
            "accepted_by_name": offer.accepted_by_name,
            "agreement_date": offer.agreement_date or created_on,
            "agreement_start_date": offer.agreement_start_date or created_on,
            "agreement_end_date": offer.agreement_end_date or offer.valid_until,
            "agreement_notice_email": offer.agreement_notice_email,
            "agreement_include_annex": (
                True if offer.agreement_include_annex is None else offer.agreement_include_annex
            ),
            "agreement_terms_override": offer.agreement_terms_override,
            "billing_contact_email": offer.billing_contact_email,
            "billing_po_number": offer.billing_po_number,
            "billing_vat_id": offer.billing_vat_id,
            "organization": offer.organization,
            "corporate_entity": offer.corporate_entity,
            "lines": [public_line(line) for line in offer.lines],
            "links": links,
            "pricing": offer_totals(offer).as_dict(),
            "created_at": offer.created_at,
        }

    async def accept_offer(
        self,
        offer_id: str,
        data: PublicAcceptIn,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Offer:
        offer = await self._get_offer(offer_id)

        name = (data.name or "").strip()
        email = data.email or data.email_for_access
        if not name or not email:
            raise BadRequestError("Name and email are required to accept an offer")
        if offer.is_accepted:
            raise ConflictError("Offer has already been accepted")
        if is_expired(offer):
            raise ConflictError("Offer has expired")

        metadata = dict(data.metadata or {})
        metadata.update(
            {
                "accepted_source": "public",
                "ip": ip_address,
                "userAgent": user_agent,
            }
        )
        if data.email_for_access:
            metadata["email_for_access"] = data.email_for_access

        accepted = await self._offers.update(
            offer,
            is_accepted=True,
            accepted_at=utcnow(),
            accepted_by_name=name,
            accepted_by_email=email,
            accepted_ip=ip_address,
            accepted_user_agent=user_agent,
            accepted_metadata=metadata,
        )
        logger.info("Offer %s accepted by %s", offer.id, email)
        return accepted

    async def view_project(self, project_id: str) -> dict[str, Any]:
        _require_uuid(project_id, "project")
        project = await self._projects.get_by_id(project_id)
        if not project:
            raise NotFoundError("Project", project_id)

        offers = []
        if project.organization_id:
            for offer in await self._offers.list_for_organization(project.organization_id, status="sent"):
                offers.append(
                    {
                        "id": offer.id,
                        "title": offer.title,
                        "status": offer.status,
                        "currency": offer.currency,
                        "valid_until": offer.valid_until,
                        "total_amount": offer.total_amount,
                        "is_accepted": offer.is_accepted,
                        "created_at": offer.created_at,
                        "deliverables": group_deliverables([public_line(line) for line in offer.lines]),
                    }
                )

        return {
            "id": project.id,
            "title": project.title,
            "description": project.description,
            "url": project.url,
            "status": project.status,
            "start_date": project.start_date,
            "end_date": project.end_date,
            "organization": project.organization,
            "offers": offers,
        }
