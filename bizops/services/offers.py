"""Offer service: offers, their line items and selected links, pricing and acceptance.

A create or update touches the offer row, its OfferService lines and its
selected links; all of it happens in the request's single transaction (see
``get_db``), so a failure part-way leaves nothing half-written.
"""

import logging
from collections.abc import Sequence
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.config import settings
from bizops.core.exceptions import BadRequestError, ConflictError, NotFoundError
from bizops.core.pagination import TableQueryParams
from bizops.domain.mixins import utcnow
from bizops.domain.offer import Offer, OfferLine
from bizops.repositories.catalog import ServiceRepository
from bizops.repositories.offer import OfferRepository
from bizops.repositories.organization import ContactRepository, OrganizationRepository
from bizops.repositories.settings import (
    CorporateEntityRepository,
    DeliveryConditionRepository,
    OfferLinkRepository,
    PaymentTermRepository,
)
from bizops.schemas.offer import (
    OfferAcceptIn,
    OfferCreate,
    OfferLineIn,
    OfferOut,
    OfferUpdate,
    QuoteRequest,
)
from bizops.services.base import require_reference
from bizops.services.listing import table_page
from bizops.services.pricing import (
    DISCOUNT_GLOBAL,
    OfferTotals,
    PricedLine,
    compute_offer_totals,
    resolve_line_pricing,
)

logger = logging.getLogger(__name__)


def public_offer_url(offer_id: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}/offers/view/{offer_id}"


def offer_totals(offer: Offer) -> OfferTotals:
    """Price an offer from its stored lines (prices there are already resolved)."""
    lines = [
        PricedLine(
            price=line.price,
            quantity=line.quantity,
            discount_percentage=line.discount_percentage,
            service_id=line.service_id,
            title=line.service_name,
            is_custom=line.is_custom,
        )
        for line in offer.lines
    ]
    return compute_offer_totals(
        lines,
        offer.global_discount_percentage,
        offer.tax_percentage,
        offer.discount_type,
    )


def default_title(organization_name: Optional[str], year: int) -> str:
    return f"{organization_name} {year}" if organization_name else f"Offer {year}"


def _to_datetime(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class OfferService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._repo = OfferRepository(session)
        self._orgs = OrganizationRepository(session)
        self._contacts = ContactRepository(session)
        self._catalog = ServiceRepository(session)
        self._entities = CorporateEntityRepository(session)
        self._payment_terms = PaymentTermRepository(session)
        self._delivery_conditions = DeliveryConditionRepository(session)
        self._links = OfferLinkRepository(session)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_offers(self, params: TableQueryParams, organization_id: Optional[str] = None) -> dict:
        items = await self._repo.list_all(filters={"organization_id": organization_id})
        return table_page("offers", items, OfferOut, params)

    async def list_for_organization(self, organization_id: str) -> list[Offer]:
        if not await self._orgs.exists(organization_id):
            raise NotFoundError("Organization", organization_id)
        return await self._repo.list_for_organization(organization_id)

    async def get_offer(self, offer_id: str) -> Offer:
        offer = await self._repo.get_by_id(offer_id)
        if not offer:
            raise NotFoundError("Offer", offer_id)
        return offer

    async def list_lines(self, offer_id: str) -> list[OfferLine]:
        return list((await self.get_offer(offer_id)).lines)

    async def access_logs(self, offer_id: str) -> dict:
        await self.get_offer(offer_id)
        logs = await self._repo.list_access_logs(offer_id)
        emails = {log.accessed_email.lower() for log in logs if log.accessed_email}
        return {
            "offer_id": offer_id,
            "public_url": public_offer_url(offer_id),
            "total_views": len(logs),
            "unique_emails": len(emails),
            "logs": logs,
        }

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    async def _price_lines(self, lines: Sequence[OfferLineIn]) -> list[tuple[dict[str, Any], PricedLine]]:
        """Resolve submitted lines against the catalog -> [(row values, priced line)]."""
        services = await self._catalog.get_many(line.service_id for line in lines)
        resolved = []
        for line in lines:
            service = services.get(line.service_id) if line.service_id else None
            if line.service_id and service is None:
                raise BadRequestError(f"Service '{line.service_id}' does not exist")
            priced = resolve_line_pricing(line, service, settings.custom_development_default_price)
            row = {
                "service_id": line.service_id,
                "quantity": priced.quantity,
                "price": priced.price,
                "discount_percentage": priced.discount_percentage,
                "is_custom": line.is_custom,
                "custom_title": line.custom_title,
                "custom_description": line.custom_description,
            }
            resolved.append((row, priced))
        return resolved

    @staticmethod
    def _totals(lines: Sequence[PricedLine], global_pct: Any, tax_pct: Any, mode: Optional[str]) -> OfferTotals:
        try:
            return compute_offer_totals(lines, global_pct, tax_pct, mode)
        except ValueError as exc:
            raise BadRequestError(str(exc)) from exc

    async def quote(self, data: QuoteRequest) -> OfferTotals:
        """Price a draft set of lines without persisting anything."""
        resolved = await self._price_lines(data.services)
        return self._totals(
            [priced for _, priced in resolved],
            data.global_discount_percentage,
            data.tax_percentage,
            data.discount_type,
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def _check_references(self, values: dict[str, Any]) -> None:
        await require_reference(self._orgs, values.get("organization_id"))
        await require_reference(self._contacts, values.get("contact_id"))
        await require_reference(self._entities, values.get("corporate_entity_id"))
        await require_reference(self._payment_terms, values.get("payment_term_id"))
        await require_reference(self._delivery_conditions, values.get("delivery_condition_id"))

    async def _check_links(self, link_ids: Sequence[str]) -> None:
        for link_id in link_ids:
            await require_reference(self._links, link_id)

    async def _snapshot_terms(self, values: dict[str, Any]) -> None:
        """Copy the referenced payment/delivery text onto the offer unless given explicitly."""
        if "payment_term_id" in values and not values.get("payment_terms_text"):
            term = await self._payment_terms.get_by_id(values["payment_term_id"]) if values["payment_term_id"] else None
            values["payment_terms_text"] = term.description if term else None
        if "delivery_condition_id" in values and not values.get("delivery_conditions_text"):
            condition = (
                await self._delivery_conditions.get_by_id(values["delivery_condition_id"])
                if values["delivery_condition_id"]
                else None
            )
            values["delivery_conditions_text"] = condition.description if condition else None

    async def create_offer(self, data: OfferCreate) -> Offer:
        values = data.model_dump(exclude_none=True, exclude={"services", "offer_selected_link_ids", "created_at"})
        await self._check_references(values)
        link_ids = data.offer_selected_link_ids or []
        await self._check_links(link_ids)

        created_at = _to_datetime(data.created_at) if data.created_at else utcnow()
        values["created_at"] = created_at
        values.setdefault("discount_type", DISCOUNT_GLOBAL)
        if not values.get("title"):
            organization = await self._orgs.get_by_id(data.organization_id)
            values["title"] = default_title(organization.name if organization else None, created_at.year)
        await self._snapshot_terms(values)

        resolved = await self._price_lines(data.services)
        totals = self._totals(
            [priced for _, priced in resolved],
            values.get("global_discount_percentage"),
            values.get("tax_percentage"),
            values["discount_type"],
        )
        values["total_amount"] = totals.grand_total

        offer = await self._repo.create(**values)
        await self._repo.replace_lines(offer, [row for row, _ in resolved])
        if link_ids:
            await self._repo.replace_links(offer, link_ids)
        logger.info("Created offer %s total=%s %s", offer.id, totals.grand_total, offer.currency)
        return await self.get_offer(offer.id)

    async def update_offer(self, offer_id: str, data: OfferUpdate) -> Offer:
        offer = await self.get_offer(offer_id)
        fields_set = data.model_fields_set
        values = data.model_dump(exclude_unset=True, exclude={"services", "offer_selected_link_ids", "created_at"})
        await self._check_references(values)
        link_ids = data.offer_selected_link_ids if "offer_selected_link_ids" in fields_set else None
        if link_ids:
            await self._check_links(link_ids)

        if "created_at" in fields_set and data.created_at:
            values["created_at"] = _to_datetime(data.created_at)
        if "title" in values and not values["title"]:
            organization = await self._orgs.get_by_id(values.get("organization_id") or offer.organization_id)
            year = (values.get("created_at") or offer.created_at).year
            values["title"] = default_title(organization.name if organization else None, year)
        await self._snapshot_terms(values)

        new_lines = None
        if "services" in fields_set and data.services is not None:
            new_lines = await self._price_lines(data.services)
            priced = [p for _, p in new_lines]
        else:
            priced = list(offer_totals(offer).lines)

        # A null for a pricing setting keeps the stored value; what gets persisted
        # is exactly what offer_totals() prices with afterwards
        for name in ("discount_type", "global_discount_percentage"):
            if name in values and values[name] is None:
                values[name] = getattr(offer, name)
        discount_type = values.get("discount_type", offer.discount_type) or DISCOUNT_GLOBAL
        values["discount_type"] = discount_type
        global_pct = values.get("global_discount_percentage", offer.global_discount_percentage)
        tax = values["tax_percentage"] if "tax_percentage" in values else offer.tax_percentage
        totals = self._totals(priced, global_pct, tax, discount_type)
        values["total_amount"] = totals.grand_total

        offer = await self._repo.update(offer, **values)
        if new_lines is not None:
            await self._repo.replace_lines(offer, [row for row, _ in new_lines])
        if link_ids is not None:
            await self._repo.replace_links(offer, link_ids)
        logger.info("Updated offer %s total=%s", offer.id, totals.grand_total)
        return await self.get_offer(offer.id)

    async def set_status(self, offer_id: str, status: str) -> Offer:
        offer = await self.get_offer(offer_id)
        return await self._repo.update(offer, status=status)

    async def accept_offer(self, offer_id: str, data: OfferAcceptIn) -> Offer:
        """Mark an offer accepted from the dashboard."""
        offer = await self.get_offer(offer_id)
        if offer.is_accepted:
            raise ConflictError("Offer has already been accepted")
        metadata = dict(data.metadata or {})
        metadata["accepted_source"] = "dashboard"
        return await self._repo.update(
            offer,
            is_accepted=True,
            accepted_at=utcnow(),
            accepted_by_name=data.name,
            accepted_by_email=data.email,
            accepted_metadata=metadata,
        )

    async def delete_offer(self, offer_id: str) -> None:
        deleted = await self._repo.delete(offer_id)
        if not deleted:
            raise NotFoundError("Offer", offer_id)
        logger.info("Deleted offer %s", offer_id)
