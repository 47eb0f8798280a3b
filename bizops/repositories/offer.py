"""Offer repository: offers plus their line items, selected links and access logs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import select

from bizops.domain.offer import Offer, OfferAccessLog, OfferLine, OfferSelectedLink
from bizops.repositories.base import BaseRepository


class OfferRepository(BaseRepository[Offer]):
    model = Offer
    entity_name = "Offer"

    async def list_for_organization(self, organization_id: str, status: str | None = None) -> list[Offer]:
        filters: dict[str, Any] = {"organization_id": organization_id}
        if status:
            filters["status"] = status
        return await self.list_all(filters=filters)

    async def replace_lines(self, offer: Offer, lines: Sequence[dict[str, Any]]) -> None:
        """Swap the offer's OfferService rows; delete-orphan removes the old ones."""
        offer.lines = [
            OfferLine(position=position, **values) for position, values in enumerate(lines)
        ]
        await self._session.flush()

    async def replace_links(self, offer: Offer, link_ids: Iterable[str]) -> None:
        seen: list[str] = []
        for link_id in link_ids:
            if link_id not in seen:
                seen.append(link_id)
        offer.selected_links = [OfferSelectedLink(link_id=link_id, is_enabled=True) for link_id in seen]
        await self._session.flush()

    # ------------------------------------------------------------------
    # Access logs
    # ------------------------------------------------------------------

    async def add_access_log(self, **kwargs: Any) -> OfferAccessLog:
        log = OfferAccessLog(**kwargs)
        self._session.add(log)
        await self._session.flush()
        return log

    async def list_access_logs(self, offer_id: str) -> list[OfferAccessLog]:
        result = await self._session.execute(
            select(OfferAccessLog)
            .where(OfferAccessLog.offer_id == offer_id)
            .order_by(OfferAccessLog.created_at.desc())
        )
        return list(result.scalars().all())
