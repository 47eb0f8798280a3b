"""Repositories for the settings entities (all carry an exclusive ``is_default`` flag)."""

from typing import TypeVar

from sqlalchemy import update

from bizops.domain.settings import (
    CorporateEntity,
    DeliveryCondition,
    OfferLinkPreset,
    PaymentTerm,
)
from bizops.repositories.base import BaseRepository

SettingT = TypeVar("SettingT", CorporateEntity, PaymentTerm, DeliveryCondition, OfferLinkPreset)


class SettingsRepository(BaseRepository[SettingT]):
    """Shared queries for rows with ``is_default`` (and optionally ``is_active``)."""

    async def clear_other_defaults(self, keep_id: str) -> None:
        await self._session.execute(
            update(self.model)
            .where(self.model.id != keep_id)
            .where(self.model.is_default.is_(True))
            .values(is_default=False)
        )

    async def list_active(self) -> list[SettingT]:
        filters = {"is_active": True} if self._column("is_active") is not None else None
        return await self.list_all(order_by="created_at", order="asc", filters=filters)

    async def get_default(self) -> SettingT | None:
        for row in await self.list_active():
            if row.is_default:
                return row
        return None


class CorporateEntityRepository(SettingsRepository[CorporateEntity]):
    model = CorporateEntity
    entity_name = "Corporate entity"


class PaymentTermRepository(SettingsRepository[PaymentTerm]):
    model = PaymentTerm
    entity_name = "Payment term"


class DeliveryConditionRepository(SettingsRepository[DeliveryCondition]):
    model = DeliveryCondition
    entity_name = "Delivery condition"


class OfferLinkRepository(SettingsRepository[OfferLinkPreset]):
    model = OfferLinkPreset
    entity_name = "Offer link"
