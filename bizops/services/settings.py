"""Services for corporate entities, payment terms, delivery conditions and offer links.

All four kinds carry an ``is_default`` flag that is exclusive within the kind:
marking one row as default clears the flag everywhere else.
"""

import logging

from bizops.repositories.settings import (
    CorporateEntityRepository,
    DeliveryConditionRepository,
    OfferLinkRepository,
    PaymentTermRepository,
)
from bizops.schemas.settings import CorporateEntityOut, OfferLinkOut, TermOut
from bizops.services.base import EntityService

logger = logging.getLogger(__name__)


class SettingsService(EntityService):
    async def _after_write(self, instance):
        if instance.is_default:
            logger.debug("Making %s %s the default", self.entity_name.lower(), instance.id)
            await self._repo.clear_other_defaults(instance.id)
        return await super()._after_write(instance)


class CorporateEntityService(SettingsService):
    repository_class = CorporateEntityRepository
    table = "corporate-entities"
    out_schema = CorporateEntityOut
    cache_namespace = "corporate_entities"


class PaymentTermService(SettingsService):
    repository_class = PaymentTermRepository
    table = "payment-terms"
    out_schema = TermOut
    cache_namespace = "payment_terms"


class DeliveryConditionService(SettingsService):
    repository_class = DeliveryConditionRepository
    table = "delivery-conditions"
    out_schema = TermOut
    cache_namespace = "delivery_conditions"


class OfferLinkService(SettingsService):
    repository_class = OfferLinkRepository
    table = "offer-links"
    out_schema = OfferLinkOut
    cache_namespace = "offer_links"
