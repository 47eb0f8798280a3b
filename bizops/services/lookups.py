"""Option lists for form widgets and table filters.

Static reference lists (countries, industries, currencies) live here; lists
backed by the database (organizations, corporate entities, terms, link
presets) are loaded through the short-lived lookup cache and invalidated by
the services that write those tables.
"""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from bizops.core.cache import lookup_cache
from bizops.repositories.organization import OrganizationRepository
from bizops.repositories.settings import (
    CorporateEntityRepository,
    DeliveryConditionRepository,
    OfferLinkRepository,
    PaymentTermRepository,
)

logger = logging.getLogger(__name__)

Option = dict[str, str]

CURRENCY_OPTIONS: list[Option] = [
    {"value": "EUR", "label": "EUR (€)"},
    {"value": "USD", "label": "USD ($)"},
    {"value": "GBP", "label": "GBP (£)"},
    {"value": "CHF", "label": "CHF (Fr.)"},
]

COUNTRIES: list[tuple[str, str]] = [
    ("AT", "Austria"), ("AU", "Australia"), ("BE", "Belgium"), ("BG", "Bulgaria"),
    ("BR", "Brazil"), ("CA", "Canada"), ("CH", "Switzerland"), ("CN", "China"),
    ("CY", "Cyprus"), ("CZ", "Czech Republic"), ("DE", "Germany"), ("DK", "Denmark"),
    ("EE", "Estonia"), ("ES", "Spain"), ("EU", "Europe"), ("FI", "Finland"),
    ("FR", "France"), ("GB", "United Kingdom"), ("GR", "Greece"), ("HR", "Croatia"),
    ("HU", "Hungary"), ("IE", "Ireland"), ("IN", "India"), ("IS", "Iceland"),
    ("IT", "Italy"), ("JP", "Japan"), ("KR", "South Korea"), ("LT", "Lithuania"),
    ("LU", "Luxembourg"), ("LV", "Latvia"), ("MT", "Malta"), ("MX", "Mexico"),
    ("NL", "Netherlands"), ("NO", "Norway"), ("NZ", "New Zealand"), ("PL", "Poland"),
    ("PT", "Portugal"), ("RO", "Romania"), ("SE", "Sweden"), ("SG", "Singapore"),
    ("SI", "Slovenia"), ("SK", "Slovakia"), ("TR", "Turkey"), ("UA", "Ukraine"),
    ("US", "United States"), ("ZA", "South Africa"),
]
COUNTRY_OPTIONS: list[Option] = [{"value": code, "label": name} for code, name in COUNTRIES]

INDUSTRIES: dict[str, list[str]] = {
    "enterprise": [
        "Manufacturing", "Technology", "Finance", "Healthcare", "Retail", "Energy",
        "Telecommunications",
    ],
    "education": ["University", "Research Institution", "School", "Training Center"],
    "government": ["Government Agency", "Ministry", "Local Government"],
    "research": ["Innovation Center", "Research Lab", "Incubator/Accelerator"],
    "other": ["Association", "NGO", "Foundation"],
    "technology": [
        "Software Development", "Hardware Manufacturing", "IT Services", "Cybersecurity",
        "Cloud Computing", "AI & Machine Learning",
    ],
    "finance": [
        "Banking", "Insurance", "Investment Services", "Financial Technology", "Accounting",
    ],
    "health": [
        "Healthcare Services", "Pharmaceuticals", "Medical Devices", "Biotechnology",
        "Health Technology",
    ],
    "industry": [
        "Automotive", "Aerospace", "Electronics", "Chemicals", "Industrial Manufacturing",
    ],
    "consumer": ["E-commerce", "Consumer Goods", "Luxury Goods", "Fashion & Apparel"],
    "services": [
        "Consulting", "Legal Services", "Marketing & Advertising", "Real Estate", "Hospitality",
    ],
    "resources": ["Utilities", "Renewable Energy", "Oil & Gas", "Mining"],
    "media": ["Media", "Entertainment", "Gaming", "Sports", "Publishing"],
}
INDUSTRY_OPTIONS: list[Option] = [
    {"value": name, "label": name}
    for names in INDUSTRIES.values()
    for name in names
]

_STATIC_LOOKUPS: dict[str, list[Option]] = {
    "country": COUNTRY_OPTIONS,
    "industry": INDUSTRY_OPTIONS,
    "currency": CURRENCY_OPTIONS,
}

# Lookup name -> cache namespace written by the owning service
LOOKUP_NAMESPACES = {
    "organization": "organizations",
    "corporate_entity": "corporate_entities",
    "payment_terms": "payment_terms",
    "delivery_conditions": "delivery_conditions",
    "offer_links": "offer_links",
}


class LookupService:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._loaders: dict[str, Callable[[], Awaitable[list[Option]]]] = {
            "organization": self._organizations,
            "corporate_entity": self._corporate_entities,
            "payment_terms": self._payment_terms,
            "delivery_conditions": self._delivery_conditions,
            "offer_links": self._offer_links,
        }

    async def options(self, name: str) -> list[Option]:
        if name in _STATIC_LOOKUPS:
            return list(_STATIC_LOOKUPS[name])
        loader = self._loaders.get(name)
        if loader is None:
            raise KeyError(name)
        key = lookup_cache.make_key(LOOKUP_NAMESPACES[name], "options")
        return await lookup_cache.get_or_load(key, loader)

    async def _organizations(self) -> list[Option]:
        logger.debug("Loading organization options")
        rows = await OrganizationRepository(self._session).list_all(order_by="name", order="asc")
        return [{"value": row.id, "label": row.name} for row in rows]

    async def _corporate_entities(self) -> list[Option]:
        rows = await CorporateEntityRepository(self._session).list_active()
        return [{"value": row.id, "label": row.name} for row in rows]

    async def _payment_terms(self) -> list[Option]:
        rows = await PaymentTermRepository(self._session).list_active()
        return [{"value": row.id, "label": row.title} for row in rows]

    async def _delivery_conditions(self) -> list[Option]:
        rows = await DeliveryConditionRepository(self._session).list_active()
        return [{"value": row.id, "label": row.title} for row in rows]

    async def _offer_links(self) -> list[Option]:
        rows = await OfferLinkRepository(self._session).list_active()
        return [{"value": row.id, "label": row.title} for row in rows]
