"""Service catalog service."""

from bizops.domain.catalog import Service
from bizops.repositories.catalog import ServiceRepository
from bizops.schemas.service import ServiceOut
from bizops.services.base import EntityService


class CatalogService(EntityService[Service]):
    repository_class = ServiceRepository
    table = "services"
    out_schema = ServiceOut
