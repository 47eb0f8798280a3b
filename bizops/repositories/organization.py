"""Organization and Contact repositories."""

from bizops.domain.organization import Contact, Organization
from bizops.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization
    entity_name = "Organization"


class ContactRepository(BaseRepository[Contact]):
    model = Contact
    entity_name = "Contact"
