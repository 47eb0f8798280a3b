"""Dashboard member service (email is unique, case-insensitively)."""

from typing import Any

from bizops.core.exceptions import ConflictError
from bizops.domain.member import AuthUser
from bizops.repositories.member import MemberRepository
from bizops.schemas.member import MemberOut
from bizops.services.base import EntityService


class MemberService(EntityService[AuthUser]):
    repository_class = MemberRepository
    table = "members"
    out_schema = MemberOut

    async def _check_references(self, values: dict[str, Any], current=None) -> None:
        email = values.get("email")
        if not email:
            return
        values["email"] = email.strip().lower()
        existing = await self._repo.get_by_email(values["email"])
        if existing and (current is None or existing.id != current.id):
            raise ConflictError(f"A member with email '{values['email']}' already exists")
