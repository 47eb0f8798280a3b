"""Dashboard member repository."""

from sqlalchemy import func

from bizops.domain.member import AuthUser
from bizops.repositories.base import BaseRepository


class MemberRepository(BaseRepository[AuthUser]):
    model = AuthUser
    entity_name = "Member"

    async def get_by_email(self, email: str) -> AuthUser | None:
        result = await self._session.execute(
            self._base_query().where(func.lower(AuthUser.email) == email.lower())
        )
        return result.scalars().first()
