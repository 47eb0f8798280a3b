"""Dashboard authentication dependency.

Public routes (offer/project views, offer acceptance) never depend on this.
"""

import hmac

from fastapi import Header

from bizops.core.config import settings
from bizops.core.exceptions import UnauthorizedError


async def require_dashboard_auth(authorization: str | None = Header(default=None)) -> None:
    """Check `Authorization: Bearer <API_TOKEN>` when a token is configured."""
    if not settings.auth_enabled:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError()
    if not hmac.compare_digest(token.strip(), settings.api_token or ""):
        raise UnauthorizedError("Invalid API token")
