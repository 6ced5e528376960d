"""Request dependencies shared by the routes.

The portal runs behind the authentik proxy outpost, which authenticates
every request and forwards the user as ``X-authentik-*`` headers.
"""

from fastapi import Header
from pydantic import BaseModel

from portal.application.usecase.base import CallerInfo
from portal.config import Settings
from portal.interface.error import AuthenticationError, ForbiddenError


class Envelope(BaseModel):
    """Successful response envelope."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Failed response envelope."""

    success: bool = False
    error: str


def get_caller(
    x_authentik_uid: str | None = Header(default=None),
    x_authentik_username: str | None = Header(default=None),
    x_authentik_name: str | None = Header(default=None),
    x_authentik_email: str | None = Header(default=None),
    x_authentik_groups: str | None = Header(default=None),
) -> CallerInfo:
    """Read the authenticated user from the proxy headers.

    Raises:
        AuthenticationError: If the user id or username is missing
    """
    if not x_authentik_uid or not x_authentik_username:
        raise AuthenticationError("Unauthorized")

    # authentik joins group names with "|"
    groups = [g for g in (x_authentik_groups or "").split("|") if g]

    return CallerInfo(
        sub=x_authentik_uid,
        username=x_authentik_username,
        display_name=x_authentik_name or None,
        email=x_authentik_email or None,
        groups=groups,
    )


def require_admin(caller: CallerInfo, settings: Settings) -> None:
    """Raise ForbiddenError unless the caller is in the admin group."""
    if settings.admin.group not in caller.groups:
        raise ForbiddenError("Admin access required")
