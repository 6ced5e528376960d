"""Identity provider port.

The portal issues invitations in an external directory (authentik). The
domain talks to it only through this interface; the HTTP client lives in
the adapter layer.
"""

from datetime import datetime
from typing import Any

from portal.domain.value.common import ValueObject


class Flow(ValueObject):
    """Enrollment flow an invitation is bound to."""

    pk: str
    slug: str
    name: str


class Invitation(ValueObject):
    """Invitation as stored upstream."""

    pk: str
    name: str
    expires: datetime | None = None
    single_use: bool = True
    flow: str | None = None  # Flow pk


class CreatedInvitation(ValueObject):
    """Result of creating an invitation."""

    invitation: Invitation
    invite_url: str


class DirectoryUser(ValueObject):
    """User account in the directory."""

    id: str
    username: str
    name: str = ""
    email: str = ""
    is_active: bool = True


class IdentityProviderClient:
    """Generic identity provider interface.

    Operations that look something up return None when it does not exist.
    Failures raise ``IdentityProviderError`` (rejected by the provider) or
    ``IdentityProviderUnavailableError`` (provider not reachable).
    """

    async def create_invitation(
        self,
        name: str,
        expiry: str,
        single_use: bool,
        flow: Flow,
        invited_by: str | None = None,
        fixed_data: dict[str, Any] | None = None,
    ) -> CreatedInvitation:
        """Create an invitation.

        Args:
            name: Human readable invitation name
            expiry: Duration token, "never" for no expiry
            single_use: Whether the link works only once
            flow: Enrollment flow to bind the invitation to
            invited_by: Username recorded as the inviter
            fixed_data: Extra data carried into enrollment (e.g. groups)

        Returns:
            The created invitation and its link
        """
        raise NotImplementedError

    async def get_invitation(self, pk: str) -> Invitation | None:
        """Fetch an invitation, None once it is used up, expired or deleted."""
        raise NotImplementedError

    async def delete_invitation(self, pk: str) -> bool:
        """Delete an invitation, True on success."""
        raise NotImplementedError

    async def get_flow(self, slug: str) -> Flow | None:
        """Resolve an enrollment flow by slug."""
        raise NotImplementedError

    async def list_flows(self) -> list[Flow]:
        """List enrollment flows."""
        raise NotImplementedError

    async def search_users(self, query: str) -> list[DirectoryUser]:
        """Search directory users."""
        raise NotImplementedError

    async def get_user(self, user_id: str) -> DirectoryUser | None:
        """Fetch a directory user by id."""
        raise NotImplementedError

    async def get_user_by_username(self, username: str) -> DirectoryUser | None:
        """Fetch a directory user by exact username."""
        raise NotImplementedError

    def invite_url(self, flow_slug: str, pk: str) -> str:
        """Build the link a recipient opens to enroll."""
        raise NotImplementedError
