"""authentik API v3 client implementation."""

import re
from datetime import datetime, timezone
from typing import Any

import httpx
import logfire

from portal.domain.error import IdentityProviderError, IdentityProviderUnavailableError
from portal.domain.service.identity_provider import (
    CreatedInvitation,
    DirectoryUser,
    Flow,
    IdentityProviderClient,
    Invitation,
)
from portal.domain.value.duration import expires_at

INVITATIONS_PATH = "/api/v3/stages/invitation/invitations/"
FLOWS_PATH = "/api/v3/flows/instances/"
USERS_PATH = "/api/v3/core/users/"


def slugify_invitation_name(name: str) -> str:
    """authentik only accepts slug-like invitation names."""
    slug = re.sub(r"[^a-z0-9\s-]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)[:50]
    if not slug:
        slug = f"invite-{int(datetime.now(timezone.utc).timestamp() * 1000)}"
    return slug


def error_message(response: httpx.Response) -> str:
    """Extract a readable message from an authentik error response."""
    default = f"authentik API error: {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return default
    if not isinstance(data, dict):
        return default

    if data.get("detail"):
        return str(data["detail"])
    if data.get("non_field_errors"):
        return ", ".join(data["non_field_errors"])

    field_errors = "; ".join(
        f"{key}: {', '.join(map(str, value)) if isinstance(value, list) else value}"
        for key, value in data.items()
        if key not in ("detail", "non_field_errors")
    )
    return field_errors or default


class AuthentikClient(IdentityProviderClient):
    """Base class for authentik clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealAuthentikClient(AuthentikClient):
    """authentik client talking to the REST API with a bearer token."""

    def __init__(
        self,
        api_url: str,
        api_token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize authentik client.

        Args:
            api_url: Base URL of the authentik server
            api_token: API token
            timeout: Timeout (seconds) for each request
            transport: Optional transport, used by tests
        """
        self.base_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logfire.error(
                "authentik unreachable", method=method, path=path, error=str(e)
            )
            raise IdentityProviderUnavailableError(
                f"authentik is unreachable: {e}"
            ) from e
        return response

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        if response.is_error:
            message = error_message(response)
            logfire.warn(
                "authentik request failed",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise IdentityProviderError(message)
        return response.json()

    async def _get_or_none(self, path: str, **kwargs: Any) -> Any | None:
        response = await self._request("GET", path, **kwargs)
        if response.status_code == 404:
            return None
        if response.is_error:
            raise IdentityProviderError(error_message(response))
        return response.json()

    async def create_invitation(
        self,
        name: str,
        expiry: str,
        single_use: bool,
        flow: Flow,
        invited_by: str | None = None,
        fixed_data: dict[str, Any] | None = None,
    ) -> CreatedInvitation:
        """Create an invitation bound to ``flow``.

        Raises:
            IdentityProviderError: If authentik rejects the invitation
            IdentityProviderUnavailableError: If authentik cannot be reached
        """
        body: dict[str, Any] = {
            "name": slugify_invitation_name(name),
            "single_use": single_use,
            "flow": flow.pk,
        }

        data: dict[str, Any] = {}
        if invited_by:
            data["invited_by"] = invited_by
        if fixed_data:
            data.update(fixed_data)
        if data:
            body["fixed_data"] = data

        expires = expires_at(expiry, datetime.now(timezone.utc))
        if expires is not None:
            body["expires"] = expires.isoformat()

        with logfire.span(
            "authentik.create_invitation",
            flow=flow.slug,
            single_use=single_use,
            expiry=expiry,
        ):
            payload = await self._json("POST", INVITATIONS_PATH, json=body)
            invitation = self._to_invitation(payload)
            logfire.info("Invitation created", pk=invitation.pk)

        return CreatedInvitation(
            invitation=invitation,
            invite_url=self.invite_url(flow.slug, invitation.pk),
        )

    async def get_invitation(self, pk: str) -> Invitation | None:
        payload = await self._get_or_none(f"{INVITATIONS_PATH}{pk}/")
        return self._to_invitation(payload) if payload else None

    async def delete_invitation(self, pk: str) -> bool:
        response = await self._request("DELETE", f"{INVITATIONS_PATH}{pk}/")
        if response.is_error:
            logfire.warn(
                "authentik invitation delete failed",
                pk=pk,
                status_code=response.status_code,
                error=error_message(response),
            )
            return False
        return True

    async def get_flow(self, slug: str) -> Flow | None:
        payload = await self._json("GET", FLOWS_PATH, params={"slug": slug})
        results = payload.get("results", [])
        return self._to_flow(results[0]) if results else None

    async def list_flows(self) -> list[Flow]:
        payload = await self._json(
            "GET", FLOWS_PATH, params={"designation": "enrollment"}
        )
        return [self._to_flow(item) for item in payload.get("results", [])]

    async def search_users(self, query: str) -> list[DirectoryUser]:
        payload = await self._json(
            "GET",
            USERS_PATH,
            params={"search": query, "ordering": "username", "page_size": 10},
        )
        return [self._to_user(item) for item in payload.get("results", [])]

    async def get_user(self, user_id: str) -> DirectoryUser | None:
        payload = await self._get_or_none(f"{USERS_PATH}{user_id}/")
        return self._to_user(payload) if payload else None

    async def get_user_by_username(self, username: str) -> DirectoryUser | None:
        payload = await self._json("GET", USERS_PATH, params={"username": username})
        results = payload.get("results", [])
        return self._to_user(results[0]) if results else None

    def invite_url(self, flow_slug: str, pk: str) -> str:
        return f"{self.base_url}/if/flow/{flow_slug}/?itoken={pk}"

    @staticmethod
    def _to_invitation(data: dict[str, Any]) -> Invitation:
        return Invitation(
            pk=str(data["pk"]),
            name=data.get("name", ""),
            expires=data.get("expires"),
            single_use=data.get("single_use", True),
            flow=str(data["flow"]) if data.get("flow") else None,
        )

    @staticmethod
    def _to_flow(data: dict[str, Any]) -> Flow:
        return Flow(
            pk=str(data["pk"]),
            slug=data["slug"],
            name=data.get("name") or data.get("title") or data["slug"],
        )

    @staticmethod
    def _to_user(data: dict[str, Any]) -> DirectoryUser:
        return DirectoryUser(
            id=str(data.get("uid") or data["pk"]),
            username=data["username"],
            name=data.get("name") or "",
            email=data.get("email") or "",
            is_active=data.get("is_active", True),
        )


class MockAuthentikClient(AuthentikClient):
    """In-memory authentik for testing.

    Keeps invitations in a dict. Tests steer failures through
    ``reject_names`` (creation rejected with IdentityProviderError),
    ``unavailable`` (every call raises IdentityProviderUnavailableError)
    and ``unavailable_after`` (creations succeed that many times, then
    authentik goes away).
    """

    base_url = "https://auth.example.org"

    def __init__(self) -> None:
        self.flows: dict[str, Flow] = {
            "default-enrollment-flow": Flow(
                pk="flow-default",
                slug="default-enrollment-flow",
                name="Default Enrollment",
            )
        }
        self.invitations: dict[str, Invitation] = {}
        self.fixed_data: dict[str, dict[str, Any]] = {}
        self.users: dict[str, DirectoryUser] = {}
        self.reject_names: set[str] = set()
        self.unavailable = False
        self.unavailable_after: int | None = None
        self.create_calls = 0
        self._counter = 0

    def add_user(
        self,
        username: str,
        user_id: str | None = None,
        email: str = "",
        name: str = "",
        is_active: bool = True,
    ) -> DirectoryUser:
        """Register a directory user."""
        user = DirectoryUser(
            id=user_id or f"uid-{username}",
            username=username,
            name=name,
            email=email,
            is_active=is_active,
        )
        self.users[user.id] = user
        return user

    def _check_available(self) -> None:
        if self.unavailable:
            raise IdentityProviderUnavailableError("authentik is unreachable")

    async def create_invitation(
        self,
        name: str,
        expiry: str,
        single_use: bool,
        flow: Flow,
        invited_by: str | None = None,
        fixed_data: dict[str, Any] | None = None,
    ) -> CreatedInvitation:
        self._check_available()
        if (
            self.unavailable_after is not None
            and self.create_calls >= self.unavailable_after
        ):
            raise IdentityProviderUnavailableError("authentik is unreachable")
        self.create_calls += 1

        if name in self.reject_names:
            raise IdentityProviderError("name: invitation rejected")

        self._counter += 1
        pk = f"inv-{self._counter}"
        invitation = Invitation(
            pk=pk,
            name=slugify_invitation_name(name),
            expires=expires_at(expiry, datetime.now(timezone.utc)),
            single_use=single_use,
            flow=flow.pk,
        )
        self.invitations[pk] = invitation
        data = {"invited_by": invited_by} if invited_by else {}
        data.update(fixed_data or {})
        self.fixed_data[pk] = data
        return CreatedInvitation(
            invitation=invitation, invite_url=self.invite_url(flow.slug, pk)
        )

    async def get_invitation(self, pk: str) -> Invitation | None:
        self._check_available()
        return self.invitations.get(pk)

    async def delete_invitation(self, pk: str) -> bool:
        self._check_available()
        return self.invitations.pop(pk, None) is not None

    async def get_flow(self, slug: str) -> Flow | None:
        self._check_available()
        return self.flows.get(slug)

    async def list_flows(self) -> list[Flow]:
        self._check_available()
        return list(self.flows.values())

    async def search_users(self, query: str) -> list[DirectoryUser]:
        self._check_available()
        needle = query.lower()
        matches = [
            user
            for user in self.users.values()
            if needle in user.username.lower()
            or needle in user.name.lower()
            or needle in user.email.lower()
        ]
        return sorted(matches, key=lambda u: u.username)[:10]

    async def get_user(self, user_id: str) -> DirectoryUser | None:
        self._check_available()
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> DirectoryUser | None:
        self._check_available()
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def invite_url(self, flow_slug: str, pk: str) -> str:
        return f"{self.base_url}/if/flow/{flow_slug}/?itoken={pk}"
