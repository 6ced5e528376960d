"""Unit tests for the authentik API client."""

import json

import httpx
import pytest

from portal.adapter.authentik import RealAuthentikClient
from portal.adapter.authentik.client import error_message, slugify_invitation_name
from portal.domain.error import IdentityProviderError, IdentityProviderUnavailableError
from portal.domain.service import Flow

FLOW = Flow(pk="flow-1", slug="default-enrollment-flow", name="Default")


def make_client(handler) -> RealAuthentikClient:
    return RealAuthentikClient(
        api_url="https://auth.example.org/",
        api_token="secret",
        transport=httpx.MockTransport(handler),
    )


class TestSlugify:
    def test_lowercases_and_hyphenates(self):
        assert slugify_invitation_name("Invite for Bob Smith!") == "invite-for-bob-smith"

    def test_email_characters_are_dropped(self):
        assert slugify_invitation_name("Invite for a.b@x.org") == "invite-for-abxorg"

    def test_truncated_to_fifty(self):
        assert len(slugify_invitation_name("x" * 80)) == 50

    def test_empty_falls_back_to_timestamp(self):
        assert slugify_invitation_name("!!!").startswith("invite-")


class TestErrorMessage:
    def test_detail(self):
        response = httpx.Response(403, json={"detail": "Token invalid"})
        assert error_message(response) == "Token invalid"

    def test_field_errors(self):
        response = httpx.Response(400, json={"name": ["already exists"]})
        assert error_message(response) == "name: already exists"

    def test_non_json(self):
        response = httpx.Response(502, text="Bad Gateway")
        assert error_message(response) == "authentik API error: 502"


class TestCreateInvitation:
    @pytest.mark.asyncio
    async def test_request_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                201,
                json={
                    "pk": "abc",
                    "name": seen["body"]["name"],
                    "expires": "2026-01-08T12:00:00Z",
                    "single_use": True,
                    "flow": "flow-1",
                },
            )

        client = make_client(handler)
        created = await client.create_invitation(
            name="For Carol",
            expiry="7d",
            single_use=True,
            flow=FLOW,
            invited_by="alice",
            fixed_data={"invite_groups": ["guests"]},
        )
        await client.aclose()

        assert seen["url"] == (
            "https://auth.example.org/api/v3/stages/invitation/invitations/"
        )
        assert seen["auth"] == "Bearer secret"
        body = seen["body"]
        assert body["name"] == "for-carol"
        assert body["flow"] == "flow-1"
        assert body["fixed_data"] == {
            "invited_by": "alice",
            "invite_groups": ["guests"],
        }
        assert "expires" in body
        assert created.invitation.pk == "abc"
        assert created.invite_url == (
            "https://auth.example.org/if/flow/default-enrollment-flow/?itoken=abc"
        )

    @pytest.mark.asyncio
    async def test_never_expiring_invite_has_no_expires(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"pk": "abc", "name": "x", "flow": "f"})

        client = make_client(handler)
        await client.create_invitation("x", "never", False, FLOW)

        assert "expires" not in seen["body"]
        assert "fixed_data" not in seen["body"]
        assert seen["body"]["single_use"] is False

    @pytest.mark.asyncio
    async def test_rejection_raises(self):
        client = make_client(
            lambda request: httpx.Response(400, json={"name": ["taken"]})
        )

        with pytest.raises(IdentityProviderError, match="name: taken"):
            await client.create_invitation("x", "24h", True, FLOW)

    @pytest.mark.asyncio
    async def test_unreachable_raises_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(IdentityProviderUnavailableError):
            await client.create_invitation("x", "24h", True, FLOW)


class TestLookups:
    @pytest.mark.asyncio
    async def test_missing_invitation_is_none(self):
        client = make_client(lambda request: httpx.Response(404, json={}))
        assert await client.get_invitation("gone") is None

    @pytest.mark.asyncio
    async def test_delete_failure_returns_false(self):
        client = make_client(lambda request: httpx.Response(404, json={}))
        assert await client.delete_invitation("gone") is False

    @pytest.mark.asyncio
    async def test_delete_success(self):
        client = make_client(lambda request: httpx.Response(204))
        assert await client.delete_invitation("abc") is True

    @pytest.mark.asyncio
    async def test_get_flow_by_slug(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["slug"] == "default-enrollment-flow"
            return httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "pk": "flow-1",
                            "slug": "default-enrollment-flow",
                            "name": "Enroll",
                        }
                    ]
                },
            )

        client = make_client(handler)
        flow = await client.get_flow("default-enrollment-flow")

        assert flow == Flow(pk="flow-1", slug="default-enrollment-flow", name="Enroll")

    @pytest.mark.asyncio
    async def test_get_flow_missing(self):
        client = make_client(lambda request: httpx.Response(200, json={"results": []}))
        assert await client.get_flow("nope") is None

    @pytest.mark.asyncio
    async def test_user_by_username(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["username"] == "alice"
            return httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "pk": 7,
                            "uid": "uid-alice",
                            "username": "alice",
                            "name": "Alice",
                            "email": None,
                            "is_active": False,
                        }
                    ]
                },
            )

        client = make_client(handler)
        user = await client.get_user_by_username("alice")

        assert user.id == "uid-alice"
        assert user.email == ""
        assert user.is_active is False
