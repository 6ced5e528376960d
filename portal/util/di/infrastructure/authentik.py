"""authentik infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from portal.adapter.authentik import AuthentikClient, RealAuthentikClient
from portal.config import Settings
from portal.domain.service import IdentityProviderClient
from portal.util.di.base import ProviderBase
from portal.util.observability import instrument_httpx


class AuthentikProvider(ProviderBase):
    """authentik component base."""

    __mock_component__ = "authentik"


class ProdAuthentikProvider(AuthentikProvider):
    """Production authentik provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_authentik_client(
        self, settings: Settings
    ) -> AsyncIterator[AuthentikClient]:
        """Provide authentik API client.

        The connection pool is closed with the container.
        """
        instrument_httpx()
        client = RealAuthentikClient(
            api_url=settings.authentik.api_url,
            api_token=settings.authentik.api_token,
            timeout=settings.authentik.timeout,
        )
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_identity_provider(self, client: AuthentikClient) -> IdentityProviderClient:
        """Expose the authentik client through the domain port."""
        return client
