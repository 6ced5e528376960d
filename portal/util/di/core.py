"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from portal.config import Settings
from portal.domain.model import PolicyStore
from portal.persistence.policy_file import load_policy_store
from portal.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_policy_store(self, settings: Settings) -> PolicyStore:
        """Provide the policy document, loaded once per application.

        Raises:
            ConfigurationError: If the document is missing or invalid
        """
        return load_policy_store(settings.policy.path)
