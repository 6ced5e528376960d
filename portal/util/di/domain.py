"""Domain layer DI providers."""

from dishka import Scope, provide

from portal.config import Settings
from portal.domain.model import PolicyStore
from portal.domain.repository import BulkJobRepository, InviteLogRepository
from portal.domain.service import (
    BulkInviteService,
    EmailSender,
    IdentityProviderClient,
    PolicyService,
    QuotaService,
)
from portal.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are APP-scoped. Repositories commit every operation on
    their own, so a service outlives requests and can be shared with
    background jobs.
    """

    scope = Scope.APP

    @provide
    def get_policy_service(self, policy_store: PolicyStore) -> PolicyService:
        """Provide policy domain service."""
        return PolicyService(policy_store=policy_store)

    @provide
    def get_quota_service(
        self, invite_log_repository: InviteLogRepository
    ) -> QuotaService:
        """Provide quota domain service."""
        return QuotaService(invite_log_repository=invite_log_repository)

    @provide
    def get_bulk_invite_service(
        self,
        bulk_job_repository: BulkJobRepository,
        policy_service: PolicyService,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
        email_sender: EmailSender,
        settings: Settings,
    ) -> BulkInviteService:
        """Provide bulk invite domain service."""
        return BulkInviteService(
            bulk_job_repository=bulk_job_repository,
            policy_service=policy_service,
            quota_service=quota_service,
            identity_provider=identity_provider,
            email_sender=email_sender,
            flow_slug=settings.authentik.flow_slug,
            app_name=settings.app_name,
        )
