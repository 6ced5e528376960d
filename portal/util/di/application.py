"""Application layer DI providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from portal.application.usecase.admin import (
    GetStatsUseCase,
    ResetQuotaUseCase,
    SearchUsersUseCase,
)
from portal.application.usecase.bulk import (
    GetBulkJobUseCase,
    ListBulkJobsUseCase,
    SubmitBulkInviteUseCase,
)
from portal.application.usecase.invite import (
    GenerateInviteUseCase,
    GetHistoryUseCase,
    RevokeInviteUseCase,
)
from portal.application.usecase.policy import GetGroupingsUseCase, GetQuotaUseCase
from portal.application.worker import BulkJobDispatcher
from portal.config import Settings
from portal.domain.service import (
    BulkInviteService,
    EmailSender,
    IdentityProviderClient,
    PolicyService,
    QuotaService,
)
from portal.util.di.base import ProviderBase
from portal.util.tasks import TaskSupervisor


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Background work
    @provide(scope=Scope.APP)
    async def get_task_supervisor(
        self, settings: Settings
    ) -> AsyncIterator[TaskSupervisor]:
        """Provide the task supervisor.

        Running jobs get a grace period when the container closes.
        """
        supervisor = TaskSupervisor(
            shutdown_grace_seconds=settings.bulk.shutdown_grace_seconds
        )
        yield supervisor
        await supervisor.shutdown()

    @provide(scope=Scope.APP)
    def get_bulk_job_dispatcher(
        self, bulk_invite_service: BulkInviteService, supervisor: TaskSupervisor
    ) -> BulkJobDispatcher:
        """Provide bulk job dispatcher."""
        return BulkJobDispatcher(
            bulk_invite_service=bulk_invite_service, supervisor=supervisor
        )

    # Policy use cases
    @provide(scope=Scope.REQUEST)
    def get_get_quota_use_case(
        self, policy_service: PolicyService, quota_service: QuotaService
    ) -> GetQuotaUseCase:
        """Provide get quota use case."""
        return GetQuotaUseCase(
            policy_service=policy_service, quota_service=quota_service
        )

    @provide(scope=Scope.REQUEST)
    def get_get_groupings_use_case(
        self, policy_service: PolicyService
    ) -> GetGroupingsUseCase:
        """Provide get groupings use case."""
        return GetGroupingsUseCase(policy_service=policy_service)

    # Invite use cases
    @provide(scope=Scope.REQUEST)
    def get_generate_invite_use_case(
        self,
        policy_service: PolicyService,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
        email_sender: EmailSender,
        settings: Settings,
    ) -> GenerateInviteUseCase:
        """Provide generate invite use case."""
        return GenerateInviteUseCase(
            policy_service=policy_service,
            quota_service=quota_service,
            identity_provider=identity_provider,
            email_sender=email_sender,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_history_use_case(
        self,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
        settings: Settings,
    ) -> GetHistoryUseCase:
        """Provide invite history use case."""
        return GetHistoryUseCase(
            quota_service=quota_service,
            identity_provider=identity_provider,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_revoke_invite_use_case(
        self, quota_service: QuotaService, identity_provider: IdentityProviderClient
    ) -> RevokeInviteUseCase:
        """Provide revoke invite use case."""
        return RevokeInviteUseCase(
            quota_service=quota_service, identity_provider=identity_provider
        )

    # Bulk use cases
    @provide(scope=Scope.REQUEST)
    def get_submit_bulk_invite_use_case(
        self,
        policy_service: PolicyService,
        quota_service: QuotaService,
        bulk_invite_service: BulkInviteService,
        dispatcher: BulkJobDispatcher,
        settings: Settings,
    ) -> SubmitBulkInviteUseCase:
        """Provide submit bulk invite use case."""
        return SubmitBulkInviteUseCase(
            policy_service=policy_service,
            quota_service=quota_service,
            bulk_invite_service=bulk_invite_service,
            dispatcher=dispatcher,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_bulk_job_use_case(
        self, bulk_invite_service: BulkInviteService
    ) -> GetBulkJobUseCase:
        """Provide get bulk job use case."""
        return GetBulkJobUseCase(bulk_invite_service=bulk_invite_service)

    @provide(scope=Scope.REQUEST)
    def get_list_bulk_jobs_use_case(
        self, bulk_invite_service: BulkInviteService
    ) -> ListBulkJobsUseCase:
        """Provide list bulk jobs use case."""
        return ListBulkJobsUseCase(bulk_invite_service=bulk_invite_service)

    # Admin use cases
    @provide(scope=Scope.REQUEST)
    def get_reset_quota_use_case(
        self, quota_service: QuotaService
    ) -> ResetQuotaUseCase:
        """Provide reset quota use case."""
        return ResetQuotaUseCase(quota_service=quota_service)

    @provide(scope=Scope.REQUEST)
    def get_get_stats_use_case(self, quota_service: QuotaService) -> GetStatsUseCase:
        """Provide global statistics use case."""
        return GetStatsUseCase(quota_service=quota_service)

    @provide(scope=Scope.REQUEST)
    def get_search_users_use_case(
        self, identity_provider: IdentityProviderClient
    ) -> SearchUsersUseCase:
        """Provide user search use case."""
        return SearchUsersUseCase(identity_provider=identity_provider)
