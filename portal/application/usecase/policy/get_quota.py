"""Get quota use case."""

from pydantic import BaseModel

from portal.application.usecase.base import CallerInfo
from portal.domain.model import QuotaStatus
from portal.domain.service import PolicyService, QuotaService


class ExpiryOption(BaseModel):
    """Expiry choice offered to the caller."""

    value: str
    label: str


class GetQuotaRequest(BaseModel):
    """Get quota request."""

    caller: CallerInfo


class GetQuotaResponse(BaseModel):
    """Caller's quota and invite options."""

    quota: QuotaStatus
    expiry_options: list[ExpiryOption]
    allow_multi_use: bool
    source_group: str | None = None


class GetQuotaUseCase:
    """Use case for reporting the caller's quota and invite options."""

    def __init__(
        self, policy_service: PolicyService, quota_service: QuotaService
    ) -> None:
        self.policy_service = policy_service
        self.quota_service = quota_service

    async def execute(self, request: GetQuotaRequest) -> GetQuotaResponse:
        policy = self.policy_service.resolve(request.caller.groups)
        status = await self.quota_service.status(request.caller.sub, policy)

        return GetQuotaResponse(
            quota=status,
            expiry_options=[
                ExpiryOption(**option)
                for option in self.policy_service.expiry_options(policy)
            ],
            allow_multi_use=policy.invite.allow_multi_use,
            source_group=policy.source_group,
        )
