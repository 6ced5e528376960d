"""Reset quota use case."""

import logfire
from pydantic import BaseModel, Field

from portal.domain.service import QuotaService


class ResetQuotaRequest(BaseModel):
    """Reset quota request."""

    admin_sub: str
    user_sub: str = Field(min_length=1)


class ResetQuotaResponse(BaseModel):
    """Reset quota response."""

    message: str
    deleted_count: int


class ResetQuotaUseCase:
    """Use case for wiping a user's invite ledger."""

    def __init__(self, quota_service: QuotaService) -> None:
        self.quota_service = quota_service

    async def execute(self, request: ResetQuotaRequest) -> ResetQuotaResponse:
        deleted = await self.quota_service.reset_quota(request.user_sub)
        logfire.info(
            "Admin reset quota",
            admin_sub=request.admin_sub,
            user_sub=request.user_sub,
            deleted=deleted,
        )
        return ResetQuotaResponse(
            message=f"Reset quota for user. Deleted {deleted} invite logs.",
            deleted_count=deleted,
        )
