"""Revoke invite use case."""

import logfire
from pydantic import BaseModel

from portal.application.usecase.base import CallerInfo
from portal.domain.error import IdentityProviderError, NotFoundError
from portal.domain.service import IdentityProviderClient, QuotaService


class RevokeInviteRequest(BaseModel):
    """Revoke invite request."""

    caller: CallerInfo
    invite_id: str  # authentik invitation pk


class RevokeInviteUseCase:
    """Use case for deleting an invite the caller issued."""

    def __init__(
        self,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
    ) -> None:
        self.quota_service = quota_service
        self.identity_provider = identity_provider

    async def execute(self, request: RevokeInviteRequest) -> None:
        """Delete the invite upstream and mark it DELETED.

        Raises:
            NotFoundError: If the caller has no active invite with this id
            IdentityProviderError: If authentik refuses the deletion
        """
        record = await self.quota_service.find_invite(
            request.caller.sub, request.invite_id
        )
        if record is None or not record.is_active:
            raise NotFoundError("Invite", request.invite_id)

        if not await self.identity_provider.delete_invitation(request.invite_id):
            raise IdentityProviderError("Failed to delete invite in authentik")

        await self.quota_service.mark_deleted(record.id)
        logfire.info(
            "Invite revoked",
            owner_sub=request.caller.sub,
            invite_id=request.invite_id,
        )
