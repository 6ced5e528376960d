"""Invite history use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel, Field

from portal.application.usecase.base import CallerInfo
from portal.config import Settings
from portal.domain.error import IdentityProviderError
from portal.domain.model import InviteLogRecord
from portal.domain.service import IdentityProviderClient, QuotaService
from portal.domain.value import InviteLogStatus


class HistoryItem(BaseModel):
    """Invite history item in response."""

    id: str
    invite_id: str  # authentik invitation pk
    invite_url: str
    created_at: datetime
    expires_at: datetime | None = None
    status: InviteLogStatus
    group_label: str | None = None


class GetHistoryRequest(BaseModel):
    """Get invite history request."""

    caller: CallerInfo
    limit: int = Field(default=50, ge=1, le=100)


class GetHistoryResponse(BaseModel):
    """Get invite history response."""

    history: list[HistoryItem]


class GetHistoryUseCase:
    """Use case for listing a user's invites, synced with authentik.

    ACTIVE invites that no longer exist upstream are used up, expired or
    deleted; they are marked EXHAUSTED on the way out.
    """

    def __init__(
        self,
        quota_service: QuotaService,
        identity_provider: IdentityProviderClient,
        settings: Settings,
    ) -> None:
        self.quota_service = quota_service
        self.identity_provider = identity_provider
        self.settings = settings

    async def execute(self, request: GetHistoryRequest) -> GetHistoryResponse:
        owner_sub = request.caller.sub
        default_slug = self.settings.authentik.flow_slug

        flows = await self.identity_provider.list_flows()
        flow_slugs = {flow.pk: flow.slug for flow in flows}

        records = await self.quota_service.history(owner_sub, limit=request.limit)

        items = []
        for record in records:
            status, flow_slug = await self._sync(record, flow_slugs, default_slug)
            items.append(
                HistoryItem(
                    id=str(record.id),
                    invite_id=record.invite_external_id,
                    invite_url=self.identity_provider.invite_url(
                        flow_slug, record.invite_external_id
                    ),
                    created_at=record.created_at,
                    expires_at=record.expires_at,
                    status=status,
                    group_label=record.group_label,
                )
            )

        return GetHistoryResponse(history=items)

    async def _sync(
        self,
        record: InviteLogRecord,
        flow_slugs: dict[str, str],
        default_slug: str,
    ) -> tuple[InviteLogStatus, str]:
        # Gone invites have no flow to look up; the default slug is used
        if not record.is_active:
            return record.status, default_slug

        try:
            remote = await self.identity_provider.get_invitation(
                record.invite_external_id
            )
        except IdentityProviderError as e:
            logfire.warn(
                "Could not sync invite", record_id=str(record.id), error=str(e)
            )
            return record.status, default_slug

        if remote is None:
            await self.quota_service.mark_exhausted(record.id)
            return InviteLogStatus.EXHAUSTED, default_slug

        return record.status, flow_slugs.get(remote.flow or "", default_slug)
