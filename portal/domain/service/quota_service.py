"""Quota accounting domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from portal.domain.error import NotFoundError, QuotaExceededError
from portal.domain.model.invite_log import InviteLogRecord, utcnow
from portal.domain.model.policy import ResolvedPolicy
from portal.domain.model.quota import GlobalStats, QuotaStatus
from portal.domain.repository import InviteLogRepository
from portal.domain.value import InviteLogId, InviteLogStatus, QuotaStrategy
from portal.domain.value.duration import period_duration

from .base import Service


class QuotaService(Service):
    """Domain service for quota accounting over the invite ledger."""

    def __init__(self, invite_log_repository: InviteLogRepository) -> None:
        """Initialize quota service.

        Args:
            invite_log_repository: Invite ledger repository
        """
        self.invite_log_repository = invite_log_repository

    async def status(
        self,
        owner_sub: str,
        policy: ResolvedPolicy,
        now: datetime | None = None,
    ) -> QuotaStatus:
        """Calculate the current quota status of a user.

        Recurring quotas count records in a sliding window ending at
        ``now``; it is not aligned to calendar boundaries.

        Args:
            owner_sub: User subject identifier
            policy: The user's resolved policy
            now: Evaluation instant, defaults to the current time

        Returns:
            Quota status
        """
        quota = policy.quota
        with logfire.span(
            "quota_service.status",
            owner_sub=owner_sub,
            strategy=quota.strategy.value,
        ):
            if quota.strategy == QuotaStrategy.UNLIMITED:
                used = await self.invite_log_repository.count_by_owner(owner_sub)
                return QuotaStatus.unlimited(used)

            if quota.strategy == QuotaStrategy.RECURRING:
                since = (now or utcnow()) - period_duration(quota.period)
                used = await self.invite_log_repository.count_by_owner(
                    owner_sub, since=since
                )
            else:
                used = await self.invite_log_repository.count_by_owner(owner_sub)

            status = QuotaStatus.limited(
                used=used,
                limit=quota.limit or 0,
                strategy=quota.strategy,
                period=quota.period,
            )
            logfire.info(
                "Quota status calculated",
                owner_sub=owner_sub,
                used=status.used,
                remaining=status.remaining,
            )
            return status

    async def ensure_admission(
        self, owner_sub: str, policy: ResolvedPolicy, required: int = 1
    ) -> QuotaStatus:
        """Check that a user can create ``required`` more invites.

        Args:
            owner_sub: User subject identifier
            policy: The user's resolved policy
            required: Number of ledger records the operation will add

        Returns:
            The quota status the decision was based on

        Raises:
            QuotaExceededError: If a limited quota has too few invites left
        """
        status = await self.status(owner_sub, policy)
        if not status.allows(required):
            logfire.warn(
                "Invite quota exceeded",
                owner_sub=owner_sub,
                required=required,
                remaining=status.remaining,
            )
            raise QuotaExceededError(required=required, remaining=status.remaining or 0)
        return status

    async def log_invite(
        self,
        owner_sub: str,
        invite_external_id: str,
        expires_at: datetime | None = None,
        group_label: str | None = None,
    ) -> InviteLogRecord:
        """Record an invite issued upstream.

        Args:
            owner_sub: User who created the invite
            invite_external_id: authentik invitation pk
            expires_at: Upstream expiry, None if it never expires
            group_label: Requested grouping names

        Returns:
            The new ACTIVE ledger record
        """
        record = InviteLogRecord(
            id=InviteLogId(uuid4()),
            owner_sub=owner_sub,
            invite_external_id=invite_external_id,
            created_at=utcnow(),
            expires_at=expires_at,
            status=InviteLogStatus.ACTIVE,
            group_label=group_label,
        )
        saved = await self.invite_log_repository.save(record)
        logfire.info(
            "Invite logged",
            owner_sub=owner_sub,
            record_id=str(saved.id),
            invite_external_id=invite_external_id,
        )
        return saved

    async def history(self, owner_sub: str, limit: int = 50) -> list[InviteLogRecord]:
        """List a user's invites, newest first."""
        return await self.invite_log_repository.find_by_owner(owner_sub, limit=limit)

    async def find_invite(
        self, owner_sub: str, invite_external_id: str
    ) -> InviteLogRecord | None:
        """Find an invite the user issued by its upstream id."""
        return await self.invite_log_repository.find_by_external_id(
            owner_sub, invite_external_id
        )

    async def mark_exhausted(self, record_id: InviteLogId) -> InviteLogRecord:
        """Mark an invite as used up or gone upstream.

        Raises:
            NotFoundError: If the record does not exist
            InvalidStateTransitionError: If the record is already terminal
        """
        return await self._transition(record_id, InviteLogStatus.EXHAUSTED)

    async def mark_deleted(self, record_id: InviteLogId) -> InviteLogRecord:
        """Mark an invite as revoked by its owner.

        Raises:
            NotFoundError: If the record does not exist
            InvalidStateTransitionError: If the record is already terminal
        """
        return await self._transition(record_id, InviteLogStatus.DELETED)

    async def _transition(
        self, record_id: InviteLogId, target: InviteLogStatus
    ) -> InviteLogRecord:
        record = await self.invite_log_repository.find_by_id(record_id)
        if record is None:
            raise NotFoundError("Invite", str(record_id))

        if target == InviteLogStatus.EXHAUSTED:
            updated = record.exhaust()
        else:
            updated = record.delete()

        await self.invite_log_repository.update_status(record_id, updated.status)
        logfire.info(
            "Invite status changed",
            record_id=str(record_id),
            status=updated.status.value,
        )
        return updated

    async def reset_quota(self, owner_sub: str) -> int:
        """Delete all of a user's ledger records.

        Returns:
            Number of deleted records
        """
        with logfire.span("quota_service.reset_quota", owner_sub=owner_sub):
            deleted = await self.invite_log_repository.delete_by_owner(owner_sub)
            logfire.info("Quota reset", owner_sub=owner_sub, deleted=deleted)
            return deleted

    async def global_stats(self, now: datetime | None = None) -> GlobalStats:
        """Portal-wide statistics; day and month start at UTC midnight."""
        now = (now or utcnow()).astimezone(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_month = start_of_day.replace(day=1)

        return GlobalStats(
            total_invites=await self.invite_log_repository.count_all(),
            unique_users=await self.invite_log_repository.count_owners(),
            invites_today=await self.invite_log_repository.count_all(
                since=start_of_day
            ),
            invites_this_month=await self.invite_log_repository.count_all(
                since=start_of_month
            ),
        )
