"""Invite ledger entity.

Every invite successfully issued upstream is recorded here. The ledger is
the system of record for quota accounting and for the user's history.
"""

from datetime import datetime, timezone

from pydantic import Field

from portal.domain.error import InvalidStateTransitionError
from portal.domain.model.common import DomainModel
from portal.domain.value import InviteLogId, InviteLogStatus


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


class InviteLogRecord(DomainModel):
    """One issued invite.

    Business rules:
    - Created ACTIVE when authentik accepts the invitation
    - ACTIVE -> EXHAUSTED when the invitation is observed gone upstream
    - ACTIVE -> DELETED when the owner revokes it
    - EXHAUSTED and DELETED are terminal
    """

    id: InviteLogId
    owner_sub: str
    invite_external_id: str  # authentik invitation pk
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime | None = None
    status: InviteLogStatus = InviteLogStatus.ACTIVE
    group_label: str | None = None  # Requested grouping names, comma separated

    @property
    def is_active(self) -> bool:
        """Whether the invite may still be used."""
        return self.status == InviteLogStatus.ACTIVE

    def exhaust(self) -> "InviteLogRecord":
        """Return a copy marked EXHAUSTED.

        Raises:
            InvalidStateTransitionError: If the record is already terminal
        """
        return self._transition(InviteLogStatus.EXHAUSTED)

    def delete(self) -> "InviteLogRecord":
        """Return a copy marked DELETED.

        Raises:
            InvalidStateTransitionError: If the record is already terminal
        """
        return self._transition(InviteLogStatus.DELETED)

    def _transition(self, target: InviteLogStatus) -> "InviteLogRecord":
        if not self.is_active:
            raise InvalidStateTransitionError(
                "invite", self.status.value, target.value
            )
        return self.model_copy(update={"status": target})
