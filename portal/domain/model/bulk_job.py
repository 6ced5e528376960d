"""Bulk invite job entity.

A bulk job tracks one asynchronous campaign that creates invites for a
list of recipients and emails them. Only the job processor changes a job
after it has been created; everyone else polls it.
"""

from datetime import datetime

from pydantic import Field

from portal.domain.model.common import DomainModel
from portal.domain.model.invite_log import utcnow
from portal.domain.value import BulkJobId, BulkJobStatus


class BulkJobResult(DomainModel):
    """Outcome payload of a finished job.

    ``errors`` holds one message per failed recipient. ``error`` is set
    only when a system-level failure aborted the run.
    """

    errors: list[str] = Field(default_factory=list)
    error: str | None = None


class BulkJobRecord(DomainModel):
    """Progress of one bulk invite campaign.

    Invariants:
    - processed <= total and failed <= processed at every observed point
    - processed and failed never decrease
    - COMPLETED and FAILED are terminal
    """

    id: BulkJobId
    creator_sub: str
    status: BulkJobStatus = BulkJobStatus.PENDING
    total: int = Field(ge=0)
    processed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    result: BulkJobResult | None = None

    @property
    def is_finished(self) -> bool:
        """Whether the job reached a terminal state."""
        return self.status in (BulkJobStatus.COMPLETED, BulkJobStatus.FAILED)


class BulkInvitePayload(DomainModel):
    """Everything a job needs, captured and validated at submission.

    The caller's groups are copied here rather than referenced so that the
    job resolves the same policy that admitted it.
    """

    owner_sub: str
    username: str
    display_name: str | None = None
    caller_groups: list[str] = Field(default_factory=list)
    recipients: list[str]
    message: str
    expiry: str
    single_use: bool = True
    groupings: list[str] = Field(default_factory=list)

    @property
    def inviter_name(self) -> str:
        """Name shown to recipients."""
        return self.display_name or self.username or "A user"

    @property
    def group_label(self) -> str | None:
        """Ledger label for the requested groupings."""
        return ", ".join(self.groupings) if self.groupings else None
