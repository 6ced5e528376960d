"""In-memory invite ledger repository for testing."""

from datetime import datetime
from typing import Optional

from portal.domain.model.invite_log import InviteLogRecord
from portal.domain.repository.invite_log import InviteLogRepository
from portal.domain.value import InviteLogId, InviteLogStatus


class InMemoryInviteLogRepository(InviteLogRepository):
    """In-memory implementation of InviteLogRepository for testing."""

    def __init__(self) -> None:
        self._records: list[InviteLogRecord] = []

    async def save(self, record: InviteLogRecord) -> InviteLogRecord:
        """Append a ledger record."""
        self._records.append(record)
        return record

    async def find_by_id(self, record_id: InviteLogId) -> Optional[InviteLogRecord]:
        """Find a ledger record by ID."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    async def find_by_external_id(
        self, owner_sub: str, invite_external_id: str
    ) -> Optional[InviteLogRecord]:
        """Find an owner's record by the upstream invitation id."""
        for record in self._records:
            if (
                record.owner_sub == owner_sub
                and record.invite_external_id == invite_external_id
            ):
                return record
        return None

    async def find_by_owner(
        self, owner_sub: str, limit: int = 50
    ) -> list[InviteLogRecord]:
        """Find an owner's records, newest first."""
        matches = [r for r in self._records if r.owner_sub == owner_sub]
        matches.sort(key=lambda r: r.created_at, reverse=True)
        return matches[:limit]

    async def count_by_owner(
        self, owner_sub: str, since: datetime | None = None
    ) -> int:
        """Count an owner's records."""
        return sum(
            1
            for record in self._records
            if record.owner_sub == owner_sub
            and (since is None or record.created_at >= since)
        )

    async def update_status(
        self, record_id: InviteLogId, status: InviteLogStatus
    ) -> None:
        """Set the status of a record."""
        for i, record in enumerate(self._records):
            if record.id == record_id:
                self._records[i] = record.model_copy(update={"status": status})
                return

    async def delete_by_owner(self, owner_sub: str) -> int:
        """Delete every record of an owner."""
        kept = [r for r in self._records if r.owner_sub != owner_sub]
        deleted = len(self._records) - len(kept)
        self._records = kept
        return deleted

    async def count_all(self, since: datetime | None = None) -> int:
        """Count all records."""
        return sum(
            1 for r in self._records if since is None or r.created_at >= since
        )

    async def count_owners(self) -> int:
        """Count distinct owners."""
        return len({r.owner_sub for r in self._records})
