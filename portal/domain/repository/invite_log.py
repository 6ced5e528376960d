"""Invite ledger repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from portal.domain.model.invite_log import InviteLogRecord
from portal.domain.value import InviteLogId, InviteLogStatus


class InviteLogRepository(ABC):
    """Repository for the invite ledger.

    Defines the contract for ledger persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def save(self, record: InviteLogRecord) -> InviteLogRecord:
        """Append a ledger record.

        Args:
            record: The record to store

        Returns:
            The stored record
        """
        pass

    @abstractmethod
    async def find_by_id(self, record_id: InviteLogId) -> InviteLogRecord | None:
        """Find a ledger record by ID.

        Args:
            record_id: The record's unique identifier

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_external_id(
        self, owner_sub: str, invite_external_id: str
    ) -> InviteLogRecord | None:
        """Find an owner's record by the upstream invitation id.

        Used to verify ownership before revoking an invite.

        Args:
            owner_sub: The owner's subject identifier
            invite_external_id: The authentik invitation pk

        Returns:
            The record if the owner issued that invite, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_owner(
        self, owner_sub: str, limit: int = 50
    ) -> list[InviteLogRecord]:
        """Find an owner's records, newest first.

        Args:
            owner_sub: The owner's subject identifier
            limit: Maximum number of results

        Returns:
            List of records
        """
        pass

    @abstractmethod
    async def count_by_owner(
        self, owner_sub: str, since: datetime | None = None
    ) -> int:
        """Count an owner's records.

        Used for quota checking.

        Args:
            owner_sub: The owner's subject identifier
            since: Only count records created at or after this instant

        Returns:
            Number of records
        """
        pass

    @abstractmethod
    async def update_status(
        self, record_id: InviteLogId, status: InviteLogStatus
    ) -> None:
        """Set the status of a record.

        Args:
            record_id: The record's unique identifier
            status: The new status
        """
        pass

    @abstractmethod
    async def delete_by_owner(self, owner_sub: str) -> int:
        """Delete every record of an owner.

        Args:
            owner_sub: The owner's subject identifier

        Returns:
            Number of deleted records
        """
        pass

    @abstractmethod
    async def count_all(self, since: datetime | None = None) -> int:
        """Count all records, optionally created at or after ``since``."""
        pass

    @abstractmethod
    async def count_owners(self) -> int:
        """Count distinct owners with at least one record."""
        pass
