"""PostgreSQL implementation of the invite ledger repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from portal.domain.model import InviteLogRecord
from portal.domain.repository import InviteLogRepository
from portal.domain.value import InviteLogId, InviteLogStatus
from portal.persistence.mappers import invite_log_to_dict, row_to_invite_log
from portal.persistence.tables import invite_logs_table


class PostgresInviteLogRepository(InviteLogRepository):
    """PostgreSQL implementation of InviteLogRepository.

    Every operation runs in its own committed transaction, so ledger
    writes made by a background job are visible to quota checks at once.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def save(self, record: InviteLogRecord) -> InviteLogRecord:
        """Append a ledger record.

        Args:
            record: Record to insert

        Returns:
            Saved record
        """
        stmt = insert(invite_logs_table).values(**invite_log_to_dict(record))
        async with self.session_factory() as session, session.begin():
            await session.execute(stmt)
        return record

    async def find_by_id(self, record_id: InviteLogId) -> Optional[InviteLogRecord]:
        """Find a ledger record by ID.

        Args:
            record_id: Record ID to look up

        Returns:
            Record if found, None otherwise
        """
        stmt = select(invite_logs_table).where(invite_logs_table.c.id == record_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invite_log(dict(row)) if row else None

    async def find_by_external_id(
        self, owner_sub: str, invite_external_id: str
    ) -> Optional[InviteLogRecord]:
        """Find an owner's record by the upstream invitation id."""
        stmt = select(invite_logs_table).where(
            invite_logs_table.c.owner_sub == owner_sub,
            invite_logs_table.c.invite_external_id == invite_external_id,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invite_log(dict(row)) if row else None

    async def find_by_owner(
        self, owner_sub: str, limit: int = 50
    ) -> list[InviteLogRecord]:
        """Find an owner's records, newest first.

        Args:
            owner_sub: Owner subject identifier
            limit: Maximum number of results

        Returns:
            List of records
        """
        stmt = (
            select(invite_logs_table)
            .where(invite_logs_table.c.owner_sub == owner_sub)
            .order_by(invite_logs_table.c.created_at.desc())
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invite_log(dict(row)) for row in rows]

    async def count_by_owner(
        self, owner_sub: str, since: datetime | None = None
    ) -> int:
        """Count an owner's records.

        Uses the (owner_sub, created_at) index.

        Args:
            owner_sub: Owner subject identifier
            since: Only count records created at or after this instant

        Returns:
            Number of records
        """
        stmt = (
            select(func.count())
            .select_from(invite_logs_table)
            .where(invite_logs_table.c.owner_sub == owner_sub)
        )
        if since is not None:
            stmt = stmt.where(invite_logs_table.c.created_at >= since)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def update_status(
        self, record_id: InviteLogId, status: InviteLogStatus
    ) -> None:
        """Set the status of a record."""
        stmt = (
            update(invite_logs_table)
            .where(invite_logs_table.c.id == record_id)
            .values(status=status.value)
        )
        async with self.session_factory() as session, session.begin():
            await session.execute(stmt)

    async def delete_by_owner(self, owner_sub: str) -> int:
        """Delete every record of an owner.

        Returns:
            Number of deleted records
        """
        stmt = delete(invite_logs_table).where(
            invite_logs_table.c.owner_sub == owner_sub
        )
        async with self.session_factory() as session, session.begin():
            result = await session.execute(stmt)
            return result.rowcount or 0

    async def count_all(self, since: datetime | None = None) -> int:
        """Count all records, optionally created at or after ``since``."""
        stmt = select(func.count()).select_from(invite_logs_table)
        if since is not None:
            stmt = stmt.where(invite_logs_table.c.created_at >= since)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def count_owners(self) -> int:
        """Count distinct owners with at least one record."""
        stmt = select(func.count(func.distinct(invite_logs_table.c.owner_sub)))
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0
