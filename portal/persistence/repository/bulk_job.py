"""PostgreSQL implementation of the bulk job repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from portal.domain.model import BulkJobRecord
from portal.domain.repository import BulkJobRepository
from portal.domain.value import BulkJobId
from portal.persistence.mappers import bulk_job_to_dict, row_to_bulk_job
from portal.persistence.tables import bulk_invite_jobs_table


class PostgresBulkJobRepository(BulkJobRepository):
    """PostgreSQL implementation of BulkJobRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, job_id: BulkJobId) -> Optional[BulkJobRecord]:
        """Find a job by ID.

        Args:
            job_id: Job ID to look up

        Returns:
            Job if found, None otherwise
        """
        stmt = select(bulk_invite_jobs_table).where(
            bulk_invite_jobs_table.c.id == job_id
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_bulk_job(dict(row)) if row else None

    async def save(self, job: BulkJobRecord) -> BulkJobRecord:
        """Save a job (create or update).

        Args:
            job: Job to save

        Returns:
            Saved job
        """
        values = bulk_job_to_dict(job)
        stmt = insert(bulk_invite_jobs_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[bulk_invite_jobs_table.c.id],
            set_={
                key: stmt.excluded[key]
                for key in values
                if key not in ("id", "creator_sub", "created_at")
            },
        )
        async with self.session_factory() as session, session.begin():
            await session.execute(stmt)
        return job

    async def find_by_creator(
        self, creator_sub: str, limit: int = 20
    ) -> list[BulkJobRecord]:
        """Find jobs submitted by a user, newest first."""
        stmt = (
            select(bulk_invite_jobs_table)
            .where(bulk_invite_jobs_table.c.creator_sub == creator_sub)
            .order_by(bulk_invite_jobs_table.c.created_at.desc())
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_bulk_job(dict(row)) for row in rows]
