"""In-memory bulk job repository for testing."""

from typing import Optional

from portal.domain.model.bulk_job import BulkJobRecord
from portal.domain.repository.bulk_job import BulkJobRepository
from portal.domain.value import BulkJobId


class InMemoryBulkJobRepository(BulkJobRepository):
    """In-memory implementation of BulkJobRepository for testing.

    Every saved version of a job is kept in ``history`` so tests can check
    how progress evolved.
    """

    def __init__(self) -> None:
        self._jobs: dict[BulkJobId, BulkJobRecord] = {}
        self.history: list[BulkJobRecord] = []

    async def find_by_id(self, job_id: BulkJobId) -> Optional[BulkJobRecord]:
        """Find a job by ID."""
        return self._jobs.get(job_id)

    async def save(self, job: BulkJobRecord) -> BulkJobRecord:
        """Save a job (create or update)."""
        self._jobs[job.id] = job
        self.history.append(job)
        return job

    async def find_by_creator(
        self, creator_sub: str, limit: int = 20
    ) -> list[BulkJobRecord]:
        """Find jobs submitted by a user, newest first."""
        matches = [j for j in self._jobs.values() if j.creator_sub == creator_sub]
        matches.sort(key=lambda j: j.created_at, reverse=True)
        return matches[:limit]
