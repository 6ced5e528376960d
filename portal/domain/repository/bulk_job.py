"""Bulk job repository interface."""

from abc import ABC, abstractmethod

from portal.domain.model.bulk_job import BulkJobRecord
from portal.domain.value import BulkJobId


class BulkJobRepository(ABC):
    """Repository for BulkJobRecord entity."""

    @abstractmethod
    async def find_by_id(self, job_id: BulkJobId) -> BulkJobRecord | None:
        """Find a job by ID.

        Args:
            job_id: The job's unique identifier

        Returns:
            The job if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, job: BulkJobRecord) -> BulkJobRecord:
        """Save a job (create or update).

        Args:
            job: The job to save

        Returns:
            The saved job
        """
        pass

    @abstractmethod
    async def find_by_creator(
        self, creator_sub: str, limit: int = 20
    ) -> list[BulkJobRecord]:
        """Find jobs submitted by a user, newest first.

        Args:
            creator_sub: The creator's subject identifier
            limit: Maximum number of results

        Returns:
            List of jobs
        """
        pass
