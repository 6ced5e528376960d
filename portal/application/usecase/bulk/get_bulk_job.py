"""Bulk job status use cases."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from portal.application.usecase.base import CallerInfo
from portal.domain.error import NotFoundError
from portal.domain.model import BulkJobRecord
from portal.domain.service import BulkInviteService
from portal.domain.value import BulkJobId, BulkJobStatus


class BulkJobItem(BaseModel):
    """Bulk job in response."""

    id: str
    status: BulkJobStatus
    total: int
    processed: int
    failed: int
    errors: list[str] = Field(default_factory=list)
    error: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, job: BulkJobRecord) -> "BulkJobItem":
        return cls(
            id=str(job.id),
            status=job.status,
            total=job.total,
            processed=job.processed,
            failed=job.failed,
            errors=job.result.errors if job.result else [],
            error=job.result.error if job.result else None,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )


class GetBulkJobRequest(BaseModel):
    """Get bulk job request."""

    caller: CallerInfo
    job_id: str


class GetBulkJobUseCase:
    """Use case for polling a job the caller submitted."""

    def __init__(self, bulk_invite_service: BulkInviteService) -> None:
        self.bulk_invite_service = bulk_invite_service

    async def execute(self, request: GetBulkJobRequest) -> BulkJobItem:
        """Return the job.

        Raises:
            NotFoundError: If the job does not exist or belongs to someone else
        """
        try:
            job_id = BulkJobId(UUID(request.job_id))
        except ValueError:
            raise NotFoundError("Bulk job", request.job_id) from None

        job = await self.bulk_invite_service.get_job(job_id)
        if job is None or job.creator_sub != request.caller.sub:
            raise NotFoundError("Bulk job", request.job_id)

        return BulkJobItem.from_record(job)


class ListBulkJobsRequest(BaseModel):
    """List bulk jobs request."""

    caller: CallerInfo
    limit: int = Field(default=20, ge=1, le=100)


class ListBulkJobsResponse(BaseModel):
    """Caller's jobs, newest first."""

    jobs: list[BulkJobItem]


class ListBulkJobsUseCase:
    """Use case for listing the caller's jobs."""

    def __init__(self, bulk_invite_service: BulkInviteService) -> None:
        self.bulk_invite_service = bulk_invite_service

    async def execute(self, request: ListBulkJobsRequest) -> ListBulkJobsResponse:
        jobs = await self.bulk_invite_service.jobs_for_creator(
            request.caller.sub, limit=request.limit
        )
        return ListBulkJobsResponse(jobs=[BulkJobItem.from_record(j) for j in jobs])
