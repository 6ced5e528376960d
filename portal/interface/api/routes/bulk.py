"""Bulk invite routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from portal.application.usecase.base import CallerInfo
from portal.application.usecase.bulk import (
    BulkJobItem,
    GetBulkJobRequest,
    GetBulkJobUseCase,
    ListBulkJobsRequest,
    ListBulkJobsResponse,
    ListBulkJobsUseCase,
    SubmitBulkInviteRequest,
    SubmitBulkInviteResponse,
    SubmitBulkInviteUseCase,
)
from portal.interface.api.dependencies import Envelope, get_caller

router = APIRouter(prefix="/bulk-invites", tags=["bulk"], route_class=DishkaRoute)


class BulkInviteAPIRequest(BaseModel):
    """API request for a bulk invite campaign."""

    emails: str  # Newline or comma separated
    message: str
    expiry: str = Field(min_length=1)
    single_use: bool = True
    groupings: list[str] = Field(default_factory=list)


class SubmitEnvelope(Envelope, SubmitBulkInviteResponse):
    pass


class JobEnvelope(Envelope):
    job: BulkJobItem


class JobsEnvelope(Envelope, ListBulkJobsResponse):
    pass


@router.post(
    "", response_model=SubmitEnvelope, status_code=status.HTTP_202_ACCEPTED
)
async def submit_bulk_invite(
    request: BulkInviteAPIRequest,
    use_case: FromDishka[SubmitBulkInviteUseCase],
    caller: CallerInfo = Depends(get_caller),
) -> SubmitEnvelope:
    """Start a bulk invite campaign.

    The campaign runs in the background; poll the returned job.
    """
    response = await use_case.execute(
        SubmitBulkInviteRequest(caller=caller, **request.model_dump())
    )
    return SubmitEnvelope(**response.model_dump())


@router.get("/history", response_model=JobsEnvelope)
async def list_bulk_jobs(
    use_case: FromDishka[ListBulkJobsUseCase],
    caller: CallerInfo = Depends(get_caller),
    limit: int = Query(default=20, ge=1, le=100),
) -> JobsEnvelope:
    """The caller's campaigns, newest first."""
    response = await use_case.execute(ListBulkJobsRequest(caller=caller, limit=limit))
    return JobsEnvelope(**response.model_dump())


@router.get("/{job_id}", response_model=JobEnvelope)
async def get_bulk_job(
    job_id: str,
    use_case: FromDishka[GetBulkJobUseCase],
    caller: CallerInfo = Depends(get_caller),
) -> JobEnvelope:
    """Progress of one of the caller's campaigns."""
    job = await use_case.execute(GetBulkJobRequest(caller=caller, job_id=job_id))
    return JobEnvelope(job=job)
