"""Bulk invite use cases."""

from portal.application.usecase.bulk.get_bulk_job import (
    BulkJobItem,
    GetBulkJobRequest,
    GetBulkJobUseCase,
    ListBulkJobsRequest,
    ListBulkJobsResponse,
    ListBulkJobsUseCase,
)
from portal.application.usecase.bulk.submit_bulk_invite import (
    SubmitBulkInviteRequest,
    SubmitBulkInviteResponse,
    SubmitBulkInviteUseCase,
    parse_recipients,
)

__all__ = [
    "BulkJobItem",
    "GetBulkJobRequest",
    "GetBulkJobUseCase",
    "ListBulkJobsRequest",
    "ListBulkJobsResponse",
    "ListBulkJobsUseCase",
    "SubmitBulkInviteRequest",
    "SubmitBulkInviteResponse",
    "SubmitBulkInviteUseCase",
    "parse_recipients",
]
