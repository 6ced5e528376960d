"""Administration use cases."""

from portal.application.usecase.admin.get_stats import GetStatsUseCase
from portal.application.usecase.admin.reset_quota import (
    ResetQuotaRequest,
    ResetQuotaResponse,
    ResetQuotaUseCase,
)
from portal.application.usecase.admin.search_users import (
    SearchUsersRequest,
    SearchUsersResponse,
    SearchUsersUseCase,
)

__all__ = [
    "GetStatsUseCase",
    "ResetQuotaRequest",
    "ResetQuotaResponse",
    "ResetQuotaUseCase",
    "SearchUsersRequest",
    "SearchUsersResponse",
    "SearchUsersUseCase",
]
