"""Policy use cases."""

from portal.application.usecase.policy.get_groupings import (
    GetGroupingsRequest,
    GetGroupingsResponse,
    GetGroupingsUseCase,
    GroupingItem,
)
from portal.application.usecase.policy.get_quota import (
    ExpiryOption,
    GetQuotaRequest,
    GetQuotaResponse,
    GetQuotaUseCase,
)

__all__ = [
    "ExpiryOption",
    "GetGroupingsRequest",
    "GetGroupingsResponse",
    "GetGroupingsUseCase",
    "GetQuotaRequest",
    "GetQuotaResponse",
    "GetQuotaUseCase",
    "GroupingItem",
]
