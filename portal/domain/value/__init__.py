"""Domain value objects for the invite portal."""

from portal.domain.value.identifiers import BulkJobId, InviteLogId
from portal.domain.value.types import (
    BulkJobStatus,
    InviteLogStatus,
    QuotaPeriod,
    QuotaStrategy,
)

__all__ = [
    # Identifiers
    "InviteLogId",
    "BulkJobId",
    # Types
    "QuotaStrategy",
    "QuotaPeriod",
    "InviteLogStatus",
    "BulkJobStatus",
]
