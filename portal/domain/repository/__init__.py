"""Repository interfaces for the invite portal domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from portal.domain.repository.bulk_job import BulkJobRepository
from portal.domain.repository.invite_log import InviteLogRepository

__all__ = [
    "BulkJobRepository",
    "InviteLogRepository",
]
