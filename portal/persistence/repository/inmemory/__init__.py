"""In-memory repository implementations for testing."""

from .bulk_job import InMemoryBulkJobRepository
from .invite_log import InMemoryInviteLogRepository

__all__ = [
    "InMemoryBulkJobRepository",
    "InMemoryInviteLogRepository",
]
