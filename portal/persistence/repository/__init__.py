"""PostgreSQL repository implementations."""

from portal.persistence.repository.bulk_job import PostgresBulkJobRepository
from portal.persistence.repository.invite_log import PostgresInviteLogRepository

__all__ = [
    "PostgresBulkJobRepository",
    "PostgresInviteLogRepository",
]
