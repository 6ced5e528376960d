"""Domain model entities for the invite portal."""

from portal.domain.model.bulk_job import BulkInvitePayload, BulkJobRecord, BulkJobResult
from portal.domain.model.invite_log import InviteLogRecord
from portal.domain.model.policy import (
    DefaultPolicy,
    Grouping,
    InviteConfig,
    PolicyEntry,
    PolicyStore,
    QuotaConfig,
    ResolvedPolicy,
)
from portal.domain.model.quota import GlobalStats, QuotaStatus

__all__ = [
    "BulkInvitePayload",
    "BulkJobRecord",
    "BulkJobResult",
    "DefaultPolicy",
    "GlobalStats",
    "Grouping",
    "InviteConfig",
    "InviteLogRecord",
    "PolicyEntry",
    "PolicyStore",
    "QuotaConfig",
    "QuotaStatus",
    "ResolvedPolicy",
]
