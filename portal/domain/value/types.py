"""Enumerations shared across the domain."""

from enum import Enum


class QuotaStrategy(str, Enum):
    """How invites are counted against a quota."""

    FIXED = "fixed"  # lifetime allowance
    RECURRING = "recurring"  # allowance per sliding period
    UNLIMITED = "unlimited"


class QuotaPeriod(str, Enum):
    """Lookback window of a recurring quota."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class InviteLogStatus(str, Enum):
    """Status of an issued invite in the ledger."""

    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    DELETED = "deleted"


class BulkJobStatus(str, Enum):
    """Lifecycle of a bulk invite campaign."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
