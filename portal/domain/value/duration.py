"""Duration vocabulary.

Invite expiries are chosen from a fixed set of symbolic tokens ("24h",
"7d", "never", ...). Each token maps to a magnitude in milliseconds and a
display label. Months are 30 days and years 365 days.
"""

import math
from datetime import datetime, timedelta

from portal.domain.error import UnknownDurationError
from portal.domain.value.types import QuotaPeriod

_HOUR = 60 * 60 * 1000
_DAY = 24 * _HOUR

NEVER = "never"

DURATIONS: dict[str, float] = {
    "1h": _HOUR,
    "6h": 6 * _HOUR,
    "12h": 12 * _HOUR,
    "24h": 24 * _HOUR,
    "1d": _DAY,
    "3d": 3 * _DAY,
    "7d": 7 * _DAY,
    "14d": 14 * _DAY,
    "30d": 30 * _DAY,
    "1m": 30 * _DAY,
    "3m": 90 * _DAY,
    "6m": 180 * _DAY,
    "1y": 365 * _DAY,
    NEVER: math.inf,
}

LABELS: dict[str, str] = {
    "1h": "1 Hour",
    "6h": "6 Hours",
    "12h": "12 Hours",
    "24h": "24 Hours",
    "1d": "1 Day",
    "3d": "3 Days",
    "7d": "7 Days",
    "14d": "2 Weeks",
    "30d": "30 Days",
    "1m": "1 Month",
    "3m": "3 Months",
    "6m": "6 Months",
    "1y": "1 Year",
    NEVER: "Never",
}

# Options offered to invite creators, ascending
EXPIRY_LADDER: tuple[str, ...] = ("24h", "3d", "7d", "14d", NEVER)

PERIODS: dict[QuotaPeriod, timedelta] = {
    QuotaPeriod.DAY: timedelta(days=1),
    QuotaPeriod.WEEK: timedelta(days=7),
    QuotaPeriod.MONTH: timedelta(days=30),
    QuotaPeriod.YEAR: timedelta(days=365),
}


def is_known(token: str) -> bool:
    """Check whether a token belongs to the vocabulary."""
    return token in DURATIONS


def duration_ms(token: str) -> float:
    """Magnitude of a token in milliseconds (``math.inf`` for never).

    Raises:
        UnknownDurationError: If the token is not in the vocabulary
    """
    try:
        return DURATIONS[token]
    except KeyError:
        raise UnknownDurationError(token) from None


def duration_label(token: str) -> str:
    """Human label for a token, the token itself when unknown."""
    return LABELS.get(token, token)


def expires_at(token: str, now: datetime) -> datetime | None:
    """Absolute expiry for an invite created at ``now``, None for never."""
    ms = duration_ms(token)
    if math.isinf(ms):
        return None
    return now + timedelta(milliseconds=ms)


def period_duration(period: QuotaPeriod) -> timedelta:
    """Lookback window of a recurring quota period."""
    return PERIODS[period]
