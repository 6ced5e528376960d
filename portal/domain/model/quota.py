"""Quota accounting read models."""

from pydantic import model_validator

from portal.domain.model.common import DomainModel
from portal.domain.value import QuotaPeriod, QuotaStrategy


class QuotaStatus(DomainModel):
    """Current usage of a caller against their resolved quota.

    Invariant: ``remaining == max(0, limit - used)`` for limited quotas and
    ``remaining is None`` exactly when the quota is unlimited.
    """

    used: int
    limit: int | None
    strategy: QuotaStrategy
    period: QuotaPeriod | None = None
    remaining: int | None
    is_unlimited: bool

    @model_validator(mode="after")
    def validate_remaining(self) -> "QuotaStatus":
        """Keep remaining consistent with limit and used."""
        if self.is_unlimited:
            if self.remaining is not None or self.limit is not None:
                raise ValueError("unlimited quota has no limit or remaining")
        elif self.limit is None or self.remaining != max(0, self.limit - self.used):
            raise ValueError("remaining must equal max(0, limit - used)")
        return self

    @classmethod
    def unlimited(cls, used: int) -> "QuotaStatus":
        """Status for an unlimited quota, ``used`` is informational."""
        return cls(
            used=used,
            limit=None,
            strategy=QuotaStrategy.UNLIMITED,
            remaining=None,
            is_unlimited=True,
        )

    @classmethod
    def limited(
        cls,
        used: int,
        limit: int,
        strategy: QuotaStrategy,
        period: QuotaPeriod | None = None,
    ) -> "QuotaStatus":
        """Status for a fixed or recurring quota."""
        return cls(
            used=used,
            limit=limit,
            strategy=strategy,
            period=period,
            remaining=max(0, limit - used),
            is_unlimited=False,
        )

    def allows(self, required: int) -> bool:
        """Whether ``required`` more invites fit in the quota."""
        return self.is_unlimited or (self.remaining or 0) >= required


class GlobalStats(DomainModel):
    """Portal-wide invite statistics for administrators."""

    total_invites: int
    unique_users: int
    invites_today: int
    invites_this_month: int
