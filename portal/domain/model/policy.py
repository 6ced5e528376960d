"""Invite policy models.

A policy document maps authentik groups to quota and invite rules. It is
written in JSON (``config/invite-policies.json``) using the aliased field
names below, validated once at startup and never modified afterwards.

Example::

    {
      "policies": [
        {
          "group": "staff",
          "quota": {"strategy": "recurring", "limit": 5, "period": "week"},
          "invite": {
            "max_expiry": "14d",
            "allow_multi_use": true,
            "allowed_groups": [{"name": "Guests", "groups": ["guests"]}]
          }
        }
      ],
      "default": {
        "quota": {"strategy": "fixed", "limit": 1},
        "invite": {"max_expiry": "7d", "allow_multi_use": false}
      }
    }
"""

import math

from pydantic import Field, field_validator, model_validator

from portal.domain.model.common import DomainModel
from portal.domain.value import QuotaPeriod, QuotaStrategy
from portal.domain.value.duration import is_known


class QuotaConfig(DomainModel):
    """How many invites a user may create."""

    strategy: QuotaStrategy
    limit: int | None = Field(default=None, ge=0)
    period: QuotaPeriod | None = None

    @model_validator(mode="after")
    def validate_strategy_fields(self) -> "QuotaConfig":
        """Fixed and recurring quotas need a limit, recurring needs a period."""
        if self.strategy != QuotaStrategy.UNLIMITED and self.limit is None:
            raise ValueError(f"{self.strategy.value} quota requires a limit")
        if self.strategy == QuotaStrategy.RECURRING and self.period is None:
            raise ValueError("recurring quota requires a period")
        return self

    @property
    def permissiveness_score(self) -> float:
        """Ordering used to pick the most generous quota.

        A recurring allowance always beats a fixed allowance of the same
        size; recurring allowances compare by raw limit.
        """
        if self.strategy == QuotaStrategy.UNLIMITED:
            return math.inf
        if self.strategy == QuotaStrategy.RECURRING:
            return (self.limit or 0) * 1000
        return self.limit or 0


class Grouping(DomainModel):
    """Named bundle of directory groups offered as one selectable unit."""

    name: str = Field(min_length=1)
    member_groups: list[str] = Field(alias="groups")


class InviteConfig(DomainModel):
    """What kind of invites a user may create."""

    max_expiry: str
    allow_multi_use: bool = False
    # Empty means "no restriction"
    allowed_groupings: list[Grouping] = Field(default_factory=list, alias="allowed_groups")

    @field_validator("max_expiry")
    @classmethod
    def validate_max_expiry(cls, v: str) -> str:
        """max_expiry must be a known duration token."""
        if not is_known(v):
            raise ValueError(f"unknown duration token: {v}")
        return v

    @field_validator("allowed_groupings", mode="before")
    @classmethod
    def none_means_unrestricted(cls, v):
        """Treat an explicit null like an absent list."""
        return [] if v is None else v

    def grouping(self, name: str) -> Grouping | None:
        """Find an allowed grouping by name."""
        for grouping in self.allowed_groupings:
            if grouping.name == name:
                return grouping
        return None


class DefaultPolicy(DomainModel):
    """Rules applied to users who match no policy entry."""

    quota: QuotaConfig
    invite: InviteConfig


class PolicyEntry(DomainModel):
    """Quota and invite rules triggered by membership of one group."""

    trigger_group: str = Field(alias="group", min_length=1)
    quota: QuotaConfig
    invite: InviteConfig


class PolicyStore(DomainModel):
    """The complete, validated policy document."""

    policies: list[PolicyEntry] = Field(default_factory=list)
    default: DefaultPolicy


class ResolvedPolicy(DomainModel):
    """Effective rules for one caller.

    ``source_group`` names the entry the quota came from, None when the
    default entry applied.
    """

    quota: QuotaConfig
    invite: InviteConfig
    source_group: str | None = None
