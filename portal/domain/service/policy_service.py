"""Policy resolution domain service."""

import logfire

from portal.domain.error import UnknownDurationError
from portal.domain.model.policy import (
    Grouping,
    InviteConfig,
    PolicyEntry,
    PolicyStore,
    ResolvedPolicy,
)
from portal.domain.value.duration import (
    EXPIRY_LADDER,
    duration_label,
    duration_ms,
)

from .base import Service


class PolicyService(Service):
    """Resolves the effective invite policy of a caller.

    Callers often belong to several groups. The resolved policy is never
    more restrictive than the most generous matching entry, and quota and
    invite permissions are optimized independently of each other.
    """

    def __init__(self, policy_store: PolicyStore) -> None:
        """Initialize policy service.

        Args:
            policy_store: Validated policy document, shared for the app lifetime
        """
        self.policy_store = policy_store

    def resolve(self, caller_groups: list[str] | set[str]) -> ResolvedPolicy:
        """Resolve the policy for a set of group memberships.

        Args:
            caller_groups: Names of the caller's directory groups

        Returns:
            Resolved policy; the default entry when no group matches
        """
        groups = set(caller_groups)
        matching = [
            entry
            for entry in self.policy_store.policies
            if entry.trigger_group in groups
        ]

        if not matching:
            default = self.policy_store.default
            return ResolvedPolicy(
                quota=default.quota, invite=default.invite, source_group=None
            )

        winner = self._most_permissive_quota(matching)
        resolved = ResolvedPolicy(
            quota=winner.quota,
            invite=self._merge_invite_rules(matching),
            source_group=winner.trigger_group,
        )
        logfire.debug(
            "Policy resolved",
            source_group=resolved.source_group,
            matched=[entry.trigger_group for entry in matching],
        )
        return resolved

    def _most_permissive_quota(self, entries: list[PolicyEntry]) -> PolicyEntry:
        # Strictly greater, so the first entry wins ties
        best = entries[0]
        for entry in entries[1:]:
            if entry.quota.permissiveness_score > best.quota.permissiveness_score:
                best = entry
        return best

    def _merge_invite_rules(self, entries: list[PolicyEntry]) -> InviteConfig:
        max_expiry = entries[0].invite.max_expiry
        for entry in entries[1:]:
            if duration_ms(entry.invite.max_expiry) > duration_ms(max_expiry):
                max_expiry = entry.invite.max_expiry

        groupings: dict[str, Grouping] = {}
        for entry in entries:
            for grouping in entry.invite.allowed_groupings:
                groupings.setdefault(grouping.name, grouping)

        allowed = (
            list(groupings.values())
            if groupings
            else self.policy_store.default.invite.allowed_groupings
        )

        return InviteConfig(
            max_expiry=max_expiry,
            allow_multi_use=any(entry.invite.allow_multi_use for entry in entries),
            allowed_groupings=allowed,
        )

    def is_expiry_allowed(self, policy: ResolvedPolicy, expiry: str) -> bool:
        """Check a requested expiry against the policy maximum.

        Unknown tokens are never allowed.
        """
        try:
            requested = duration_ms(expiry)
        except UnknownDurationError:
            return False
        return requested <= duration_ms(policy.invite.max_expiry)

    def is_grouping_allowed(self, policy: ResolvedPolicy, name: str) -> bool:
        """Check whether a grouping may be attached to an invite."""
        allowed = policy.invite.allowed_groupings
        return not allowed or policy.invite.grouping(name) is not None

    def expand_groupings(
        self, policy: ResolvedPolicy, names: list[str]
    ) -> list[str]:
        """Expand grouping names into directory groups.

        Args:
            policy: Resolved policy offering the groupings
            names: Requested grouping names; unknown names contribute nothing

        Returns:
            Ordered, de-duplicated member groups
        """
        groups: list[str] = []
        for name in names:
            grouping = policy.invite.grouping(name)
            if grouping is None:
                continue
            for group in grouping.member_groups:
                if group not in groups:
                    groups.append(group)
        return groups

    def expiry_options(self, policy: ResolvedPolicy) -> list[dict[str, str]]:
        """Expiry choices offered to the caller, ascending.

        Returns:
            ``{"value": token, "label": label}`` for every ladder token
            whose duration does not exceed the policy maximum
        """
        maximum = duration_ms(policy.invite.max_expiry)
        return [
            {"value": token, "label": duration_label(token)}
            for token in EXPIRY_LADDER
            if duration_ms(token) <= maximum
        ]
