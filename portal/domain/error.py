"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class UnknownDurationError(ValidationError):
    """Raised when a duration token is not part of the vocabulary."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unknown duration: {token}")


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class QuotaExceededError(BusinessRuleViolationError):
    """Raised when a caller does not have enough invites left."""

    def __init__(self, required: int, remaining: int):
        self.required = required
        self.remaining = remaining
        if required == 1:
            message = "Quota exhausted"
        else:
            message = (
                f"Insufficient quota. You need {required} invites "
                f"but have {remaining} left."
            )
        super().__init__(message)


class ExpiryNotAllowedError(BusinessRuleViolationError):
    """Raised when the requested expiry exceeds the policy maximum."""

    def __init__(self, expiry: str):
        self.expiry = expiry
        super().__init__(f"Expiry duration not allowed: {expiry}")


class GroupingNotAllowedError(BusinessRuleViolationError):
    """Raised when the requested grouping is not offered by the policy."""

    def __init__(self, grouping: str):
        self.grouping = grouping
        super().__init__(f"Group not allowed: {grouping}")


class MultiUseNotAllowedError(BusinessRuleViolationError):
    """Raised when multi-use invites are requested but not permitted."""

    def __init__(self):
        super().__init__("Multi-use invites are not allowed for your account")


class InactiveAccountError(BusinessRuleViolationError):
    """Raised when the caller's directory account is missing or disabled."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Account is inactive or disabled")


class InvalidStateTransitionError(DomainError):
    """Raised when an entity is moved out of a terminal state."""

    def __init__(self, resource: str, current: str, target: str):
        super().__init__(f"Cannot move {resource} from {current} to {target}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class FlowNotFoundError(DomainError):
    """Raised when the configured enrollment flow does not exist upstream."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Flow configuration error: Could not find flow '{slug}'")


class IdentityProviderError(DomainError):
    """The identity provider rejected an operation."""

    pass


class IdentityProviderUnavailableError(IdentityProviderError):
    """The identity provider could not be reached."""

    pass


class EmailDeliveryError(DomainError):
    """An email could not be delivered."""

    pass
