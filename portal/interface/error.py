"""Interface layer errors."""


class InterfaceError(Exception):
    """Base interface error."""

    pass


class AuthenticationError(InterfaceError):
    """Request does not carry an authenticated user."""

    pass


class ForbiddenError(InterfaceError):
    """Authenticated user may not perform the operation."""

    pass
