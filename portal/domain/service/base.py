"""Base class for domain services."""


class Service:
    """Marker base for the portal's domain services.

    Services hold the rules that span the policy document, the invite
    ledger and the upstream identity provider. They are stateless apart
    from their injected collaborators and live for the whole process.
    """
