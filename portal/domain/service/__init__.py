"""Domain services."""

from .base import Service
from .bulk_invite_service import BulkInviteService
from .email_sender import EmailSender
from .identity_provider import (
    CreatedInvitation,
    DirectoryUser,
    Flow,
    IdentityProviderClient,
    Invitation,
)
from .policy_service import PolicyService
from .quota_service import QuotaService

__all__ = [
    "BulkInviteService",
    "CreatedInvitation",
    "DirectoryUser",
    "EmailSender",
    "Flow",
    "IdentityProviderClient",
    "Invitation",
    "PolicyService",
    "QuotaService",
    "Service",
]
