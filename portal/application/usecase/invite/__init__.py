"""Invite use cases."""

from portal.application.usecase.invite.generate_invite import (
    GenerateInviteRequest,
    GenerateInviteResponse,
    GenerateInviteUseCase,
)
from portal.application.usecase.invite.get_history import (
    GetHistoryRequest,
    GetHistoryResponse,
    GetHistoryUseCase,
    HistoryItem,
)
from portal.application.usecase.invite.revoke_invite import (
    RevokeInviteRequest,
    RevokeInviteUseCase,
)

__all__ = [
    "GenerateInviteRequest",
    "GenerateInviteResponse",
    "GenerateInviteUseCase",
    "GetHistoryRequest",
    "GetHistoryResponse",
    "GetHistoryUseCase",
    "HistoryItem",
    "RevokeInviteRequest",
    "RevokeInviteUseCase",
]
