"""Invite routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from portal.application.usecase.base import CallerInfo
from portal.application.usecase.invite import (
    GenerateInviteRequest,
    GenerateInviteResponse,
    GenerateInviteUseCase,
    GetHistoryRequest,
    GetHistoryResponse,
    GetHistoryUseCase,
    RevokeInviteRequest,
    RevokeInviteUseCase,
)
from portal.interface.api.dependencies import Envelope, get_caller

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


class GenerateInviteAPIRequest(BaseModel):
    """API request for generating an invite."""

    name: str = Field(min_length=1, max_length=100)
    expiry: str = Field(min_length=1)
    single_use: bool = True
    groupings: list[str] = Field(default_factory=list)
    email_recipient: str | None = None
    email_message: str | None = None


class GenerateInviteEnvelope(Envelope, GenerateInviteResponse):
    pass


class HistoryEnvelope(Envelope, GetHistoryResponse):
    pass


@router.post("", response_model=GenerateInviteEnvelope)
async def generate_invite(
    request: GenerateInviteAPIRequest,
    use_case: FromDishka[GenerateInviteUseCase],
    caller: CallerInfo = Depends(get_caller),
) -> GenerateInviteEnvelope:
    """Generate one invite, optionally emailing it.

    Args:
        request: Invite options
        use_case: Generate invite use case from DI
        caller: Authenticated user

    Returns:
        The invite link and email outcome
    """
    response = await use_case.execute(
        GenerateInviteRequest(caller=caller, **request.model_dump())
    )
    return GenerateInviteEnvelope(**response.model_dump())


@router.get("/history", response_model=HistoryEnvelope)
async def get_history(
    use_case: FromDishka[GetHistoryUseCase],
    caller: CallerInfo = Depends(get_caller),
    limit: int = Query(default=50, ge=1, le=100),
) -> HistoryEnvelope:
    """The caller's invites, newest first, synced with authentik."""
    response = await use_case.execute(GetHistoryRequest(caller=caller, limit=limit))
    return HistoryEnvelope(**response.model_dump())


@router.delete("/{invite_id}", response_model=Envelope)
async def revoke_invite(
    invite_id: str,
    use_case: FromDishka[RevokeInviteUseCase],
    caller: CallerInfo = Depends(get_caller),
) -> Envelope:
    """Revoke an invite the caller issued."""
    await use_case.execute(RevokeInviteRequest(caller=caller, invite_id=invite_id))
    return Envelope()
