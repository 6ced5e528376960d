"""Caller policy routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends

from portal.application.usecase.base import CallerInfo
from portal.application.usecase.policy import (
    GetGroupingsRequest,
    GetGroupingsResponse,
    GetGroupingsUseCase,
    GetQuotaRequest,
    GetQuotaResponse,
    GetQuotaUseCase,
)
from portal.interface.api.dependencies import Envelope, get_caller

router = APIRouter(prefix="/me", tags=["policy"], route_class=DishkaRoute)


class QuotaEnvelope(Envelope, GetQuotaResponse):
    pass


class GroupingsEnvelope(Envelope, GetGroupingsResponse):
    pass


@router.get("/quota", response_model=QuotaEnvelope)
async def get_quota(
    use_case: FromDishka[GetQuotaUseCase],
    caller: CallerInfo = Depends(get_caller),
) -> QuotaEnvelope:
    """Quota status, expiry choices and multi-use permission of the caller."""
    response = await use_case.execute(GetQuotaRequest(caller=caller))
    return QuotaEnvelope(**response.model_dump())


@router.get("/groupings", response_model=GroupingsEnvelope)
async def get_groupings(
    use_case: FromDishka[GetGroupingsUseCase],
    caller: CallerInfo = Depends(get_caller),
) -> GroupingsEnvelope:
    """Groupings the caller may attach to invites."""
    response = await use_case.execute(GetGroupingsRequest(caller=caller))
    return GroupingsEnvelope(**response.model_dump())
