"""Administration routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from portal.application.usecase.admin import (
    GetStatsUseCase,
    ResetQuotaRequest,
    ResetQuotaResponse,
    ResetQuotaUseCase,
    SearchUsersRequest,
    SearchUsersResponse,
    SearchUsersUseCase,
)
from portal.application.usecase.base import CallerInfo
from portal.config import Settings
from portal.domain.model import GlobalStats
from portal.interface.api.dependencies import Envelope, get_caller, require_admin

router = APIRouter(prefix="/admin", tags=["admin"], route_class=DishkaRoute)


class ResetQuotaAPIRequest(BaseModel):
    """API request for resetting a user's quota."""

    user_sub: str = Field(min_length=1)


class ResetQuotaEnvelope(Envelope, ResetQuotaResponse):
    pass


class StatsEnvelope(Envelope):
    stats: GlobalStats


class UsersEnvelope(Envelope, SearchUsersResponse):
    pass


@router.post("/reset-quota", response_model=ResetQuotaEnvelope)
async def reset_quota(
    request: ResetQuotaAPIRequest,
    use_case: FromDishka[ResetQuotaUseCase],
    settings: FromDishka[Settings],
    caller: CallerInfo = Depends(get_caller),
) -> ResetQuotaEnvelope:
    """Delete every ledger record of a user."""
    require_admin(caller, settings)
    response = await use_case.execute(
        ResetQuotaRequest(admin_sub=caller.sub, user_sub=request.user_sub)
    )
    return ResetQuotaEnvelope(**response.model_dump())


@router.get("/stats", response_model=StatsEnvelope)
async def get_stats(
    use_case: FromDishka[GetStatsUseCase],
    settings: FromDishka[Settings],
    caller: CallerInfo = Depends(get_caller),
) -> StatsEnvelope:
    """Portal-wide invite statistics."""
    require_admin(caller, settings)
    return StatsEnvelope(stats=await use_case.execute())


@router.get("/users/search", response_model=UsersEnvelope)
async def search_users(
    use_case: FromDishka[SearchUsersUseCase],
    settings: FromDishka[Settings],
    caller: CallerInfo = Depends(get_caller),
    q: str = Query(default=""),
) -> UsersEnvelope:
    """Search directory users by name, username or email."""
    require_admin(caller, settings)
    response = await use_case.execute(SearchUsersRequest(query=q))
    return UsersEnvelope(**response.model_dump())
