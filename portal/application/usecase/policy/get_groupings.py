"""Get groupings use case."""

from pydantic import BaseModel

from portal.application.usecase.base import CallerInfo
from portal.domain.service import PolicyService


class GroupingItem(BaseModel):
    """Grouping the caller may attach to invites."""

    name: str
    groups: list[str]


class GetGroupingsRequest(BaseModel):
    """Get groupings request."""

    caller: CallerInfo


class GetGroupingsResponse(BaseModel):
    """Allowed groupings; empty means invites carry no groups."""

    groupings: list[GroupingItem]


class GetGroupingsUseCase:
    """Use case for listing the groupings offered to the caller."""

    def __init__(self, policy_service: PolicyService) -> None:
        self.policy_service = policy_service

    async def execute(self, request: GetGroupingsRequest) -> GetGroupingsResponse:
        policy = self.policy_service.resolve(request.caller.groups)
        return GetGroupingsResponse(
            groupings=[
                GroupingItem(name=grouping.name, groups=grouping.member_groups)
                for grouping in policy.invite.allowed_groupings
            ]
        )
