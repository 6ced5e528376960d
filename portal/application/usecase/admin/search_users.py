"""Directory user search use case."""

from pydantic import BaseModel

from portal.domain.service import DirectoryUser, IdentityProviderClient

MIN_QUERY_LENGTH = 2


class SearchUsersRequest(BaseModel):
    """Search users request."""

    query: str


class SearchUsersResponse(BaseModel):
    """Matching directory users."""

    users: list[DirectoryUser]


class SearchUsersUseCase:
    """Use case for finding users to reset quotas for."""

    def __init__(self, identity_provider: IdentityProviderClient) -> None:
        self.identity_provider = identity_provider

    async def execute(self, request: SearchUsersRequest) -> SearchUsersResponse:
        query = request.query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return SearchUsersResponse(users=[])
        return SearchUsersResponse(
            users=await self.identity_provider.search_users(query)
        )
