"""Unit tests for the administration use cases."""

import pytest

from portal.adapter.authentik import AuthentikClient
from portal.application.usecase.admin import (
    GetStatsUseCase,
    ResetQuotaRequest,
    ResetQuotaUseCase,
    SearchUsersRequest,
    SearchUsersUseCase,
)
from portal.domain.service import QuotaService
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestResetQuota:
    @pytest.mark.asyncio
    async def test_reset_deletes_ledger(self, unit_env):
        quota_service = await unit_env.get(QuotaService)
        await quota_service.log_invite("uid-bob", "inv-1")
        await quota_service.log_invite("uid-bob", "inv-2")
        use_case = await unit_env.get(ResetQuotaUseCase)

        response = await use_case.execute(
            ResetQuotaRequest(admin_sub="uid-root", user_sub="uid-bob")
        )

        assert response.deleted_count == 2
        assert response.message == "Reset quota for user. Deleted 2 invite logs."
        assert await quota_service.history("uid-bob") == []

    @pytest.mark.asyncio
    async def test_reset_of_clean_user(self, unit_env):
        use_case = await unit_env.get(ResetQuotaUseCase)

        response = await use_case.execute(
            ResetQuotaRequest(admin_sub="uid-root", user_sub="uid-nobody")
        )

        assert response.deleted_count == 0


class TestGetStats:
    @pytest.mark.asyncio
    async def test_stats_today(self, unit_env):
        quota_service = await unit_env.get(QuotaService)
        await quota_service.log_invite("uid-alice", "inv-1")
        await quota_service.log_invite("uid-bob", "inv-2")
        use_case = await unit_env.get(GetStatsUseCase)

        stats = await use_case.execute()

        assert stats.total_invites == 2
        assert stats.unique_users == 2
        assert stats.invites_today == 2
        assert stats.invites_this_month == 2


class TestSearchUsers:
    @pytest.mark.asyncio
    async def test_search_matches_username_name_and_email(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        client.add_user("alice", name="Alice Liddell", email="alice@example.org")
        client.add_user("bob", name="Bob", email="bob@wonder.example")
        use_case = await unit_env.get(SearchUsersUseCase)

        by_name = await use_case.execute(SearchUsersRequest(query="liddell"))
        by_email = await use_case.execute(SearchUsersRequest(query="wonder"))

        assert [u.username for u in by_name.users] == ["alice"]
        assert [u.username for u in by_email.users] == ["bob"]

    @pytest.mark.asyncio
    async def test_short_query_returns_nothing(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        client.add_user("alice")
        use_case = await unit_env.get(SearchUsersUseCase)

        response = await use_case.execute(SearchUsersRequest(query=" a "))

        assert response.users == []
