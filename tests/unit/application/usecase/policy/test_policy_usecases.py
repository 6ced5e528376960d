"""Unit tests for the quota and groupings use cases."""

import pytest

from portal.application.usecase.base import CallerInfo
from portal.application.usecase.policy import (
    GetGroupingsRequest,
    GetGroupingsUseCase,
    GetQuotaRequest,
    GetQuotaUseCase,
)
from portal.domain.service import QuotaService
from portal.domain.value import QuotaPeriod, QuotaStrategy
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGetQuota:
    @pytest.mark.asyncio
    async def test_staff_quota(self, unit_env):
        quota_service = await unit_env.get(QuotaService)
        await quota_service.log_invite("uid-alice", "inv-1")
        use_case = await unit_env.get(GetQuotaUseCase)

        response = await use_case.execute(
            GetQuotaRequest(
                caller=CallerInfo(sub="uid-alice", username="alice", groups=["staff"])
            )
        )

        assert response.quota.strategy == QuotaStrategy.RECURRING
        assert response.quota.period == QuotaPeriod.WEEK
        assert response.quota.used == 1
        assert response.quota.remaining == 4
        assert response.allow_multi_use is True
        assert response.source_group == "staff"
        assert [o.value for o in response.expiry_options] == ["24h", "3d", "7d"]

    @pytest.mark.asyncio
    async def test_default_policy(self, unit_env):
        use_case = await unit_env.get(GetQuotaUseCase)

        response = await use_case.execute(
            GetQuotaRequest(caller=CallerInfo(sub="uid-zed", username="zed"))
        )

        assert response.source_group is None
        assert response.quota.limit == 1
        assert response.allow_multi_use is False
        # The default maximum (1h) is below every offered option
        assert response.expiry_options == []

    @pytest.mark.asyncio
    async def test_unlimited_quota(self, unit_env):
        use_case = await unit_env.get(GetQuotaUseCase)

        response = await use_case.execute(
            GetQuotaRequest(
                caller=CallerInfo(
                    sub="uid-root", username="root", groups=["admins", "members"]
                )
            )
        )

        assert response.quota.is_unlimited
        assert response.quota.remaining is None
        assert response.expiry_options[-1].value == "never"


class TestGetGroupings:
    @pytest.mark.asyncio
    async def test_merged_groupings(self, unit_env):
        use_case = await unit_env.get(GetGroupingsUseCase)

        response = await use_case.execute(
            GetGroupingsRequest(
                caller=CallerInfo(
                    sub="uid-alice", username="alice", groups=["members", "staff"]
                )
            )
        )

        assert [(g.name, g.groups) for g in response.groupings] == [
            ("Members", ["members"]),
            ("Guests", ["guests"]),
        ]

    @pytest.mark.asyncio
    async def test_no_groupings_by_default(self, unit_env):
        use_case = await unit_env.get(GetGroupingsUseCase)

        response = await use_case.execute(
            GetGroupingsRequest(caller=CallerInfo(sub="uid-zed", username="zed"))
        )

        assert response.groupings == []
