"""Unit tests for bulk invite submission and polling."""

from uuid import uuid4

import pytest

from portal.application.usecase.base import CallerInfo
from portal.application.usecase.bulk import (
    GetBulkJobRequest,
    GetBulkJobUseCase,
    ListBulkJobsRequest,
    ListBulkJobsUseCase,
    SubmitBulkInviteRequest,
    SubmitBulkInviteUseCase,
    parse_recipients,
)
from portal.domain.error import (
    ExpiryNotAllowedError,
    GroupingNotAllowedError,
    MultiUseNotAllowedError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from portal.domain.repository import InviteLogRepository
from portal.domain.value import BulkJobStatus
from portal.util.tasks import TaskSupervisor
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

STAFF = CallerInfo(
    sub="uid-alice", username="alice", display_name="Alice", groups=["staff"]
)
MEMBER = CallerInfo(sub="uid-bob", username="bob", groups=["members"])


def make_request(caller: CallerInfo = STAFF, **overrides) -> SubmitBulkInviteRequest:
    fields = {
        "caller": caller,
        "emails": "a@example.org\nb@example.org",
        "message": "Join us: {{invite_url}}",
        "expiry": "24h",
    }
    fields.update(overrides)
    return SubmitBulkInviteRequest(**fields)


class TestParseRecipients:
    def test_newlines_and_commas(self):
        assert parse_recipients(" a@x.org,b@x.org\n\nc@x.org ") == [
            "a@x.org",
            "b@x.org",
            "c@x.org",
        ]

    def test_drops_invalid_and_duplicates(self):
        assert parse_recipients("a@x.org\nnot-an-email\na@x.org,") == ["a@x.org"]


class TestSubmitBulkInvite:
    """Tests for admitting a campaign."""

    @pytest.mark.asyncio
    async def test_submit_runs_job_in_background(self, unit_env):
        # Arrange
        use_case = await unit_env.get(SubmitBulkInviteUseCase)
        supervisor = await unit_env.get(TaskSupervisor)
        get_job = await unit_env.get(GetBulkJobUseCase)

        # Act
        response = await use_case.execute(make_request())
        await supervisor.drain()

        # Assert
        assert response.total == 2
        job = await get_job.execute(
            GetBulkJobRequest(caller=STAFF, job_id=response.job_id)
        )
        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 2
        assert job.failed == 0

    @pytest.mark.asyncio
    async def test_no_valid_emails(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)

        with pytest.raises(ValidationError, match="No valid emails provided"):
            await use_case.execute(make_request(emails="nobody, \n"))

    @pytest.mark.asyncio
    async def test_single_use_needs_quota_per_recipient(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)
        emails = "\n".join(f"user{i}@example.org" for i in range(6))

        with pytest.raises(QuotaExceededError) as exc:
            await use_case.execute(make_request(emails=emails))
        assert exc.value.required == 6
        assert exc.value.remaining == 5

    @pytest.mark.asyncio
    async def test_multi_use_needs_one_invite(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)
        supervisor = await unit_env.get(TaskSupervisor)
        ledger = await unit_env.get(InviteLogRepository)
        emails = "\n".join(f"user{i}@example.org" for i in range(6))

        response = await use_case.execute(
            make_request(emails=emails, single_use=False)
        )
        await supervisor.drain()

        assert response.total == 6
        assert await ledger.count_by_owner("uid-alice") == 1

    @pytest.mark.asyncio
    async def test_multi_use_not_allowed(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)

        with pytest.raises(MultiUseNotAllowedError):
            await use_case.execute(
                make_request(caller=MEMBER, emails="a@example.org", single_use=False)
            )

    @pytest.mark.asyncio
    async def test_expiry_checked_at_submission(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)

        with pytest.raises(ExpiryNotAllowedError):
            await use_case.execute(make_request(expiry="never"))

    @pytest.mark.asyncio
    async def test_grouping_checked_at_submission(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)

        with pytest.raises(GroupingNotAllowedError):
            await use_case.execute(make_request(groupings=["Staff"]))


class TestPolling:
    @pytest.mark.asyncio
    async def test_jobs_are_private(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)
        get_job = await unit_env.get(GetBulkJobUseCase)
        response = await use_case.execute(make_request())

        with pytest.raises(NotFoundError):
            await get_job.execute(
                GetBulkJobRequest(caller=MEMBER, job_id=response.job_id)
            )

    @pytest.mark.asyncio
    async def test_malformed_job_id(self, unit_env):
        get_job = await unit_env.get(GetBulkJobUseCase)

        with pytest.raises(NotFoundError):
            await get_job.execute(GetBulkJobRequest(caller=STAFF, job_id="nope"))

    @pytest.mark.asyncio
    async def test_unknown_job_id(self, unit_env):
        get_job = await unit_env.get(GetBulkJobUseCase)

        with pytest.raises(NotFoundError):
            await get_job.execute(
                GetBulkJobRequest(caller=STAFF, job_id=str(uuid4()))
            )

    @pytest.mark.asyncio
    async def test_list_own_jobs(self, unit_env):
        use_case = await unit_env.get(SubmitBulkInviteUseCase)
        list_jobs = await unit_env.get(ListBulkJobsUseCase)
        supervisor = await unit_env.get(TaskSupervisor)
        first = await use_case.execute(make_request(emails="a@example.org"))
        second = await use_case.execute(make_request(emails="b@example.org"))
        await supervisor.drain()

        response = await list_jobs.execute(ListBulkJobsRequest(caller=STAFF))
        others = await list_jobs.execute(ListBulkJobsRequest(caller=MEMBER))

        assert {job.id for job in response.jobs} == {first.job_id, second.job_id}
        assert others.jobs == []
