"""Unit tests for BulkInviteService."""

from uuid import uuid4

import pytest

from portal.adapter.authentik import AuthentikClient
from portal.domain.model import BulkInvitePayload
from portal.domain.repository import BulkJobRepository, InviteLogRepository
from portal.domain.service import BulkInviteService, EmailSender
from portal.domain.value import BulkJobId, BulkJobStatus
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()

MESSAGE = "{{inviter_username}} invited you: {{invite_url}} (expires {{expiration_date}})"


def make_payload(recipients: list[str], **overrides) -> BulkInvitePayload:
    fields = {
        "owner_sub": "uid-alice",
        "username": "alice",
        "display_name": "Alice Example",
        "caller_groups": ["staff"],
        "recipients": recipients,
        "message": MESSAGE,
        "expiry": "7d",
    }
    fields.update(overrides)
    return BulkInvitePayload(**fields)


def emails(count: int) -> list[str]:
    return [f"user{i}@example.org" for i in range(count)]


async def run_job(env, payload: BulkInvitePayload):
    service = await env.get(BulkInviteService)
    job = await service.create_job(payload.owner_sub, total=len(payload.recipients))
    await service.run(job.id, payload)
    return await service.get_job(job.id)


class TestSingleUse:
    """Tests for one invite per recipient."""

    @pytest.mark.asyncio
    async def test_every_recipient_gets_an_invite(self, unit_env):
        # Arrange
        sender = await unit_env.get(EmailSender)
        ledger = await unit_env.get(InviteLogRepository)

        # Act
        job = await run_job(unit_env, make_payload(emails(3)))

        # Assert
        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 3
        assert job.failed == 0
        assert job.result.errors == []
        assert await ledger.count_by_owner("uid-alice") == 3
        assert [to for to, _, _ in sender.sent] == emails(3)

    @pytest.mark.asyncio
    async def test_email_body_is_rendered(self, unit_env):
        sender = await unit_env.get(EmailSender)

        await run_job(unit_env, make_payload(["bob@example.org"]))

        _, subject, body = sender.sent[0]
        assert subject == "Invitation to join Example Community"
        assert body.startswith("Alice Example invited you: https://auth.example.org/")
        assert "?itoken=inv-1" in body
        assert "UTC" in body

    @pytest.mark.asyncio
    async def test_all_rejected_still_completes(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        ledger = await unit_env.get(InviteLogRepository)
        recipients = emails(3)
        client.reject_names = {f"Invite for {email}" for email in recipients}

        job = await run_job(unit_env, make_payload(recipients))

        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 3
        assert job.failed == 3
        assert len(job.result.errors) == 3
        assert job.result.errors[0].startswith("user0@example.org: ")
        assert await ledger.count_by_owner("uid-alice") == 0

    @pytest.mark.asyncio
    async def test_delivery_failures_are_counted(self, unit_env):
        sender = await unit_env.get(EmailSender)
        ledger = await unit_env.get(InviteLogRepository)
        sender.failing = {"user0@example.org"}
        sender.refused = {"user2@example.org"}

        job = await run_job(unit_env, make_payload(emails(3)))

        assert job.status == BulkJobStatus.COMPLETED
        assert job.failed == 2
        assert job.processed == 3
        # The invites exist upstream, so they are still on the ledger
        assert await ledger.count_by_owner("uid-alice") == 3

    @pytest.mark.asyncio
    async def test_without_email_configured(self, unit_env):
        sender = await unit_env.get(EmailSender)
        sender.configured = False

        job = await run_job(unit_env, make_payload(emails(2)))

        assert job.status == BulkJobStatus.COMPLETED
        assert job.failed == 0
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_groupings_become_fixed_data(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        ledger = await unit_env.get(InviteLogRepository)

        await run_job(
            unit_env, make_payload(["bob@example.org"], groupings=["Members"])
        )

        assert client.fixed_data["inv-1"] == {
            "invited_by": "alice",
            "invite_groups": ["members"],
        }
        [record] = await ledger.find_by_owner("uid-alice")
        assert record.group_label == "Members"

    @pytest.mark.asyncio
    async def test_progress_is_checkpointed(self, unit_env):
        jobs = await unit_env.get(BulkJobRepository)

        job = await run_job(unit_env, make_payload(emails(12)))

        processing = [
            saved.processed
            for saved in jobs.history
            if saved.id == job.id and saved.status == BulkJobStatus.PROCESSING
        ]
        assert 5 in processing
        assert 10 in processing
        observed = [saved.processed for saved in jobs.history if saved.id == job.id]
        assert observed == sorted(observed)

    @pytest.mark.asyncio
    async def test_unexpected_send_error_fails_only_that_recipient(
        self, unit_env, monkeypatch
    ):
        # Arrange
        sender = await unit_env.get(EmailSender)
        ledger = await unit_env.get(InviteLogRepository)
        deliver = sender.send

        async def send(to: str, subject: str, text: str) -> bool:
            if to == "user1@example.org":
                raise ValueError("Header values may not contain linefeed")
            return await deliver(to, subject, text)

        monkeypatch.setattr(sender, "send", send)

        # Act
        job = await run_job(unit_env, make_payload(emails(4)))

        # Assert
        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 4
        assert job.failed == 1
        assert job.result.errors == [
            "user1@example.org: Header values may not contain linefeed"
        ]
        assert await ledger.count_by_owner("uid-alice") == 4
        assert [to for to, _, _ in sender.sent] == [
            "user0@example.org",
            "user2@example.org",
            "user3@example.org",
        ]

    @pytest.mark.asyncio
    async def test_counters_stay_within_bounds(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        sender = await unit_env.get(EmailSender)
        jobs = await unit_env.get(BulkJobRepository)
        client.reject_names = {"Invite for user2@example.org"}
        sender.failing = {"user6@example.org"}
        sender.refused = {"user9@example.org", "user11@example.org"}

        job = await run_job(unit_env, make_payload(emails(12)))

        snapshots = [saved for saved in jobs.history if saved.id == job.id]
        assert len(snapshots) > 3
        for saved in snapshots:
            assert 0 <= saved.processed <= saved.total
            assert 0 <= saved.failed <= saved.processed
        assert job.processed == 12
        assert job.failed == 4


class TestMultiUse:
    """Tests for one shared invite."""

    @pytest.mark.asyncio
    async def test_one_ledger_record_for_all_recipients(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        sender = await unit_env.get(EmailSender)
        ledger = await unit_env.get(InviteLogRepository)

        job = await run_job(unit_env, make_payload(emails(50), single_use=False))

        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 50
        assert job.failed == 0
        assert await ledger.count_by_owner("uid-alice") == 1
        assert len(client.invitations) == 1
        assert not client.invitations["inv-1"].single_use
        assert len(sender.sent) == 50
        assert all("?itoken=inv-1" in body for _, _, body in sender.sent)

    @pytest.mark.asyncio
    async def test_rejected_creation_fails_every_recipient(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        ledger = await unit_env.get(InviteLogRepository)
        client.reject_names = {"Bulk Invite (4 recipients)"}

        job = await run_job(unit_env, make_payload(emails(4), single_use=False))

        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 4
        assert job.failed == 4
        assert await ledger.count_by_owner("uid-alice") == 0

    @pytest.mark.asyncio
    async def test_mixed_delivery_outcomes_still_use_one_ledger_record(
        self, unit_env
    ):
        sender = await unit_env.get(EmailSender)
        ledger = await unit_env.get(InviteLogRepository)
        jobs = await unit_env.get(BulkJobRepository)
        sender.failing = {
            "user3@example.org",
            "user17@example.org",
            "user30@example.org",
        }
        sender.refused = {"user8@example.org", "user41@example.org"}

        job = await run_job(unit_env, make_payload(emails(50), single_use=False))

        assert job.status == BulkJobStatus.COMPLETED
        assert job.processed == 50
        assert job.failed == 5
        assert len(sender.sent) == 45
        assert (
            "user3@example.org (Delivery): 550 Mailbox unavailable"
            in job.result.errors
        )
        assert all("(Delivery)" in error for error in job.result.errors)
        assert await ledger.count_by_owner("uid-alice") == 1
        for saved in jobs.history:
            if saved.id == job.id:
                assert saved.failed <= saved.processed <= saved.total


class TestSystemFailures:
    """Tests for failures that abort the job."""

    @pytest.mark.asyncio
    async def test_missing_flow_fails_job(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        client.flows.clear()

        job = await run_job(unit_env, make_payload(emails(2)))

        assert job.status == BulkJobStatus.FAILED
        assert "Could not find flow" in job.result.error

    @pytest.mark.asyncio
    async def test_authentik_going_away_fails_job(self, unit_env):
        client = await unit_env.get(AuthentikClient)
        ledger = await unit_env.get(InviteLogRepository)
        client.unavailable_after = 2

        job = await run_job(unit_env, make_payload(emails(4)))

        assert job.status == BulkJobStatus.FAILED
        assert "unreachable" in job.result.error
        # Invites issued before the outage stay on the ledger
        assert await ledger.count_by_owner("uid-alice") == 2

    @pytest.mark.asyncio
    async def test_run_of_unknown_job_does_not_raise(self, unit_env):
        service = await unit_env.get(BulkInviteService)
        await service.run(BulkJobId(uuid4()), make_payload(emails(1)))
