"""Integration tests for the PostgreSQL repositories.

Requires a migrated database reachable at DATABASE__URL.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from portal.domain.model import BulkJobRecord, BulkJobResult, InviteLogRecord
from portal.domain.repository import BulkJobRepository, InviteLogRepository
from portal.domain.value import BulkJobId, BulkJobStatus, InviteLogId, InviteLogStatus
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


def make_record(owner_sub: str, created_at: datetime | None = None) -> InviteLogRecord:
    return InviteLogRecord(
        id=InviteLogId(uuid4()),
        owner_sub=owner_sub,
        invite_external_id=f"inv-{uuid4().hex[:8]}",
        created_at=created_at or datetime.now(timezone.utc),
        group_label="Guests",
    )


class TestInviteLogRepositoryIntegration:
    """Integration tests for PostgresInviteLogRepository."""

    @pytest.mark.asyncio
    async def test_save_and_find(self, integration_env):
        # Arrange
        repo = await integration_env.get(InviteLogRepository)
        record = make_record(f"uid-{uuid4()}")

        # Act
        await repo.save(record)
        found = await repo.find_by_id(record.id)
        by_external = await repo.find_by_external_id(
            record.owner_sub, record.invite_external_id
        )

        # Assert
        assert found == record
        assert by_external.id == record.id
        assert found.status == InviteLogStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_count_since(self, integration_env):
        repo = await integration_env.get(InviteLogRepository)
        owner = f"uid-{uuid4()}"
        now = datetime.now(timezone.utc)
        await repo.save(make_record(owner, now - timedelta(days=2)))
        await repo.save(make_record(owner, now - timedelta(days=8)))

        assert await repo.count_by_owner(owner) == 2
        assert await repo.count_by_owner(owner, since=now - timedelta(days=7)) == 1

    @pytest.mark.asyncio
    async def test_update_status_and_delete_by_owner(self, integration_env):
        repo = await integration_env.get(InviteLogRepository)
        owner = f"uid-{uuid4()}"
        record = make_record(owner)
        await repo.save(record)
        await repo.save(make_record(owner))

        await repo.update_status(record.id, InviteLogStatus.DELETED)
        assert (await repo.find_by_id(record.id)).status == InviteLogStatus.DELETED

        assert await repo.delete_by_owner(owner) == 2
        assert await repo.find_by_owner(owner) == []


class TestBulkJobRepositoryIntegration:
    """Integration tests for PostgresBulkJobRepository."""

    @pytest.mark.asyncio
    async def test_save_is_an_upsert(self, integration_env):
        repo = await integration_env.get(BulkJobRepository)
        creator = f"uid-{uuid4()}"
        job = BulkJobRecord(id=BulkJobId(uuid4()), creator_sub=creator, total=3)
        await repo.save(job)

        finished = job.model_copy(
            update={
                "status": BulkJobStatus.COMPLETED,
                "processed": 3,
                "failed": 1,
                "result": BulkJobResult(errors=["c@example.org: rejected"]),
            }
        )
        await repo.save(finished)

        found = await repo.find_by_id(job.id)
        assert found.status == BulkJobStatus.COMPLETED
        assert found.failed == 1
        assert found.result.errors == ["c@example.org: rejected"]
        assert [j.id for j in await repo.find_by_creator(creator)] == [job.id]
