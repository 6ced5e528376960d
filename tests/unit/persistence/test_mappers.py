"""Unit tests for row mappers."""

from datetime import datetime, timezone
from uuid import uuid4

from portal.domain.model import BulkJobRecord, BulkJobResult
from portal.domain.value import BulkJobId, BulkJobStatus, InviteLogStatus
from portal.persistence.mappers import (
    bulk_job_to_dict,
    row_to_bulk_job,
    row_to_invite_log,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_invite_log_row_with_string_id():
    record_id = uuid4()

    record = row_to_invite_log(
        {
            "id": str(record_id),
            "owner_sub": "uid-alice",
            "invite_external_id": "inv-1",
            "created_at": NOW,
            "expires_at": None,
            "status": "exhausted",
            "group_label": None,
        }
    )

    assert record.id == record_id
    assert record.status == InviteLogStatus.EXHAUSTED


def test_bulk_job_result_is_stored_as_json():
    job = BulkJobRecord(
        id=BulkJobId(uuid4()),
        creator_sub="uid-alice",
        status=BulkJobStatus.COMPLETED,
        total=2,
        processed=2,
        failed=1,
        result=BulkJobResult(errors=["b@example.org: rejected"]),
        created_at=NOW,
        updated_at=NOW,
    )

    row = bulk_job_to_dict(job)

    assert row["status"] == "completed"
    assert row["result"] == {"errors": ["b@example.org: rejected"], "error": None}
    assert row_to_bulk_job(row) == job


def test_bulk_job_without_result():
    row = {
        "id": uuid4(),
        "creator_sub": "uid-alice",
        "status": "pending",
        "total": 3,
        "processed": 0,
        "failed": 0,
        "result": None,
        "created_at": NOW,
        "updated_at": NOW,
    }

    assert row_to_bulk_job(row).result is None
