"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from portal.domain.model import BulkJobRecord, BulkJobResult, InviteLogRecord
from portal.domain.value import BulkJobId, BulkJobStatus, InviteLogId, InviteLogStatus


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_invite_log(row: Dict[str, Any]) -> InviteLogRecord:
    """Convert database row to InviteLogRecord domain model.

    Args:
        row: Database row as dict

    Returns:
        InviteLogRecord domain model
    """
    return InviteLogRecord(
        id=InviteLogId(_uuid(row["id"])),
        owner_sub=row["owner_sub"],
        invite_external_id=row["invite_external_id"],
        created_at=row["created_at"],
        expires_at=row.get("expires_at"),
        status=InviteLogStatus(row["status"]),
        group_label=row.get("group_label"),
    )


def invite_log_to_dict(record: InviteLogRecord) -> Dict[str, Any]:
    """Convert InviteLogRecord domain model to database dict.

    Args:
        record: InviteLogRecord domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": record.id,
        "owner_sub": record.owner_sub,
        "invite_external_id": record.invite_external_id,
        "created_at": record.created_at,
        "expires_at": record.expires_at,
        "status": record.status.value,
        "group_label": record.group_label,
    }


def row_to_bulk_job(row: Dict[str, Any]) -> BulkJobRecord:
    """Convert database row to BulkJobRecord domain model."""
    result = row.get("result")
    return BulkJobRecord(
        id=BulkJobId(_uuid(row["id"])),
        creator_sub=row["creator_sub"],
        status=BulkJobStatus(row["status"]),
        total=row["total"],
        processed=row["processed"],
        failed=row["failed"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        result=BulkJobResult.model_validate(result) if result is not None else None,
    )


def bulk_job_to_dict(job: BulkJobRecord) -> Dict[str, Any]:
    """Convert BulkJobRecord domain model to database dict."""
    return {
        "id": job.id,
        "creator_sub": job.creator_sub,
        "status": job.status.value,
        "total": job.total,
        "processed": job.processed,
        "failed": job.failed,
        "result": job.result.model_dump() if job.result else None,
        "created_at": job.created_at,
        "updated_at": job.updated_at,
    }
