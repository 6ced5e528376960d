"""SQLAlchemy table definitions for the invite portal.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import Column, Enum, Index, Integer, MetaData, String, Table
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# INVITE LOGS TABLE (Quota ledger)
# ============================================================================
invite_logs_table = Table(
    "invite_logs",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("owner_sub", String(255), nullable=False),  # authentik user uid
    Column("invite_external_id", String(255), nullable=False),  # Invitation pk
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "status",
        Enum(
            "active",
            "exhausted",
            "deleted",
            name="invite_log_status",
            create_type=False,
        ),
        nullable=False,
        server_default="active",
    ),
    Column("group_label", String(255), nullable=True),
)

# Quota checks count by owner within a time window
Index(
    "idx_invite_logs_owner_created",
    invite_logs_table.c.owner_sub,
    invite_logs_table.c.created_at,
)

# ============================================================================
# BULK INVITE JOBS TABLE
# ============================================================================
bulk_invite_jobs_table = Table(
    "bulk_invite_jobs",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("creator_sub", String(255), nullable=False),
    Column(
        "status",
        Enum(
            "pending",
            "processing",
            "completed",
            "failed",
            name="bulk_job_status",
            create_type=False,
        ),
        nullable=False,
        server_default="pending",
    ),
    Column("total", Integer, nullable=False, server_default="0"),
    Column("processed", Integer, nullable=False, server_default="0"),
    Column("failed", Integer, nullable=False, server_default="0"),
    Column("result", JSONB, nullable=True),  # {"errors": [...], "error": str}
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_bulk_invite_jobs_creator", bulk_invite_jobs_table.c.creator_sub)
