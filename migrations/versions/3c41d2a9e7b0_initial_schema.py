"""initial_schema

Create the schema for the invite portal:
- Invite logs (quota ledger of invitations issued upstream)
- Bulk invite jobs (asynchronous campaign progress)

Revision ID: 3c41d2a9e7b0
Revises:
Create Date: 2026-10-19 09:12:44.301562

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c41d2a9e7b0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE invite_log_status AS ENUM ('active', 'exhausted', 'deleted');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE bulk_job_status AS ENUM
                ('pending', 'processing', 'completed', 'failed');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # INVITE_LOGS table
    # ========================================================================
    op.create_table(
        "invite_logs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("owner_sub", sa.String(255), nullable=False),
        sa.Column("invite_external_id", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(
                "active",
                "exhausted",
                "deleted",
                name="invite_log_status",
                create_type=False,
            ),
            nullable=False,
            server_default="active",
        ),
        sa.Column("group_label", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_invite_logs_owner_created", "invite_logs", ["owner_sub", "created_at"]
    )

    # ========================================================================
    # BULK_INVITE_JOBS table
    # ========================================================================
    op.create_table(
        "bulk_invite_jobs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("creator_sub", sa.String(255), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(
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
        sa.Column("total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("processed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("failed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("result", postgresql.JSONB(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_bulk_invite_jobs_creator", "bulk_invite_jobs", ["creator_sub"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_bulk_invite_jobs_creator", table_name="bulk_invite_jobs")
    op.drop_index("idx_invite_logs_owner_created", table_name="invite_logs")

    op.drop_table("bulk_invite_jobs")
    op.drop_table("invite_logs")

    op.execute("DROP TYPE IF EXISTS bulk_job_status")
    op.execute("DROP TYPE IF EXISTS invite_log_status")
