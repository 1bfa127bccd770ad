"""Create versioned record and history tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables: versioned_records, record_history, activity_logs
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create versioning tables."""
    # versioned_records: current snapshot of every record, history excluded
    op.create_table(
        "versioned_records",
        sa.Column("record_type", sa.String(255), nullable=False),
        sa.Column("record_id", sa.Text, nullable=False),
        sa.Column("data", JSONB, nullable=False),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("record_type", "record_id", name="pk_versioned_records"),
    )
    op.create_index(
        "idx_versioned_records_live",
        "versioned_records",
        ["record_type"],
        postgresql_where=sa.text("NOT is_deleted"),
    )

    # record_history: append-only log keyed by (record_type, record_id, version_number)
    op.create_table(
        "record_history",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("record_type", sa.String(255), nullable=False),
        sa.Column("record_id", sa.Text, nullable=False),
        sa.Column("version_number", sa.Integer, nullable=False),
        sa.Column("changed_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("changed_by", sa.Text, nullable=False),
        sa.Column("change_kind", sa.String(20), nullable=False),
        sa.Column("summary", sa.Text),
        sa.Column("field_changes", JSONB, nullable=False, server_default="[]"),
        sa.UniqueConstraint(
            "record_type", "record_id", "version_number", name="uq_record_history_version"
        ),
        sa.CheckConstraint("version_number > 0", name="chk_history_version_positive"),
        sa.CheckConstraint(
            "change_kind IN ('Created', 'Updated', 'Deleted')",
            name="chk_history_change_kind",
        ),
    )
    op.create_index(
        "idx_record_history_changed_at",
        "record_history",
        ["record_type", "record_id", "changed_at"],
    )

    # activity_logs: tenant-scoped user activity trail
    op.create_table(
        "activity_logs",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("tenant_id", UUID, nullable=False),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("activity", sa.Text, nullable=False),
        sa.Column("entity_type", sa.String(255)),
        sa.Column("entity_id", sa.Text),
        sa.Column("old_values", sa.Text),
        sa.Column("new_values", sa.Text),
        sa.Column("timestamp", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_activity_logs_tenant_time", "activity_logs", ["tenant_id", "timestamp"]
    )
    op.create_index(
        "idx_activity_logs_entity", "activity_logs", ["tenant_id", "entity_type", "entity_id"]
    )


def downgrade() -> None:
    """Drop versioning tables."""
    op.drop_table("activity_logs")
    op.drop_table("record_history")
    op.drop_table("versioned_records")
