"""Create the notifications ledger table.

One row per refresh-operation attempt keyed by event_id. Indexes cover
every search dimension: parent event, status, lastUpdated and the
(group, artifact, version) coordinate. event_id is the primary key.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "notifications",
        sa.Column("event_id", sa.String(255), primary_key=True),
        sa.Column("parent_event_id", sa.String(255), nullable=True),
        sa.Column("group_id", sa.String(255), nullable=True),
        sa.Column("artifact_id", sa.String(255), nullable=True),
        sa.Column("version_id", sa.String(255), nullable=True),
        sa.Column("status", sa.String(64), nullable=True),
        sa.Column("detail", sa.JSON(none_as_null=True), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_notifications_parent_event_id", "notifications", ["parent_event_id"])
    op.create_index("ix_notifications_status", "notifications", ["status"])
    op.create_index("ix_notifications_last_updated", "notifications", ["last_updated"])
    op.create_index(
        "ix_notifications_coordinates",
        "notifications",
        ["group_id", "artifact_id", "version_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_notifications_coordinates", table_name="notifications")
    op.drop_index("ix_notifications_last_updated", table_name="notifications")
    op.drop_index("ix_notifications_status", table_name="notifications")
    op.drop_index("ix_notifications_parent_event_id", table_name="notifications")
    op.drop_table("notifications")
