"""Initial call sync schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Integration config (one per user)
    op.create_table(
        "integration_config",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("velaris_token", sa.Text()),
        sa.Column("gong_api_key", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sync_frequency", sa.String(20)),
        sa.Column("custom_sync_hours", sa.Integer()),
        sa.Column("selected_activity_type_id", sa.String(100)),
        *_timestamps(),
    )
    op.create_index("ix_integration_config_user_id", "integration_config", ["user_id"], unique=True)

    # Deduplication rules
    op.create_table(
        "deduplication_rule",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(20), nullable=False),
        sa.Column("gong_field", sa.String(255), nullable=False),
        sa.Column("velaris_field", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_deduplication_rule_user_id", "deduplication_rule", ["user_id"])

    # Sync log (append-only)
    op.create_table(
        "sync_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("gong_call_id", sa.String(100)),
        sa.Column("gong_call_title", sa.Text()),
        sa.Column("velaris_activity_id", sa.String(100)),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("error_message", sa.Text()),
        sa.Column("sync_type", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_sync_log_user_id", "sync_log", ["user_id"])
    op.create_index("ix_sync_log_gong_call_id", "sync_log", ["gong_call_id"])
    op.create_index(
        "uq_sync_log_user_call_success",
        "sync_log",
        ["user_id", "gong_call_id"],
        unique=True,
        sqlite_where=sa.text("status = 'success'"),
        postgresql_where=sa.text("status = 'success'"),
    )


def downgrade() -> None:
    op.drop_index("uq_sync_log_user_call_success", table_name="sync_log")
    op.drop_index("ix_sync_log_gong_call_id", table_name="sync_log")
    op.drop_index("ix_sync_log_user_id", table_name="sync_log")
    op.drop_table("sync_log")
    op.drop_index("ix_deduplication_rule_user_id", table_name="deduplication_rule")
    op.drop_table("deduplication_rule")
    op.drop_index("ix_integration_config_user_id", table_name="integration_config")
    op.drop_table("integration_config")
