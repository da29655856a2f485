"""Create ota_configurations and ota_sync_logs

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-16 09:12:31.418204

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]
from ota_sync.config import SCHEMA

# revision identifiers, used by Alembic.
revision = "3f2a9c1d7b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "ota_configurations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ota_name", sa.String(length=100), nullable=False),
        sa.Column("api_key", sa.String(length=255), nullable=True),
        sa.Column("api_username", sa.String(length=255), nullable=True),
        sa.Column("api_password", sa.String(length=255), nullable=True),
        sa.Column("endpoint_url", sa.String(length=255), nullable=False),
        sa.Column("hotel_id", sa.String(length=100), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("TRUE"), nullable=False),
        sa.Column("last_sync_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("sync_frequency", sa.Integer(), server_default=sa.text("60"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ota_name"),
        schema=SCHEMA,
    )

    # No foreign key on configuration_id: entries outlive deleted configurations
    op.create_table(
        "ota_sync_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("configuration_id", sa.Integer(), nullable=True),
        sa.Column(
            "sync_type",
            sa.Enum(
                "availability",
                "rates",
                "inventory",
                "bookings",
                name="ota_sync_type",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("success", "failed", "partial", name="ota_sync_status", native_enum=False),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("records_processed", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "sync_started_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("sync_completed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )
    op.create_index(
        op.f("ix_ota_sync_logs_configuration_id"),
        "ota_sync_logs",
        ["configuration_id"],
        unique=False,
        schema=SCHEMA,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        op.f("ix_ota_sync_logs_configuration_id"), table_name="ota_sync_logs", schema=SCHEMA
    )
    op.drop_table("ota_sync_logs", schema=SCHEMA)
    op.drop_table("ota_configurations", schema=SCHEMA)
