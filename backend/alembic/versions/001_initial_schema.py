"""Initial schema — equipment, maintenance_logs.

Revision ID: 001_initial
Revises: None
Create Date: 2025-09-09

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "equipment",
        sa.Column("machine_id", sa.String(64), primary_key=True),
        sa.Column("machine_name", sa.String(200), nullable=True),
        sa.Column("level", sa.Integer, nullable=False, server_default="1"),
        sa.Column("xp", sa.Integer, nullable=False, server_default="0"),
        sa.Column("health", sa.Integer, nullable=False, server_default="100"),
        sa.Column("last_cared_date", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "maintenance_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "machine_id", sa.String(64),
            sa.ForeignKey("equipment.machine_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("action", sa.String(200), nullable=False),
        sa.Column("performed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_maintenance_logs_machine_id", "maintenance_logs", ["machine_id"])


def downgrade() -> None:
    op.drop_index("ix_maintenance_logs_machine_id", table_name="maintenance_logs")
    op.drop_table("maintenance_logs")
    op.drop_table("equipment")
