"""Add processed_at to maintenance_logs for pending-event tracking.

Revision ID: 002_processed_at
Revises: 001_initial
Create Date: 2025-09-12

Log rows with processed_at NULL are pending for the progression engine.
Existing rows are backfilled as processed so they are not replayed.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '002_processed_at'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        'maintenance_logs',
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.execute("UPDATE maintenance_logs SET processed_at = performed_at")


def downgrade() -> None:
    op.drop_column('maintenance_logs', 'processed_at')
