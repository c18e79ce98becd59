"""Create schedule_rules and time_off tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "schedule_rules",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column(
            "calendar_id",
            postgresql.UUID(),
            sa.ForeignKey("professionals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("slot_minutes", sa.Integer(), server_default="15", nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="schedule_rules_day_check"),
        sa.CheckConstraint("start_time < end_time", name="schedule_rules_window_check"),
        sa.CheckConstraint("slot_minutes > 0", name="schedule_rules_slot_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_schedule_rules_calendar_id", "schedule_rules", ["calendar_id"])

    op.create_table(
        "time_off",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column(
            "calendar_id",
            postgresql.UUID(),
            sa.ForeignKey("professionals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.CheckConstraint('start < "end"', name="time_off_interval_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_time_off_calendar_start", "time_off", ["calendar_id", "start"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("ix_time_off_calendar_start", table_name="time_off")
    op.drop_table("time_off")
    op.drop_index("ix_schedule_rules_calendar_id", table_name="schedule_rules")
    op.drop_table("schedule_rules")
