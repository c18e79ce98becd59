"""Create appointments table with the no-overlap exclusion constraint.

Revision ID: 003
Revises: 002
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Needed to mix = on uuid with && on ranges in one GiST index
    op.execute('CREATE EXTENSION IF NOT EXISTS "btree_gist"')

    op.create_table(
        "appointments",
        sa.Column(
            "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
        ),
        sa.Column(
            "tenant_id",
            postgresql.UUID(),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("unit_id", postgresql.UUID(), sa.ForeignKey("units.id"), nullable=False),
        sa.Column("customer_id", postgresql.UUID(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column(
            "professional_id",
            postgresql.UUID(),
            sa.ForeignKey("professionals.id"),
            nullable=False,
        ),
        sa.Column("service_id", postgresql.UUID(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("start", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("status", sa.Text(), server_default="pending", nullable=False),
        sa.Column("source", sa.Text(), server_default="web", nullable=False),
        sa.Column("price_estimate", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("idempotency_key", sa.VARCHAR(length=255), nullable=True),
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
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'no_show', 'completed')",
            name="appointments_status_check",
        ),
        sa.CheckConstraint(
            "source IN ('web', 'phone', 'walk_in')", name="appointments_source_check"
        ),
        sa.CheckConstraint('start < "end"', name="appointments_interval_check"),
        sa.UniqueConstraint("idempotency_key", name="appointments_idempotency_key_key"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_appointments_tenant_start", "appointments", ["tenant_id", "start"])
    op.create_index(
        "ix_appointments_professional_start", "appointments", ["professional_id", "start"]
    )

    # Storage-level guard against double booking, mirrors the service-level check
    op.execute(
        """
        ALTER TABLE appointments
        ADD CONSTRAINT appointments_no_overlap
        EXCLUDE USING gist (
            professional_id WITH =,
            tstzrange(start, "end", '[)') WITH &&
        )
        WHERE (status NOT IN ('cancelled', 'no_show'))
        """
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.execute("ALTER TABLE appointments DROP CONSTRAINT IF EXISTS appointments_no_overlap")
    op.drop_index("ix_appointments_professional_start", table_name="appointments")
    op.drop_index("ix_appointments_tenant_start", table_name="appointments")
    op.drop_table("appointments")
