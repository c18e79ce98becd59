"""Create tenants, units, users, professionals, customers and services.

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id", postgresql.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False
    )


def _audit_columns() -> list[sa.Column]:
    return [
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
    ]


def _tenant_column() -> sa.Column:
    return sa.Column(
        "tenant_id",
        postgresql.UUID(),
        sa.ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade database schema."""
    # Enable pgcrypto extension
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        "tenants",
        _id_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("plan", sa.Text(), server_default="free", nullable=False),
        sa.Column("status", sa.Text(), server_default="active", nullable=False),
        *_audit_columns(),
        sa.CheckConstraint("plan IN ('free', 'basic', 'premium')", name="tenants_plan_check"),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'suspended')", name="tenants_status_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "units",
        _id_column(),
        _tenant_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("timezone", sa.Text(), server_default="America/Sao_Paulo", nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_units_tenant_id", "units", ["tenant_id"])

    op.create_table(
        "users",
        _id_column(),
        _tenant_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.VARCHAR(length=20), nullable=True),
        sa.Column("role", sa.Text(), server_default="reception", nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("auth_provider", sa.Text(), server_default="supabase", nullable=True),
        *_audit_columns(),
        sa.CheckConstraint(
            "role IN ('admin', 'professional', 'reception')", name="users_role_check"
        ),
        sa.CheckConstraint(
            "auth_provider IS NULL OR auth_provider IN ('supabase', 'google', 'microsoft')",
            name="users_auth_provider_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_tenant_id", "users", ["tenant_id"])

    op.create_table(
        "professionals",
        _id_column(),
        sa.Column(
            "unit_id",
            postgresql.UUID(),
            sa.ForeignKey("units.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_professionals_unit_id", "professionals", ["unit_id"])

    op.create_table(
        "customers",
        _id_column(),
        _tenant_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.VARCHAR(length=20), nullable=True),
        sa.Column(
            "consent_flags",
            postgresql.JSONB(),
            server_default=sa.text(
                """'{"marketing": false, "reminders": true, "notifications": true}'::jsonb"""
            ),
            nullable=False,
        ),
        *_audit_columns(),
        sa.UniqueConstraint("tenant_id", "email", name="customers_tenant_email_key"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_customers_tenant_id", "customers", ["tenant_id"])

    op.create_table(
        "services",
        _id_column(),
        _tenant_column(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_audit_columns(),
        sa.CheckConstraint("duration_minutes > 0", name="services_duration_check"),
        sa.CheckConstraint("base_price >= 0", name="services_price_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_services_tenant_id", "services", ["tenant_id"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("ix_services_tenant_id", table_name="services")
    op.drop_table("services")
    op.drop_index("ix_customers_tenant_id", table_name="customers")
    op.drop_table("customers")
    op.drop_index("ix_professionals_unit_id", table_name="professionals")
    op.drop_table("professionals")
    op.drop_index("ix_users_tenant_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_units_tenant_id", table_name="units")
    op.drop_table("units")
    op.drop_table("tenants")
