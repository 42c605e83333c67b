"""baseline schema for users, sessions, companies, missions and activity reports

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("provider", sa.String(length=13), nullable=True),
        sa.Column("uid", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider", "uid", name="uq_users_provider_uid"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index("idx_sessions_user_expires", "sessions", ["user_id", "expires_at"])

    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("siret", sa.String(length=14), nullable=False),
        sa.Column("siren", sa.String(length=9), nullable=True),
        sa.Column("country", sa.String(length=2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("siret"),
    )
    op.create_index("ix_companies_deleted_at", "companies", ["deleted_at"])

    op.create_table(
        "user_companies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=11), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "company_id", name="uq_user_companies_user_company"),
    )
    op.create_index("ix_user_companies_user_id", "user_companies", ["user_id"])
    op.create_index("ix_user_companies_company_id", "user_companies", ["company_id"])

    op.create_table(
        "missions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("mission_type", sa.String(length=11), nullable=False),
        sa.Column("status", sa.String(length=11), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("daily_rate", sa.BigInteger(), nullable=True),
        sa.Column("fixed_price", sa.BigInteger(), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("created_by_user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_missions_creator_status", "missions", ["created_by_user_id", "status"])
    op.create_index("ix_missions_deleted_at", "missions", ["deleted_at"])

    op.create_table(
        "mission_companies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=11), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["mission_id"], ["missions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("mission_id", "role", name="uq_mission_companies_mission_role"),
    )
    op.create_index("ix_mission_companies_company_id", "mission_companies", ["company_id"])

    op.create_table(
        "user_missions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=11), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["mission_id"], ["missions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "mission_id", name="uq_user_missions_user_mission"),
    )
    op.create_index("ix_user_missions_user_id", "user_missions", ["user_id"])

    op.create_table(
        "cras",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.Column("total_days", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_amount", sa.BigInteger(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("created_by_user_id", sa.Integer(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("locked_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_cras_creator_period", "cras", ["created_by_user_id", "year", "month"])
    op.create_index("ix_cras_deleted_at", "cras", ["deleted_at"])

    op.create_table(
        "cra_missions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cra_id", sa.Integer(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["cra_id"], ["cras.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["mission_id"], ["missions.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cra_id", "mission_id", name="uq_cra_missions_cra_mission"),
    )
    op.create_index("ix_cra_missions_mission_id", "cra_missions", ["mission_id"])

    op.create_table(
        "user_cras",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("cra_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=11), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["cra_id"], ["cras.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "cra_id", name="uq_user_cras_user_cra"),
    )
    op.create_index("ix_user_cras_user_id", "user_cras", ["user_id"])

    op.create_table(
        "cra_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit_price", sa.BigInteger(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cra_entries_date", "cra_entries", ["date"])
    op.create_index("ix_cra_entries_deleted_at", "cra_entries", ["deleted_at"])

    op.create_table(
        "cra_entry_cras",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cra_entry_id", sa.Integer(), nullable=False),
        sa.Column("cra_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["cra_entry_id"], ["cra_entries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["cra_id"], ["cras.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cra_entry_id"),
    )
    op.create_index("ix_cra_entry_cras_cra_id", "cra_entry_cras", ["cra_id"])

    op.create_table(
        "cra_entry_missions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cra_entry_id", sa.Integer(), nullable=False),
        sa.Column("mission_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["cra_entry_id"], ["cra_entries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["mission_id"], ["missions.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cra_entry_id"),
    )
    op.create_index("ix_cra_entry_missions_mission_id", "cra_entry_missions", ["mission_id"])


def downgrade() -> None:
    op.drop_index("ix_cra_entry_missions_mission_id", table_name="cra_entry_missions")
    op.drop_table("cra_entry_missions")

    op.drop_index("ix_cra_entry_cras_cra_id", table_name="cra_entry_cras")
    op.drop_table("cra_entry_cras")

    op.drop_index("ix_cra_entries_deleted_at", table_name="cra_entries")
    op.drop_index("ix_cra_entries_date", table_name="cra_entries")
    op.drop_table("cra_entries")

    op.drop_index("ix_user_cras_user_id", table_name="user_cras")
    op.drop_table("user_cras")

    op.drop_index("ix_cra_missions_mission_id", table_name="cra_missions")
    op.drop_table("cra_missions")

    op.drop_index("ix_cras_deleted_at", table_name="cras")
    op.drop_index("idx_cras_creator_period", table_name="cras")
    op.drop_table("cras")

    op.drop_index("ix_user_missions_user_id", table_name="user_missions")
    op.drop_table("user_missions")

    op.drop_index("ix_mission_companies_company_id", table_name="mission_companies")
    op.drop_table("mission_companies")

    op.drop_index("ix_missions_deleted_at", table_name="missions")
    op.drop_index("idx_missions_creator_status", table_name="missions")
    op.drop_table("missions")

    op.drop_index("ix_user_companies_company_id", table_name="user_companies")
    op.drop_index("ix_user_companies_user_id", table_name="user_companies")
    op.drop_table("user_companies")

    op.drop_index("ix_companies_deleted_at", table_name="companies")
    op.drop_table("companies")

    op.drop_index("idx_sessions_user_expires", table_name="sessions")
    op.drop_table("sessions")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
