"""initial_alumni_schema

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "3f1a9c2e7b40"
down_revision = None
branch_labels = None
depends_on = None

# Enum columns store member names
profile_status = sa.Enum("PENDING", "APPROVED", "SUSPENDED", name="profilestatus")
connection_status = sa.Enum("PENDING", "ACCEPTED", "REJECTED", "BLOCKED", name="connectionstatus")
rsvp_status = sa.Enum("YES", "NO", "MAYBE", "WAITLIST", name="rsvpstatus")
batch_role_type = sa.Enum("BATCH_ADMIN", name="batchroletype")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("external_auth_id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_external_auth_id", "users", ["external_auth_id"], unique=True)

    op.create_table(
        "batches",
        sa.Column("batch_year", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("batch_year"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("batch_year", sa.Integer(), nullable=False),
        sa.Column("location_state", sa.String(255), nullable=True),
        sa.Column("industry", sa.String(255), nullable=True),
        sa.Column("job_title", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email_public", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("phone_public", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("status", profile_status, nullable=False),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["batch_year"], ["batches.batch_year"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_status_full_name", "profiles", ["status", "full_name"])
    op.create_index("ix_profiles_batch_year", "profiles", ["batch_year"])

    op.create_table(
        "batch_roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("batch_year", sa.Integer(), nullable=False),
        sa.Column("role", batch_role_type, nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["batch_year"], ["batches.batch_year"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_batch_roles_user_batch", "batch_roles", ["user_id", "batch_year"], unique=True)

    op.create_table(
        "central_admins",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "connections",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("requester_id", sa.Uuid(), nullable=False),
        sa.Column("receiver_id", sa.Uuid(), nullable=False),
        sa.Column("user_low_id", sa.Uuid(), nullable=False),
        sa.Column("user_high_id", sa.Uuid(), nullable=False),
        sa.Column("status", connection_status, nullable=False),
        sa.CheckConstraint("requester_id <> receiver_id", name="ck_connections_not_self"),
        sa.CheckConstraint("user_low_id < user_high_id", name="ck_connections_pair_ordered"),
        sa.ForeignKeyConstraint(["requester_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["receiver_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_connections_active_pair",
        "connections",
        ["user_low_id", "user_high_id"],
        unique=True,
        postgresql_where=sa.text("status <> 'REJECTED'"),
    )
    op.create_index("ix_connections_receiver_status", "connections", ["receiver_id", "status"])
    op.create_index("ix_connections_requester_status", "connections", ["requester_id", "status"])

    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("batch_year", sa.Integer(), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("quota", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.CheckConstraint("end_at IS NULL OR end_at >= start_at", name="ck_events_end_after_start"),
        sa.CheckConstraint("quota IS NULL OR quota > 0", name="ck_events_quota_positive"),
        sa.ForeignKeyConstraint(["batch_year"], ["batches.batch_year"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_batch_year_start_at", "events", ["batch_year", "start_at"])

    op.create_table(
        "rsvps",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("status", rsvp_status, nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_rsvps_event_user", "rsvps", ["event_id", "user_id"], unique=True)

    op.create_table(
        "announcements",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("batch_year", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["batch_year"], ["batches.batch_year"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_announcements_batch_year_created_at", "announcements", ["batch_year", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_announcements_batch_year_created_at", table_name="announcements")
    op.drop_table("announcements")
    op.drop_index("uq_rsvps_event_user", table_name="rsvps")
    op.drop_table("rsvps")
    op.drop_index("ix_events_batch_year_start_at", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_connections_requester_status", table_name="connections")
    op.drop_index("ix_connections_receiver_status", table_name="connections")
    op.drop_index("uq_connections_active_pair", table_name="connections")
    op.drop_table("connections")
    op.drop_table("central_admins")
    op.drop_index("uq_batch_roles_user_batch", table_name="batch_roles")
    op.drop_table("batch_roles")
    op.drop_index("ix_profiles_batch_year", table_name="profiles")
    op.drop_index("ix_profiles_status_full_name", table_name="profiles")
    op.drop_table("profiles")
    op.drop_table("batches")
    op.drop_index("ix_users_external_auth_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (batch_role_type, rsvp_status, connection_status, profile_status):
        enum_type.drop(bind, checkfirst=True)
