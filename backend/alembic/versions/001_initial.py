"""Initial schema: users, sleep_routines, sleep_routine_steps, sleep_logs, audit_log

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "sleep_routines",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("goal_description", sa.Text(), nullable=True),
        sa.Column("target_bed_time_local", sa.String(32), nullable=True),
        sa.Column("target_wake_time_local", sa.String(32), nullable=True),
        sa.Column("time_zone", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sleep_routines_user_id", "sleep_routines", ["user_id"], unique=False)
    op.create_index("ix_sleep_routines_is_active", "sleep_routines", ["is_active"], unique=False)

    op.create_table(
        "sleep_routine_steps",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("routine_id", sa.String(36), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("minutes_before_bed", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["routine_id"], ["sleep_routines.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sleep_routine_steps_routine_id", "sleep_routine_steps", ["routine_id"], unique=False)

    op.create_table(
        "sleep_logs",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("routine_id", sa.String(36), nullable=True),
        sa.Column("sleep_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("bed_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("wake_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sleep_quality_score", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["routine_id"], ["sleep_routines.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sleep_logs_user_id", "sleep_logs", ["user_id"], unique=False)
    op.create_index("ix_sleep_logs_routine_id", "sleep_logs", ["routine_id"], unique=False)
    op.create_index("ix_sleep_logs_sleep_date", "sleep_logs", ["sleep_date"], unique=False)

    op.create_table(
        "audit_log",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.String(50), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_user_id", "audit_log", ["user_id"], unique=False)
    op.create_index("ix_audit_log_action", "audit_log", ["action"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_audit_log_action", table_name="audit_log")
    op.drop_index("ix_audit_log_user_id", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_sleep_logs_sleep_date", table_name="sleep_logs")
    op.drop_index("ix_sleep_logs_routine_id", table_name="sleep_logs")
    op.drop_index("ix_sleep_logs_user_id", table_name="sleep_logs")
    op.drop_table("sleep_logs")
    op.drop_index("ix_sleep_routine_steps_routine_id", table_name="sleep_routine_steps")
    op.drop_table("sleep_routine_steps")
    op.drop_index("ix_sleep_routines_is_active", table_name="sleep_routines")
    op.drop_index("ix_sleep_routines_user_id", table_name="sleep_routines")
    op.drop_table("sleep_routines")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
