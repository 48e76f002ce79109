"""Create users, leads, status_hierarchy and activity_logs tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19
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
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default="Operations"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "status_hierarchy",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("status_name", sa.String(100), nullable=False),
        sa.Column("next_statuses", sa.Text(), nullable=False, server_default=""),
        sa.Column("days_limit", sa.Integer(), nullable=True),
        sa.Column("auto_move_to", sa.String(100), nullable=True),
    )
    op.create_index("ix_status_hierarchy_status_name", "status_hierarchy", ["status_name"], unique=True)

    op.create_table(
        "leads",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("founder_name", sa.String(255), nullable=True),
        sa.Column("owner_name", sa.String(255), nullable=True),
        sa.Column("contact", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("delivery_type", sa.String(20), nullable=True),
        sa.Column("service_type", sa.String(20), nullable=True),
        sa.Column("form_data_json", sa.Text(), nullable=True),
        sa.Column("partner_id", sa.String(36), nullable=True),
        sa.Column("partner_name", sa.String(255), nullable=True),
        sa.Column("created_by_user_id", sa.String(36), nullable=True),
        sa.Column("assigned_to_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("current_status", sa.String(100), nullable=False, server_default="New Lead"),
        sa.Column("last_status", sa.String(100), nullable=True),
        sa.Column("last_status_updated_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("created_on_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_leads_phone", "leads", ["phone"])
    op.create_index("ix_leads_partner_id", "leads", ["partner_id"])
    op.create_index("ix_leads_assigned_to_user_id", "leads", ["assigned_to_user_id"])
    op.create_index("ix_leads_current_status", "leads", ["current_status"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity", sa.String(50), nullable=False, server_default="lead"),
        sa.Column("entity_id", sa.String(36), nullable=False),
        sa.Column("details", sa.Text(), nullable=False, server_default=""),
    )
    op.create_index("ix_activity_logs_timestamp", "activity_logs", ["timestamp"])
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_entity_id", "activity_logs", ["entity_id"])


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("leads")
    op.drop_table("status_hierarchy")
    op.drop_table("users")
