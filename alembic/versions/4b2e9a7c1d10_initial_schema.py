"""Initial schema: users, profiles, clients, movements, activity logs

Revision ID: 4b2e9a7c1d10
Revises:
Create Date: 2026-10-17 09:12:44.301122

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b2e9a7c1d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names
client_origin = sa.Enum("PRIVATE", "PUBLIC_DEFENDER", name="clientorigin")
case_type = sa.Enum("CIVIL", "LABOR", "CRIMINAL", "FAMILY", "TAX", "SOCIAL_SECURITY", "OTHER", name="casetype")
client_status = sa.Enum("ACTIVE", "PENDING", "CLOSED", name="clientstatus")
movement_type = sa.Enum("HEARING", "DEADLINE", "NOTIFICATION", name="movementtype")
modality = sa.Enum("ONLINE", "IN_PERSON", name="modality")
action_type = sa.Enum("CREATE", "UPDATE", "DELETE", "LOGIN", name="actiontype")
entity_type = sa.Enum("CLIENT", "MOVEMENT", "PROFILE", "SYSTEM", name="entitytype")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("name", sa.String(length=255)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("role", sa.String(length=100)),
        sa.Column("oab", sa.String(length=50)),
        sa.Column("oab_state", sa.String(length=2)),
        sa.Column("cpf", sa.String(length=20)),
        sa.Column("address", sa.Text()),
        sa.Column("profile_image", sa.Text()),
        sa.Column("logo", sa.Text()),
        sa.Column("share_logo", sa.Boolean()),
        sa.Column("notify_deadlines", sa.Boolean()),
        sa.Column("deadline_threshold_days", sa.Integer()),
        sa.Column("google_connected", sa.Boolean()),
        sa.Column("google_email", sa.String(length=255)),
        sa.Column("google_token", sa.Text()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255)),
        sa.Column("phone", sa.String(length=50)),
        sa.Column("cpf_cnpj", sa.String(length=20)),
        sa.Column("rg", sa.String(length=30)),
        sa.Column("rg_issuing_body", sa.String(length=30)),
        sa.Column("nationality", sa.String(length=100)),
        sa.Column("birth_date", sa.Date()),
        sa.Column("marital_status", sa.String(length=50)),
        sa.Column("profession", sa.String(length=100)),
        sa.Column("monthly_income", sa.Float()),
        sa.Column("address", sa.String(length=255)),
        sa.Column("address_number", sa.String(length=20)),
        sa.Column("complement", sa.String(length=100)),
        sa.Column("neighborhood", sa.String(length=100)),
        sa.Column("city", sa.String(length=100)),
        sa.Column("state", sa.String(length=2)),
        sa.Column("zip_code", sa.String(length=10)),
        sa.Column("origin", client_origin, nullable=False),
        sa.Column("case_number", sa.String(length=50)),
        sa.Column("case_type", case_type, nullable=False),
        sa.Column("case_description", sa.Text()),
        sa.Column("status", client_status, nullable=False),
        sa.Column("financials", sa.JSON()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_clients_user_id", "clients", ["user_id"])
    op.create_index("ix_clients_case_number", "clients", ["case_number"])

    op.create_table(
        "movements",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("client_id", sa.String(length=36), sa.ForeignKey("clients.id", ondelete="SET NULL")),
        sa.Column("case_number", sa.String(length=50)),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(length=5)),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", movement_type, nullable=False),
        sa.Column("modality", modality),
        sa.Column("source", sa.String(length=255)),
        sa.Column("synced_to_google", sa.Boolean()),
        sa.Column("google_event_id", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_movements_user_id", "movements", ["user_id"])
    op.create_index("ix_movements_date", "movements", ["date"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id")),
        sa.Column("user_name", sa.String(length=255)),
        sa.Column("action_type", action_type, nullable=False),
        sa.Column("entity_type", entity_type, nullable=False),
        sa.Column("entity_id", sa.String(length=36)),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("details", sa.JSON()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_activity_logs_user_id", "activity_logs", ["user_id"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])


def downgrade():
    op.drop_index("ix_activity_logs_created_at", table_name="activity_logs")
    op.drop_index("ix_activity_logs_user_id", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_index("ix_movements_date", table_name="movements")
    op.drop_index("ix_movements_user_id", table_name="movements")
    op.drop_table("movements")
    op.drop_index("ix_clients_case_number", table_name="clients")
    op.drop_index("ix_clients_user_id", table_name="clients")
    op.drop_table("clients")
    op.drop_table("profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    for enum in (entity_type, action_type, modality, movement_type, client_status, case_type, client_origin):
        enum.drop(op.get_bind(), checkfirst=True)
