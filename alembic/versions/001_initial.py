"""Create users and widgets

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("workspace_name", sa.String(length=255), nullable=True),
        sa.Column("bot_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "widgets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("icon", sa.String(length=64), nullable=False),
        sa.Column("prefix", sa.String(length=32), nullable=True),
        sa.Column("subtext", sa.String(length=255), nullable=False),
        sa.Column("db_id", sa.String(length=64), nullable=True),
        sa.Column("property", sa.String(length=255), nullable=True),
        sa.Column("manual_value", sa.String(length=255), nullable=False, server_default="0"),
        sa.Column("calculation", sa.String(length=16), nullable=False, server_default="sum"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("widget_user_idx", "widgets", ["user_id"])


def downgrade() -> None:
    op.drop_index("widget_user_idx", table_name="widgets")
    op.drop_table("widgets")
    op.drop_table("users")
