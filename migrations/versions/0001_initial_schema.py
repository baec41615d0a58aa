"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    message_role_enum = sa.Enum("user", "ai", name="message_role_enum")
    message_role_enum.create(op.get_bind(), checkfirst=True)

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("provider_id", sa.String(128), nullable=True),
        sa.Column("display_name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(256), nullable=True),
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column("selected_personality_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider_id"),
    )

    # --- conversation_messages ---
    op.create_table(
        "conversation_messages",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("role", sa.Enum("user", "ai", name="message_role_enum", create_type=False), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("personality_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_conversation_user_created", "conversation_messages", ["user_id", "created_at"]
    )
    op.create_index(
        "ix_conversation_messages_personality_id", "conversation_messages", ["personality_id"]
    )

    # --- custom_ai_personalities ---
    op.create_table(
        "custom_ai_personalities",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("mbti_type", sa.String(4), nullable=False),
        sa.Column("system_prompt", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_custom_ai_personalities_user_id", "custom_ai_personalities", ["user_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_custom_ai_personalities_user_id", table_name="custom_ai_personalities")
    op.drop_table("custom_ai_personalities")
    op.drop_index("ix_conversation_messages_personality_id", table_name="conversation_messages")
    op.drop_index("ix_conversation_user_created", table_name="conversation_messages")
    op.drop_table("conversation_messages")
    op.drop_table("users")
    sa.Enum(name="message_role_enum").drop(op.get_bind(), checkfirst=True)
