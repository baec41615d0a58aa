"""add emotion_logs

One row per (user, calendar day); rewritten in place by the daily summary.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-08 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "emotion_logs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("emotion", sa.String(16), nullable=False),
        sa.Column("summary", sa.String(64), nullable=False),
        sa.Column("short_summary", sa.Text(), nullable=True),
        sa.Column("character_icon_ref", sa.String(256), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_emotion_log_user_date"),
    )
    op.create_index("ix_emotion_logs_user_id", "emotion_logs", ["user_id"])
    op.create_index("ix_emotion_logs_date", "emotion_logs", ["date"])


def downgrade() -> None:
    op.drop_index("ix_emotion_logs_date", table_name="emotion_logs")
    op.drop_index("ix_emotion_logs_user_id", table_name="emotion_logs")
    op.drop_table("emotion_logs")
