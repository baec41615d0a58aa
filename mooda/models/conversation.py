"""
ConversationMessage : one line of a chat between a user and an AI personality.

Append-only. `created_at` is always written in UTC by the conversation store so
that range queries computed by `mooda.core.timeutil.day_bounds_utc` line up on
every backend (SQLite stores DateTime values without an offset).
"""
import enum
import uuid
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from mooda.core.timeutil import utcnow
from mooda.db.base import Base


class MessageRole(str, enum.Enum):
    user = "user"
    ai = "ai"


class ConversationMessage(Base):
    __tablename__ = "conversation_messages"
    __table_args__ = (
        Index("ix_conversation_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(
        Enum(MessageRole, name="message_role_enum"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    personality_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
