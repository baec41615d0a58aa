import uuid
from datetime import datetime
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from mooda.db.base import Base


class CustomPersonality(Base):
    """A user-created AI personality built from four MBTI letters."""

    __tablename__ = "custom_ai_personalities"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: f"custom_{uuid.uuid4().hex}"
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mbti_type: Mapped[str] = mapped_column(String(4), nullable=False)
    system_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
