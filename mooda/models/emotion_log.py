"""
EmotionLog : the derived emotion record of one user for one calendar day.

One row per (user_id, date); the unique constraint backs the upsert in
`mooda.services.emotion_log_repository`. `date` is a calendar day in the
reference timezone with no time component.

Column usage:
  summary            : cosmetic "<label> NN%" string shown on the calendar
  short_summary      : the diary sentence produced by the classifier
  character_icon_ref : icon path derived from `emotion`
"""
import enum
import uuid
import datetime as dt
from sqlalchemy import String, Text, DateTime, Date, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from mooda.db.base import Base


class Emotion(str, enum.Enum):
    VeryHappy = "VeryHappy"
    Happy = "Happy"
    Neutral = "Neutral"
    Sad = "Sad"
    VerySad = "VerySad"
    Angry = "Angry"

    @classmethod
    def normalize(cls, value: object) -> "Emotion":
        """Coerce any label (legacy spelling, any case) into the closed set; unknown -> Neutral."""
        if isinstance(value, cls):
            return value
        key = "".join(ch for ch in str(value or "") if ch.isalnum()).lower()
        return _EMOTION_ALIASES.get(key, cls.Neutral)


_EMOTION_ALIASES: dict[str, Emotion] = {e.value.lower(): e for e in Emotion}
_EMOTION_ALIASES.update({
    "excited": Emotion.VeryHappy,
    "calm": Emotion.Neutral,
    "soso": Emotion.Neutral,
    "anxious": Emotion.Sad,
    "slightlysad": Emotion.Sad,
})


class EmotionLog(Base):
    __tablename__ = "emotion_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_emotion_log_user_date"),
    )

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    emotion: Mapped[str] = mapped_column(String(16), nullable=False)
    summary: Mapped[str] = mapped_column(String(64), nullable=False)
    short_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    character_icon_ref: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
