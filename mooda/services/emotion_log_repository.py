"""
Emotion log repository : one row per (user_id, date), written by upsert.

Idempotency
-----------
`upsert_daily_log` issues a single `INSERT ... ON CONFLICT (user_id, date)
DO UPDATE`. Overlapping runs (scheduled + manual) therefore converge on one
row; an existing row keeps its id and gets the newer emotion/summary.

Display fields
--------------
character_icon_ref  : fixed total mapping emotion -> icon path
summary             : "<label> NN%" where NN is cosmetic noise in 80..95,
                      not a confidence score
"""
from __future__ import annotations

import calendar
import random
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from mooda.models.emotion_log import Emotion, EmotionLog


EMOTION_ICONS: dict[Emotion, str] = {
    Emotion.VeryHappy: "/images/emotion/veryHappy.svg",
    Emotion.Happy: "/images/emotion/happy.svg",
    Emotion.Neutral: "/images/emotion/soso.svg",
    Emotion.Sad: "/images/emotion/sad.svg",
    Emotion.VerySad: "/images/emotion/verySad.svg",
    Emotion.Angry: "/images/emotion/angry.svg",
}

EMOTION_LABELS: dict[Emotion, str] = {
    Emotion.VeryHappy: "매우 행복",
    Emotion.Happy: "행복",
    Emotion.Neutral: "평온",
    Emotion.Sad: "슬픔",
    Emotion.VerySad: "매우 슬픔",
    Emotion.Angry: "화남",
}

PERCENT_MIN = 80
PERCENT_MAX = 95


def emotion_to_icon(emotion: Emotion | str) -> str:
    return EMOTION_ICONS.get(Emotion.normalize(emotion), EMOTION_ICONS[Emotion.Neutral])


def emotion_to_percentage(emotion: Emotion | str, rng: Optional[random.Random] = None) -> str:
    """Label plus a decorative percentage (UI flourish only)."""
    label = EMOTION_LABELS.get(Emotion.normalize(emotion), EMOTION_LABELS[Emotion.Neutral])
    percentage = (rng or random).randint(PERCENT_MIN, PERCENT_MAX)
    return f"{label} {percentage}%"


class EmotionLogRepository:

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(EmotionLog)
        if dialect == "sqlite":
            return sqlite.insert(EmotionLog)
        raise NotImplementedError(f"No upsert support for dialect {dialect!r}")

    def upsert_daily_log(
        self,
        user_id: str,
        day: date,
        summary: str,
        emotion: Emotion | str,
        commit: bool = True,
    ) -> EmotionLog:
        """Create or refresh the log for (user_id, day). Returns the persisted row."""
        normalized = Emotion.normalize(emotion)
        values = {
            "emotion": normalized.value,
            "summary": emotion_to_percentage(normalized, self.rng),
            "short_summary": summary,
            "character_icon_ref": emotion_to_icon(normalized),
        }
        stmt = self._insert().values(
            id=str(uuid.uuid4()),
            user_id=user_id,
            date=day,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={**values, "updated_at": func.now()},
        )
        self.db.execute(stmt)
        if commit:
            self.db.commit()
        else:
            self.db.flush()

        log = self.get_log_for_day(user_id, day)
        self.db.refresh(log)
        return log

    def get_log_for_day(self, user_id: str, day: date) -> Optional[EmotionLog]:
        return (
            self.db.query(EmotionLog)
            .filter(EmotionLog.user_id == user_id, EmotionLog.date == day)
            .first()
        )

    def list_logs_for_month(self, user_id: str, year: int, month: int) -> list[EmotionLog]:
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        return (
            self.db.query(EmotionLog)
            .filter(
                EmotionLog.user_id == user_id,
                EmotionLog.date >= first,
                EmotionLog.date <= last,
            )
            .order_by(EmotionLog.date.asc())
            .all()
        )
