"""
Emotion log schemas.

GET /emotion-logs?user_id=&year=&month=   → EmotionLogListResponse
GET /emotion-logs/{user_id}/{date}        → EmotionLogResponse
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mooda.models.emotion_log import Emotion


class EmotionLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    date: dt.date
    emotion: Emotion
    summary: str = Field(description='Display string, e.g. "행복 87%".')
    short_summary: Optional[str] = Field(description="One-sentence recap of the day.")
    character_icon_ref: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class EmotionLogListResponse(BaseModel):
    user_id: str
    year: int
    month: int
    items: list[EmotionLogResponse]
