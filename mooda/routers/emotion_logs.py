"""
Emotion logs router (read side of the daily summary).

GET /emotion-logs?user_id=&year=&month=  : One month of logs, by date
GET /emotion-logs/{user_id}/{date}       : A single day's log
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mooda.core.errors import EmotionLogNotFoundError
from mooda.db.base import get_db
from mooda.schemas.common import NOT_FOUND
from mooda.schemas.emotion_log import EmotionLogListResponse, EmotionLogResponse
from mooda.services.emotion_log_repository import EmotionLogRepository

router = APIRouter(prefix="/emotion-logs", tags=["emotion-logs"], responses=NOT_FOUND)


@router.get("", response_model=EmotionLogListResponse)
def list_emotion_logs(
    user_id: str = Query(...),
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
) -> EmotionLogListResponse:
    rows = EmotionLogRepository(db).list_logs_for_month(user_id, year, month)
    return EmotionLogListResponse(
        user_id=user_id,
        year=year,
        month=month,
        items=[EmotionLogResponse.model_validate(r) for r in rows],
    )


@router.get("/{user_id}/{day}", response_model=EmotionLogResponse)
def get_emotion_log(
    user_id: str,
    day: date,
    db: Session = Depends(get_db),
) -> EmotionLogResponse:
    row = EmotionLogRepository(db).get_log_for_day(user_id, day)
    if row is None:
        raise EmotionLogNotFoundError(user_id, day)
    return EmotionLogResponse.model_validate(row)
