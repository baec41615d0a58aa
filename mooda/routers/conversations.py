"""
Conversations router.

GET /conversations/{user_id}/dates   : Days on which the user chatted
GET /conversations/{user_id}/{date}  : Messages of one day, oldest first
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mooda.db.base import get_db
from mooda.schemas.conversation import (
    ConversationDatesResponse,
    ConversationDayResponse,
    MessageResponse,
)
from mooda.services.conversation_store import ConversationStore

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("/{user_id}/dates", response_model=ConversationDatesResponse)
def conversation_dates(
    user_id: str,
    personality_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
) -> ConversationDatesResponse:
    dates = ConversationStore(db).get_conversation_dates(user_id, personality_id)
    return ConversationDatesResponse(user_id=user_id, dates=dates)


@router.get("/{user_id}/{day}", response_model=ConversationDayResponse)
def conversation_day(
    user_id: str,
    day: date,
    personality_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
) -> ConversationDayResponse:
    messages = ConversationStore(db).get_conversations_for_day(user_id, day, personality_id)
    return ConversationDayResponse(
        user_id=user_id,
        date=day,
        messages=[MessageResponse.model_validate(m) for m in messages],
    )
