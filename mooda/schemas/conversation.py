"""
Conversation schemas.

GET /conversations/{user_id}/dates   → ConversationDatesResponse
GET /conversations/{user_id}/{date}  → ConversationDayResponse
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mooda.models.conversation import MessageRole


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: MessageRole
    content: str
    personality_id: Optional[str] = None
    created_at: dt.datetime


class ConversationDayResponse(BaseModel):
    user_id: str
    date: dt.date
    messages: list[MessageResponse]


class ConversationDatesResponse(BaseModel):
    user_id: str
    dates: list[dt.date]
