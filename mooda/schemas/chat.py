"""
POST /chat → ChatRequest → ChatResponse
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from mooda.schemas.conversation import MessageResponse


class ChatRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    message: str = Field(min_length=1, max_length=2000)
    personality_id: Optional[str] = Field(
        default=None,
        description="Defaults to the user's selected personality.",
    )


class ChatResponse(BaseModel):
    personality_id: str
    user_message: MessageResponse
    ai_message: MessageResponse
    used_fallback: bool
