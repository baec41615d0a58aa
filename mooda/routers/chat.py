"""
Chat router.

POST /chat  : Send one message, get the personality's reply
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mooda.db.base import get_db
from mooda.schemas.common import NOT_FOUND
from mooda.schemas.chat import ChatRequest, ChatResponse
from mooda.schemas.conversation import MessageResponse
from mooda.services.chat import ChatService
from mooda.services.llm_client import TextCompletionClient, get_llm_client

router = APIRouter(tags=["chat"], responses=NOT_FOUND)


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    db: Session = Depends(get_db),
    llm_client: Optional[TextCompletionClient] = Depends(get_llm_client),
) -> ChatResponse:
    turn = ChatService(db, llm_client).send_message(
        payload.user_id, payload.message, payload.personality_id
    )
    return ChatResponse(
        personality_id=turn.personality.id,
        user_message=MessageResponse.model_validate(turn.user_message),
        ai_message=MessageResponse.model_validate(turn.ai_message),
        used_fallback=turn.used_fallback,
    )
