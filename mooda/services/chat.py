"""
One chat turn: store the user's message, ask the LLM for a reply in the
selected personality's voice, store the reply.

The reply never fails because of the LLM: any `LLMError` (or a missing API
key) yields a short fixed reply instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mooda.core.errors import ChatGenerationError
from mooda.core.timeutil import local_day, utcnow
from mooda.models.conversation import ConversationMessage, MessageRole
from mooda.services.conversation_store import ConversationStore
from mooda.services.llm_client import LLMError, TextCompletionClient
from mooda.services.personalities import Personality, resolve_personality
from mooda.services.users import get_user

logger = logging.getLogger(__name__)

REPLY_MAX_CHARS = 150
REPLY_MIN_CUT = 50
HISTORY_MAX_MESSAGES = 20
SENTENCE_ENDINGS = ".!?…\n"


@dataclass
class ChatTurn:
    personality: Personality
    user_message: ConversationMessage
    ai_message: ConversationMessage
    used_fallback: bool


def fallback_reply(message: str) -> str:
    return f"음, {message[:120]} 라고 말해준 거지? 내가 곁에서 계속 들어줄게."


def trim_reply(text: str, limit: int = REPLY_MAX_CHARS) -> str:
    """
    Cap a reply at `limit` characters, cutting after the last sentence ending
    when one falls past REPLY_MIN_CUT.
    """
    text = text.strip()
    if len(text) <= limit:
        return text
    head = text[:limit]
    cut = max(head.rfind(ch) for ch in SENTENCE_ENDINGS)
    if cut >= REPLY_MIN_CUT:
        return head[: cut + 1].strip()
    return head.strip()


def build_chat_prompt(
    personality: Personality,
    history: list[ConversationMessage],
    message: str,
) -> str:
    lines = []
    for item in history[-HISTORY_MAX_MESSAGES:]:
        speaker = "사용자" if item.role == MessageRole.user else personality.name
        lines.append(f"{speaker}: {item.content}")
    transcript = "\n".join(lines) if lines else "(첫 대화)"
    return (
        f"{personality.system_prompt}\n\n"
        f"오늘의 대화 기록:\n{transcript}\n\n"
        f"사용자: {message}\n"
        f"{personality.name}:"
    )


class ChatService:

    def __init__(
        self,
        db: Session,
        llm_client: Optional[TextCompletionClient] = None,
        store: Optional[ConversationStore] = None,
    ):
        self.db = db
        self.llm_client = llm_client
        self.store = store or ConversationStore(db)

    def _generate(self, prompt: str, message: str) -> tuple[str, bool]:
        if self.llm_client is None:
            return fallback_reply(message), True
        try:
            reply = trim_reply(self.llm_client.complete(prompt))
        except LLMError as exc:
            logger.warning("Chat LLM call failed, using fallback reply: %s", exc)
            return fallback_reply(message), True
        if not reply:
            return fallback_reply(message), True
        return reply, False

    def send_message(
        self,
        user_id: str,
        message: str,
        personality_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ChatTurn:
        user = get_user(self.db, user_id)
        personality = resolve_personality(
            self.db, personality_id or user.selected_personality_id, user_id
        )
        explicit_now = now is not None
        now = now or utcnow()

        history = self.store.get_conversations_for_day(
            user_id, local_day(now), personality.id
        )
        try:
            user_msg = self.store.append_message(
                user_id, MessageRole.user, message,
                personality_id=personality.id, created_at=now,
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to store chat message for user %s", user_id)
            raise ChatGenerationError("Could not store the message.") from exc

        reply, used_fallback = self._generate(
            build_chat_prompt(personality, history, message), message
        )

        # the reply must sort after the message it answers
        reply_at = now + timedelta(milliseconds=1) if explicit_now else utcnow()
        try:
            ai_msg = self.store.append_message(
                user_id, MessageRole.ai, reply,
                personality_id=personality.id, created_at=reply_at,
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to store AI reply for user %s", user_id)
            raise ChatGenerationError("Could not store the reply.") from exc

        return ChatTurn(
            personality=personality,
            user_message=user_msg,
            ai_message=ai_msg,
            used_fallback=used_fallback,
        )
