"""
Conversation store accessor.

Thin wrapper over `conversation_messages`. Day windows always come from
`mooda.core.timeutil.day_bounds_utc`; nothing here computes midnight itself.

Public API
----------
ConversationStore(db, raise_errors=False)
  .get_conversations_for_day(user_id, day, personality_id) -> list[ConversationMessage]
  .get_conversation_dates(user_id, personality_id)          -> list[date]
  .append_message(user_id, role, content, ...)              -> ConversationMessage
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mooda.core.timeutil import day_bounds_utc, local_day, to_utc, utcnow
from mooda.models.conversation import ConversationMessage, MessageRole

logger = logging.getLogger(__name__)


class ConversationStore:

    def __init__(self, db: Session, raise_errors: bool = False):
        self.db = db
        self.raise_errors = raise_errors

    def get_conversations_for_day(
        self,
        user_id: str,
        day: date,
        personality_id: Optional[str] = None,
    ) -> list[ConversationMessage]:
        """
        Messages of `user_id` created within `day` (reference timezone),
        oldest first. Store errors are logged and rolled back, then re-raised
        when `raise_errors` is set, otherwise they yield an empty list.
        """
        start, end = day_bounds_utc(day)
        try:
            q = self.db.query(ConversationMessage).filter(
                ConversationMessage.user_id == user_id,
                ConversationMessage.created_at >= start,
                ConversationMessage.created_at < end,
            )
            if personality_id:
                q = q.filter(ConversationMessage.personality_id == personality_id)
            return q.order_by(
                ConversationMessage.created_at.asc(), ConversationMessage.id.asc()
            ).all()
        except SQLAlchemyError:
            logger.exception("Failed to load conversations for user %s on %s", user_id, day)
            self.db.rollback()
            if self.raise_errors:
                raise
            return []

    def get_conversation_dates(
        self,
        user_id: str,
        personality_id: Optional[str] = None,
    ) -> list[date]:
        """Distinct reference-timezone days on which the user chatted, ascending."""
        q = self.db.query(ConversationMessage.created_at).filter(
            ConversationMessage.user_id == user_id
        )
        if personality_id:
            q = q.filter(ConversationMessage.personality_id == personality_id)
        try:
            rows = q.order_by(ConversationMessage.created_at.asc()).all()
        except SQLAlchemyError:
            logger.exception("Failed to load conversation dates for user %s", user_id)
            self.db.rollback()
            return []
        return sorted({local_day(created_at) for (created_at,) in rows})

    def append_message(
        self,
        user_id: str,
        role: MessageRole | str,
        content: str,
        personality_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> ConversationMessage:
        """Persist one message. `created_at` is normalized to UTC (defaults to now)."""
        message = ConversationMessage(
            user_id=user_id,
            role=MessageRole(role),
            content=content,
            personality_id=personality_id,
            created_at=to_utc(created_at or utcnow()),
        )
        self.db.add(message)
        if commit:
            self.db.commit()
            self.db.refresh(message)
        else:
            self.db.flush()
        return message
