"""
Daily summary orchestrator.

One pass over every user for a single target day:

    users (ordered by id)
      └─ per user:  fetch day's messages → skip if none → classify → upsert log

Fault isolation
---------------
Any exception inside the per-user block is logged with the user id, the
session is rolled back, the user is counted as failed, and the loop moves on.
Only a failure to load the user list aborts the run (UserFetchError).

There is no retry inside a run. A user that failed today is simply picked up
again by the next scheduled or manual run for that day.

Public API
----------
DailySummaryOrchestrator(db, store, classifier, repository).run(mode, now) -> RunReport
run_daily_summary(mode, now, session_factory, llm_client)                 -> RunReport
"""
from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mooda.core.errors import UserFetchError
from mooda.core.timeutil import RunMode, target_day
from mooda.db.base import SessionLocal
from mooda.models.user import User
from mooda.services.conversation_store import ConversationStore
from mooda.services.emotion_classifier import EmotionClassifier
from mooda.services.emotion_log_repository import EmotionLogRepository
from mooda.services.llm_client import GeminiClient, TextCompletionClient

logger = logging.getLogger(__name__)

# Default for `run_daily_summary(llm_client=...)`: build the client from settings.
FROM_SETTINGS = object()


class RunStatus(str, enum.Enum):
    not_started = "not_started"
    running = "running"
    completed = "completed"
    completed_with_failures = "completed_with_failures"


@dataclass
class RunReport:
    """Aggregate outcome of one orchestrator pass."""
    target_day: date
    mode: RunMode
    status: RunStatus = RunStatus.not_started
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    failed_user_ids: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_users(self) -> int:
        return self.processed + self.skipped + self.failed


class DailySummaryOrchestrator:

    def __init__(
        self,
        db: Session,
        store: ConversationStore,
        classifier: EmotionClassifier,
        repository: EmotionLogRepository,
    ):
        self.db = db
        self.store = store
        self.classifier = classifier
        self.repository = repository

    def _load_users(self) -> list[User]:
        try:
            return self.db.query(User).order_by(User.id.asc()).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise UserFetchError(str(exc)) from exc

    def _process_user(self, user_id: str, day: date) -> bool:
        """Return True if a log was written, False if the day was empty."""
        messages = self.store.get_conversations_for_day(user_id, day)
        if not messages:
            return False

        result = self.classifier.classify(messages)
        self.repository.upsert_daily_log(
            user_id=user_id,
            day=day,
            summary=result.summary,
            emotion=result.emotion,
        )
        logger.info(
            "Emotion log saved for user %s on %s: %s (%s)",
            user_id, day, result.emotion.value, result.source,
        )
        return True

    def run(
        self,
        mode: RunMode = RunMode.yesterday,
        now: Optional[datetime] = None,
    ) -> RunReport:
        mode = RunMode(mode)
        report = RunReport(target_day=target_day(mode, now), mode=mode)
        started = time.monotonic()

        users = self._load_users()
        # Plain ids so a rollback cannot expire what the loop iterates over.
        user_ids = [u.id for u in users]

        report.status = RunStatus.running
        logger.info(
            "Daily emotion summary for %s (%s mode): %d users",
            report.target_day, mode.value, len(user_ids),
        )

        for user_id in user_ids:
            try:
                if self._process_user(user_id, report.target_day):
                    report.processed += 1
                else:
                    report.skipped += 1
            except Exception:
                logger.exception("Daily summary failed for user %s", user_id)
                self.db.rollback()
                report.failed += 1
                report.failed_user_ids.append(user_id)

        report.status = (
            RunStatus.completed_with_failures if report.failed else RunStatus.completed
        )
        report.duration_seconds = round(time.monotonic() - started, 3)
        logger.info(
            "Daily emotion summary done for %s: processed=%d skipped=%d failed=%d",
            report.target_day, report.processed, report.skipped, report.failed,
        )
        return report


# ---------------------------------------------------------------------------
# Public : single entry point shared by scheduler, admin endpoint and CLI
# ---------------------------------------------------------------------------

def run_daily_summary(
    mode: RunMode = RunMode.yesterday,
    now: Optional[datetime] = None,
    session_factory: Optional[Callable[[], Session]] = None,
    llm_client: Union[TextCompletionClient, None, object] = FROM_SETTINGS,
) -> RunReport:
    """
    Build the collaborators for one run and execute it in its own session.
    `llm_client` defaults to the configured Gemini client; an explicit None
    runs only the keyword tier.
    """
    if session_factory is None:
        session_factory = SessionLocal
    if llm_client is FROM_SETTINGS:
        llm_client = GeminiClient.from_settings()

    db = session_factory()
    try:
        orchestrator = DailySummaryOrchestrator(
            db=db,
            store=ConversationStore(db, raise_errors=True),
            classifier=EmotionClassifier(llm_client),
            repository=EmotionLogRepository(db),
        )
        return orchestrator.run(mode=mode, now=now)
    finally:
        db.close()
