"""
Once-a-day trigger for the daily emotion summary.

A daemon thread sleeps until the next SCHEDULER_HOUR:SCHEDULER_MINUTE in the
reference timezone, then calls `run_daily_summary(RunMode.yesterday)`: the
same entry point the admin endpoint and the CLI use.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Optional

from mooda.core.config import settings
from mooda.core.errors import UserFetchError
from mooda.core.timeutil import RunMode, next_run_at, utcnow
from mooda.services.daily_summary import RunReport, run_daily_summary

logger = logging.getLogger(__name__)


class DailySummaryScheduler:

    def __init__(
        self,
        hour: int = 0,
        minute: int = 5,
        job: Callable[..., RunReport] = run_daily_summary,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.hour = hour
        self.minute = minute
        self.job = job
        self.clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def seconds_until_next_run(self) -> float:
        now = self.clock()
        return max((next_run_at(self.hour, self.minute, now) - now).total_seconds(), 0.0)

    def run_once(self) -> Optional[RunReport]:
        """Fire the job for yesterday; errors are logged, never raised into the loop."""
        try:
            return self.job(RunMode.yesterday)
        except UserFetchError as exc:
            logger.error("Scheduled daily summary aborted: %s", exc.details.get("reason"))
        except Exception:
            logger.exception("Scheduled daily summary crashed")
        return None

    def _loop(self) -> None:
        while not self._stop.is_set():
            wait = self.seconds_until_next_run()
            logger.info("Next daily emotion summary in %.0f s", wait)
            if self._stop.wait(wait):
                break
            self.run_once()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="daily-summary-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(
            "Daily summary scheduler started (%02d:%02d, UTC%+d)",
            self.hour, self.minute, settings.REFERENCE_UTC_OFFSET_HOURS,
        )

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
