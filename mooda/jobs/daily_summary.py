"""
Run the daily emotion summary once from the command line.

    python -m mooda.jobs.daily_summary            # yesterday (reference tz)
    python -m mooda.jobs.daily_summary --today    # today, for manual checks

Exit code 0 when the pass completed (even with per-user failures),
1 when the run was aborted.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from mooda.core.errors import UserFetchError
from mooda.core.logging import configure_logging
from mooda.core.timeutil import RunMode
from mooda.services.daily_summary import run_daily_summary

logger = logging.getLogger("mooda.jobs.daily_summary")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Summarize each user's day into an emotion log.")
    parser.add_argument("--today", action="store_true", help="analyse today instead of yesterday")
    args = parser.parse_args(argv)

    configure_logging()
    mode = RunMode.today if args.today else RunMode.yesterday
    try:
        report = run_daily_summary(mode)
    except UserFetchError as exc:
        logger.error("Daily emotion analysis aborted: %s", exc.details.get("reason"))
        return 1

    logger.info(
        "Daily emotion analysis finished (%s): processed=%d skipped=%d failed=%d",
        report.target_day, report.processed, report.skipped, report.failed,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
