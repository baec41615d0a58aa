"""
Day-boundary utility.

Every component that needs "the day" goes through this module. A calendar day
is always interpreted in one fixed-offset reference timezone (KST, UTC+9 by
default), independent of the server's locale:

    day D  ==  [D 00:00:00+09:00, D+1 00:00:00+09:00)

Timestamps are persisted in UTC; `day_bounds_utc` converts the half-open
interval above into UTC bounds suitable for a `created_at` range query.
"""
from __future__ import annotations

import enum
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from mooda.core.config import settings


class RunMode(str, enum.Enum):
    """Which day a daily-summary run targets."""
    yesterday = "yesterday"
    today = "today"


def reference_tz(offset_hours: Optional[int] = None) -> timezone:
    hours = settings.REFERENCE_UTC_OFFSET_HOURS if offset_hours is None else offset_hours
    return timezone(timedelta(hours=hours))


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_utc(ts: datetime) -> datetime:
    """Return an aware UTC datetime. Naive input is assumed to already be UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def local_day(ts: datetime, tz: Optional[timezone] = None) -> date:
    """Calendar day of `ts` in the reference timezone."""
    return to_utc(ts).astimezone(tz or reference_tz()).date()


def today(now: Optional[datetime] = None, tz: Optional[timezone] = None) -> date:
    return local_day(now or utcnow(), tz)


def day_bounds_utc(day: date, tz: Optional[timezone] = None) -> tuple[datetime, datetime]:
    """Half-open [start, end) of `day` in the reference timezone, expressed in UTC."""
    zone = tz or reference_tz()
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def target_day(
    mode: RunMode = RunMode.yesterday,
    now: Optional[datetime] = None,
    tz: Optional[timezone] = None,
) -> date:
    """The day a daily-summary run should analyse."""
    current = today(now, tz)
    if RunMode(mode) is RunMode.today:
        return current
    return current - timedelta(days=1)


def next_run_at(
    hour: int,
    minute: int,
    now: Optional[datetime] = None,
    tz: Optional[timezone] = None,
) -> datetime:
    """Next wall-clock `hour:minute` in the reference timezone, strictly after `now`."""
    zone = tz or reference_tz()
    local_now = to_utc(now or utcnow()).astimezone(zone)
    candidate = local_now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= local_now:
        candidate += timedelta(days=1)
    return candidate
