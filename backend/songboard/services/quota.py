"""
Submission quota windows.

Decides whether a withdrawn submission should hand its quota slot back to the
requester. The decision is advisory: nothing here credits a counter, callers
report the flag and an external quota system acts on it.

Period selection rule:
    - daily limit > 0                      -> DAILY window
    - daily limit == 0 and weekly limit > 0 -> WEEKLY window
    - both 0                                -> no window, never refundable

The daily limit takes precedence when both limits are configured. This
mirrors how the submission flow enforces limits today and is not separately
configurable.
"""
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from functools import lru_cache
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from songboard.models.system_settings import SystemSettings

load_dotenv()

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "").strip()
SYSTEM_ZONEINFO = "/etc/localtime"

DAY = timedelta(hours=24)
WEEK = timedelta(days=7)


class QuotaPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class QuotaLimits:
    daily: int = 0
    weekly: int = 0

    @classmethod
    def from_settings(cls, settings: Optional[SystemSettings]) -> "QuotaLimits":
        """Build limits from the settings row; a missing row or null field counts as 0."""
        if settings is None:
            return cls()
        return cls(
            daily=settings.daily_submission_limit or 0,
            weekly=settings.weekly_submission_limit or 0,
        )


@lru_cache(maxsize=1)
def resolve_local_zone() -> Optional[tzinfo]:
    """Zone with full DST rules: APP_TIMEZONE, else the system zone file, else None."""
    if APP_TIMEZONE:
        return ZoneInfo(APP_TIMEZONE)
    try:
        with open(SYSTEM_ZONEINFO, "rb") as fh:
            return ZoneInfo.from_file(fh, key="localtime")
    except (OSError, ValueError):
        return None


def local_now() -> datetime:
    """Current time as an aware datetime in the local zone."""
    zone = resolve_local_zone()
    if zone is None:
        # Fixed offset only; windows on a DST change day may be off by the shift
        return datetime.now().astimezone()
    return datetime.now(zone)


def resolve_quota_period(limits: QuotaLimits) -> Optional[QuotaPeriod]:
    if limits.daily > 0:
        return QuotaPeriod.DAILY
    if limits.weekly > 0:
        return QuotaPeriod.WEEKLY
    return None


def day_window(now: datetime) -> Tuple[datetime, datetime]:
    """[local midnight, +24h) around now."""
    start = start_of_day(now)
    return start, _add_elapsed(start, DAY)


def week_window(now: datetime) -> Tuple[datetime, datetime]:
    """[Monday 00:00 local, +7 days) around now. Sunday belongs to the week that started 6 days earlier."""
    monday = now - timedelta(days=now.weekday())
    start = start_of_day(monday)
    return start, _add_elapsed(start, WEEK)


def start_of_day(value: datetime) -> datetime:
    """Local midnight of value's date; a midnight skipped by DST becomes the first instant of the day."""
    midnight = value.replace(hour=0, minute=0, second=0, microsecond=0, fold=0)
    return midnight.astimezone(timezone.utc).astimezone(value.tzinfo)


def quota_window(period: QuotaPeriod, now: datetime) -> Tuple[datetime, datetime]:
    if period is QuotaPeriod.DAILY:
        return day_window(now)
    return week_window(now)


def is_quota_refundable(created_at: datetime, limits: QuotaLimits, now: datetime) -> bool:
    """True when the submission was made inside the current limit period."""
    period = resolve_quota_period(limits)
    if period is None:
        return False

    start, end = quota_window(period, now)
    created = as_utc(created_at)
    return as_utc(start) <= created < as_utc(end)


def as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _add_elapsed(start: datetime, delta: timedelta) -> datetime:
    # Elapsed-time addition, so a DST change inside the window does not shift the end
    return (as_utc(start) + delta).astimezone(start.tzinfo)
