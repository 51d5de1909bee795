# energycoach/timeutil.py

import logging
import math
import os
from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple, Optional
from zoneinfo import ZoneInfo

from tzlocal import get_localzone_name

logger = logging.getLogger(__name__)


def _detect_tz_name() -> str:
    # Env override wins, then the machine's IANA zone, then UTC.
    override = os.environ.get("ENERGYCOACH_TZ")
    if override:
        return override
    try:
        return get_localzone_name() or "UTC"
    except Exception as e:
        logger.warning("Could not detect local timezone, using UTC: %s", e)
        return "UTC"


# Single source of truth for the app's timezone.
TZ_NAME = _detect_tz_name()
APP_TZ = ZoneInfo(TZ_NAME)

NOW_TOLERANCE = timedelta(seconds=30)
MORNING_EXERCISE_LEAD_MINUTES = 30


class Schedule(NamedTuple):
    breakfast: datetime
    lunch: datetime
    dinner: datetime
    exercise: Optional[datetime]


def now() -> datetime:
    return datetime.now(APP_TZ)


def today(at: Optional[datetime] = None) -> date:
    """Calendar day in the app timezone (defaults to the current day)."""
    at = at or now()
    return at.astimezone(APP_TZ).date()


def add_offset(instant: datetime, minutes: float) -> datetime:
    """
    Shift an instant by ``minutes`` of real elapsed time.
    Done in UTC so a DST change in between does not bend the result.
    """
    shifted = instant.astimezone(timezone.utc) + timedelta(minutes=minutes)
    return shifted.astimezone(instant.tzinfo or APP_TZ)


def parse_hhmm(hhmm: str):
    """Split "HH:MM" into (hour, minute); raises ValueError on bad input."""
    try:
        hh, mm = [int(x) for x in hhmm.strip().split(":")]
    except (AttributeError, ValueError):
        raise ValueError(f"Expected HH:MM, got {hhmm!r}")
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise ValueError(f"Time out of range: {hhmm!r}")
    return hh, mm


def clock_time(instant: datetime) -> str:
    return instant.astimezone(APP_TZ).strftime("%H:%M")


def with_clock_time(base: datetime, hhmm: str) -> datetime:
    """Same calendar day as ``base`` (app timezone), wall-clock time ``hhmm``."""
    hh, mm = parse_hhmm(hhmm)
    return base.astimezone(APP_TZ).replace(hour=hh, minute=mm, second=0, microsecond=0)


def countdown_label(target: Optional[datetime], current: Optional[datetime] = None) -> str:
    """Human label for time until target, e.g. "2h 03m", "45m", "now"."""
    if target is None:
        return ""
    current = current or now()
    remaining = target - current
    if remaining <= NOW_TOLERANCE:
        return "now"
    # Round half up to whole minutes
    total_m = math.floor(remaining.total_seconds() / 60 + 0.5)
    h, m = divmod(total_m, 60)
    return f"{h}h {m:02d}m" if h > 0 else f"{m}m"


def compute_schedule(anchor: datetime, settings) -> Schedule:
    """
    Derive the four slot instants from a check-in anchor.

    breakfast = anchor + breakfast offset
    lunch     = breakfast + meal interval
    dinner    = lunch + meal interval
    exercise  = depends on the exercise mode (may be None)
    """
    interval = settings.meal_interval_hours * 60
    breakfast = add_offset(anchor, settings.breakfast_offset_minutes)
    lunch = add_offset(breakfast, interval)
    dinner = add_offset(lunch, interval)
    exercise = settings.exercise.derive(breakfast, dinner)
    return Schedule(breakfast, lunch, dinner, exercise)
