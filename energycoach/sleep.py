# energycoach/sleep.py

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from .timeutil import APP_TZ
from .timeutil import now as app_now

SLEEP_KEY_PREFIX = "ec_sleep_"
MAX_SLEEP_MINUTES = 16 * 60


@dataclass
class SleepEntry:
    """One night, bucketed by the day you woke up."""
    day: date
    bed_at: Optional[datetime] = None
    wake_at: Optional[datetime] = None
    quality: Optional[int] = 7  # 1..10
    dream: str = ""
    tz_offset_minutes: Optional[int] = None


def default_sleep(day: date) -> SleepEntry:
    offset = app_now().utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    return SleepEntry(day=day, tz_offset_minutes=minutes)


def minutes_slept(entry: SleepEntry) -> Optional[int]:
    """Minutes between bed and wake; a wake time at or before bedtime is taken as next day."""
    if not entry.bed_at or not entry.wake_at:
        return None
    end = entry.wake_at
    if end <= entry.bed_at:
        end += timedelta(days=1)
    mins = round((end - entry.bed_at).total_seconds() / 60)
    if mins <= 0 or mins > MAX_SLEEP_MINUTES:
        return None
    return mins


def format_duration(mins: Optional[int]) -> str:
    if mins is None:
        return "—"
    h, m = divmod(mins, 60)
    return f"{h}h {m:02d}m"


def wake_day(wake_at: Optional[datetime] = None) -> date:
    return (wake_at or app_now()).astimezone(APP_TZ).date()


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def sleep_to_dict(entry: SleepEntry) -> Dict[str, Any]:
    return {
        "day": entry.day.isoformat(),
        "bed_at": _iso(entry.bed_at),
        "wake_at": _iso(entry.wake_at),
        "quality": entry.quality,
        "dream": entry.dream,
        "tz_offset_minutes": entry.tz_offset_minutes,
    }


def sleep_from_dict(raw: Dict[str, Any]) -> SleepEntry:
    return SleepEntry(
        day=date.fromisoformat(raw["day"]),
        bed_at=datetime.fromisoformat(raw["bed_at"]) if raw.get("bed_at") else None,
        wake_at=datetime.fromisoformat(raw["wake_at"]) if raw.get("wake_at") else None,
        quality=raw.get("quality"),
        dream=raw.get("dream") or "",
        tz_offset_minutes=raw.get("tz_offset_minutes"),
    )


class SleepLog:
    """Per-day sleep entries in the keyed store."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def key(day: date) -> str:
        return SLEEP_KEY_PREFIX + day.isoformat()

    def load(self, day: date) -> SleepEntry:
        raw = self.store.get(self.key(day))
        if not isinstance(raw, dict):
            return default_sleep(day)
        try:
            return sleep_from_dict(raw)
        except (KeyError, TypeError, ValueError):
            return default_sleep(day)

    def save(self, entry: SleepEntry) -> bool:
        return self.store.set(self.key(entry.day), sleep_to_dict(entry))
