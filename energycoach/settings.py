# energycoach/settings.py

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .timeutil import MORNING_EXERCISE_LEAD_MINUTES, add_offset

logger = logging.getLogger(__name__)

QUOTE_PREFS = ("bruce", "alan", "both")


# ---------- Exercise mode (tagged variant) ----------
@dataclass(frozen=True)
class MorningExercise:
    """Exercise half an hour before breakfast."""
    mode = "morning"

    def derive(self, breakfast, dinner):
        return add_offset(breakfast, -MORNING_EXERCISE_LEAD_MINUTES)


@dataclass(frozen=True)
class EveningExercise:
    """Exercise a fixed number of minutes after dinner."""
    offset_minutes: int = 60
    mode = "evening"

    def derive(self, breakfast, dinner):
        return add_offset(dinner, self.offset_minutes)


@dataclass(frozen=True)
class CustomExercise:
    """No derived time; the user sets exercise by hand."""
    mode = "custom"

    def derive(self, breakfast, dinner):
        return None


ExercisePlan = Union[MorningExercise, EveningExercise, CustomExercise]


@dataclass(frozen=True)
class NotifyToggles:
    meals: bool = True
    exercise: bool = True
    quotes: bool = True
    sound: bool = True


@dataclass(frozen=True)
class Settings:
    breakfast_offset_minutes: int = 60
    meal_interval_hours: float = 4
    exercise: ExercisePlan = field(default_factory=EveningExercise)
    quote_pref: str = "both"
    notify: NotifyToggles = field(default_factory=NotifyToggles)
    booking_url: Optional[str] = None

    def with_exercise(self, mode: str, offset_minutes: Optional[int] = None) -> "Settings":
        return replace(self, exercise=exercise_plan(mode, offset_minutes))


DEFAULT_SETTINGS = Settings()


def exercise_plan(mode: str, offset_minutes: Optional[int] = None) -> ExercisePlan:
    if mode == "morning":
        return MorningExercise()
    if mode == "evening":
        if offset_minutes is None:
            return EveningExercise()
        return EveningExercise(offset_minutes=int(offset_minutes))
    if mode == "custom":
        return CustomExercise()
    raise ValueError(f"Unknown exercise mode: {mode!r}")


# ---------- (De)serialisation ----------
def _pick(raw: Dict[str, Any], *keys: str):
    """First present key wins (camelCase from older state files, snake_case otherwise)."""
    for k in keys:
        if k in raw:
            return raw[k]
    return None


def _as_number(value, default, cast=int, minimum=None):
    # Accept ints or numeric strings; fall back on bad input
    if value is None:
        return default
    try:
        n = cast(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid setting value %r, using %r", value, default)
        return default
    if minimum is not None and n < minimum:
        logger.warning("Setting value %r below %r, using %r", value, minimum, default)
        return default
    return n


def settings_from_dict(raw: Optional[Dict[str, Any]], base: Settings = DEFAULT_SETTINGS) -> Settings:
    """
    Build Settings from a loosely-typed dict, keeping ``base`` for anything
    missing or invalid. Unknown keys are ignored.
    """
    if not isinstance(raw, dict):
        return base

    breakfast = _as_number(_pick(raw, "breakfast_offset_minutes", "breakfastOffsetMins"),
                           base.breakfast_offset_minutes)
    interval = _as_number(_pick(raw, "meal_interval_hours", "mealIntervalHours"),
                          base.meal_interval_hours, cast=float, minimum=0)
    if interval == int(interval):
        interval = int(interval)

    exercise = base.exercise
    mode = _pick(raw, "exercise_mode", "exerciseDefault")
    offset = _pick(raw, "exercise_offset_minutes", "exerciseOffsetMins")
    if mode is not None or offset is not None:
        mode = mode or exercise.mode
        default_offset = exercise.offset_minutes if isinstance(exercise, EveningExercise) else 60
        try:
            exercise = exercise_plan(mode, _as_number(offset, default_offset))
        except ValueError as e:
            logger.warning("%s; keeping %s", e, exercise.mode)

    quote_pref = _pick(raw, "quote_pref", "quotePref") or base.quote_pref
    if quote_pref not in QUOTE_PREFS:
        logger.warning("Unknown quote preference %r, using %r", quote_pref, base.quote_pref)
        quote_pref = base.quote_pref

    notify = base.notify
    raw_notify = raw.get("notify")
    if isinstance(raw_notify, dict):
        notify = NotifyToggles(
            meals=bool(raw_notify.get("meals", notify.meals)),
            exercise=bool(raw_notify.get("exercise", notify.exercise)),
            quotes=bool(raw_notify.get("quotes", notify.quotes)),
            sound=bool(raw_notify.get("sound", notify.sound)),
        )

    booking_url = _pick(raw, "booking_url", "bookingUrl") or base.booking_url

    return Settings(
        breakfast_offset_minutes=breakfast,
        meal_interval_hours=interval,
        exercise=exercise,
        quote_pref=quote_pref,
        notify=notify,
        booking_url=booking_url,
    )


def settings_to_dict(settings: Settings) -> Dict[str, Any]:
    out = {
        "breakfast_offset_minutes": settings.breakfast_offset_minutes,
        "meal_interval_hours": settings.meal_interval_hours,
        "exercise_mode": settings.exercise.mode,
        "quote_pref": settings.quote_pref,
        "notify": {
            "meals": settings.notify.meals,
            "exercise": settings.notify.exercise,
            "quotes": settings.notify.quotes,
            "sound": settings.notify.sound,
        },
    }
    if isinstance(settings.exercise, EveningExercise):
        out["exercise_offset_minutes"] = settings.exercise.offset_minutes
    if settings.booking_url:
        out["booking_url"] = settings.booking_url
    return out


# ---------- config.json ----------
def config_path(default_dir: Optional[Path] = None) -> Path:
    override = os.environ.get("ENERGYCOACH_CONFIG")
    if override:
        return Path(override)
    return (default_dir or Path.cwd()) / "config.json"


def load_config(path: Path, base: Settings = DEFAULT_SETTINGS) -> Settings:
    """
    Overlay config.json on top of ``base``.
    A missing file just keeps the defaults; a broken one is logged and ignored.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            cfg = json.load(f)
    except FileNotFoundError:
        return base
    except (OSError, ValueError) as e:
        logger.warning("Failed to load %s: %s", path, e)
        return base
    return settings_from_dict(cfg, base)
