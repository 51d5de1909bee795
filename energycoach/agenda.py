# energycoach/agenda.py

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .content.quotes import Quote
from .providers.base import ContentProvider
from .selector import render, select_deterministic
from .timeutil import add_offset, compute_schedule, today, with_clock_time

logger = logging.getLogger(__name__)


class Slot(Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    EXERCISE = "exercise"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_meal(self) -> bool:
        return self is not Slot.EXERCISE

    @property
    def fallback_body(self) -> str:
        return "Exercise session" if self is Slot.EXERCISE else f"{self.label} time"


MEAL_SLOTS = (Slot.BREAKFAST, Slot.LUNCH, Slot.DINNER)


@dataclass(frozen=True)
class SlotEntry:
    at: Optional[datetime] = None
    note: str = ""


def _empty_slots() -> Dict[Slot, SlotEntry]:
    return {s: SlotEntry() for s in Slot}


@dataclass(frozen=True)
class Agenda:
    day_key: date
    anchor: Optional[datetime] = None
    slots: Dict[Slot, SlotEntry] = field(default_factory=_empty_slots)
    quote: Optional[Quote] = None

    @property
    def checked_in(self) -> bool:
        return self.anchor is not None

    def at(self, slot: Slot) -> Optional[datetime]:
        return self.slots[slot].at

    def note(self, slot: Slot) -> str:
        return self.slots[slot].note


def empty_agenda(day: date) -> Agenda:
    return Agenda(day_key=day)


def _with_slots(agenda: Agenda, **changes: SlotEntry) -> Agenda:
    slots = dict(agenda.slots)
    for name, entry in changes.items():
        slots[Slot(name)] = entry
    return replace(agenda, slots=slots)


def _set_time(entry: SlotEntry, at: Optional[datetime]) -> SlotEntry:
    return replace(entry, at=at)


# ---------- Operations ----------
def check_in(now: datetime, settings, quote: Optional[Quote] = None) -> Agenda:
    """The only way an agenda gets an anchor."""
    schedule = compute_schedule(now, settings)
    slots = {
        Slot.BREAKFAST: SlotEntry(at=schedule.breakfast),
        Slot.LUNCH: SlotEntry(at=schedule.lunch),
        Slot.DINNER: SlotEntry(at=schedule.dinner),
        Slot.EXERCISE: SlotEntry(at=schedule.exercise),
    }
    return Agenda(day_key=today(now), anchor=now, slots=slots, quote=quote)


def edit_slot_time(agenda: Agenda, slot: Slot, hhmm: str, cascade: bool, settings) -> Agenda:
    """
    Move one slot to ``hhmm`` on the anchor's day.

    With ``cascade`` set, a breakfast edit re-derives lunch and dinner and a
    lunch edit re-derives dinner. Dinner and exercise edits never move
    anything else, and no edit ever moves exercise or an earlier meal.
    """
    if agenda.anchor is None:
        logger.debug("Ignoring %s edit before check-in", slot.value)
        return agenda

    at = with_clock_time(agenda.anchor, hhmm)
    interval = settings.meal_interval_hours * 60
    changes = {slot.value: _set_time(agenda.slots[slot], at)}

    if cascade and slot is Slot.BREAKFAST:
        lunch = add_offset(at, interval)
        changes["lunch"] = _set_time(agenda.slots[Slot.LUNCH], lunch)
        changes["dinner"] = _set_time(agenda.slots[Slot.DINNER], add_offset(lunch, interval))
    elif cascade and slot is Slot.LUNCH:
        changes["dinner"] = _set_time(agenda.slots[Slot.DINNER], add_offset(at, interval))

    return _with_slots(agenda, **changes)


def edit_slot_note(agenda: Agenda, slot: Slot, text: str) -> Agenda:
    return _with_slots(agenda, **{slot.value: replace(agenda.slots[slot], note=text)})


def ordered_slots(agenda: Agenda) -> List[Tuple[Slot, SlotEntry]]:
    # Ties keep enum order (sorted is stable)
    populated = [(s, agenda.slots[s]) for s in Slot if agenda.slots[s].at is not None]
    return sorted(populated, key=lambda pair: pair[1].at)


# ---------- Auto-fill ----------
def missing_notes(agenda: Agenda) -> List[Slot]:
    if agenda.anchor is None:
        return []
    return [s for s in Slot if not agenda.slots[s].note]


def needs_autofill(agenda: Agenda) -> bool:
    return bool(missing_notes(agenda))


def autofill(agenda: Agenda, content: ContentProvider,
             available_tags: Optional[Iterable[str]] = None) -> Agenda:
    """
    Fill empty notes with the day's picks. Notes the user already has are
    left alone, so running this again is harmless.
    """
    missing = missing_notes(agenda)
    if not missing:
        return agenda
    tags = set(available_tags) if available_tags is not None else None

    changes = {}
    for slot in missing:
        if slot.is_meal:
            pool = content.recipes_for(slot.value)
            item = select_deterministic(slot.value, agenda.day_key, pool, tags)
        else:
            item = content.plan_for_day(agenda.day_key)
        changes[slot.value] = replace(agenda.slots[slot], note=render(item))

    logger.debug("Auto-filled %s for %s", ", ".join(changes), agenda.day_key)
    return _with_slots(agenda, **changes)


# ---------- Persistence ----------
def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


def _parse_dt(raw) -> Optional[datetime]:
    return datetime.fromisoformat(raw) if raw else None


def agenda_to_dict(agenda: Agenda) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "day_key": agenda.day_key.isoformat(),
        "anchor": _iso(agenda.anchor),
        "slots": {
            s.value: {"at": _iso(e.at), "note": e.note} for s, e in agenda.slots.items()
        },
    }
    if agenda.quote:
        out["quote"] = {"text": agenda.quote.text, "author": agenda.quote.author}
    return out


def agenda_from_dict(raw: Any, fallback_day: Optional[date] = None) -> Agenda:
    """Rebuild a stored agenda; anything unreadable becomes an empty agenda."""
    fallback_day = fallback_day or today()
    if not isinstance(raw, dict):
        return empty_agenda(fallback_day)
    try:
        slots = _empty_slots()
        for name, entry in (raw.get("slots") or {}).items():
            slots[Slot(name)] = SlotEntry(at=_parse_dt(entry.get("at")), note=entry.get("note") or "")
        quote = raw.get("quote")
        return Agenda(
            day_key=date.fromisoformat(raw["day_key"]),
            anchor=_parse_dt(raw.get("anchor")),
            slots=slots,
            quote=Quote(quote["text"], quote["author"]) if quote else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Stored agenda unreadable, starting empty: %s", e)
        return empty_agenda(fallback_day)
