# energycoach/coach.py
"""
Composition of the engine: one AppContext built at startup, one Coach that
drives check-in, edits, auto-fill, reminders and day rollover.

Every public read goes through ``ensure_current_day`` so a session left
open past midnight starts the new day empty.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .agenda import (
    MEAL_SLOTS, Agenda, Slot, agenda_from_dict, agenda_to_dict, autofill, check_in,
    edit_slot_note, edit_slot_time, empty_agenda, needs_autofill, ordered_slots,
)
from .channels import AudibleCue, NoopCue, Notifier
from .content.quotes import format_quote, pick_quote
from .notify_scheduler import NotificationScheduler
from .providers.base import CalendarProvider, ContentProvider, LibraryContent, StaticTags, TagProvider
from .providers.google import fetch_today_events
from .rollover import RolloverMonitor
from .selector import render, select_pseudo_random
from .settings import DEFAULT_SETTINGS, Settings, settings_from_dict, settings_to_dict
from .sleep import SleepEntry, SleepLog
from .timeutil import clock_time, countdown_label, today
from .timeutil import now as app_now

logger = logging.getLogger(__name__)

SETTINGS_KEY = "ec_settings"
AGENDA_KEY = "ec_agenda"
QUOTE_TITLE = "Daily Inspiration"


@dataclass
class AppContext:
    """Everything with a side effect, resolved once by the host."""
    store: object
    scheduler: NotificationScheduler
    content: ContentProvider = field(default_factory=LibraryContent)
    tags: TagProvider = field(default_factory=StaticTags)
    calendar: Optional[CalendarProvider] = None
    settings: Settings = DEFAULT_SETTINGS
    clock: Callable[[], datetime] = app_now


def build_context(store, apscheduler, notifier: Notifier, cue: Optional[AudibleCue] = None,
                  dispatch=None, **kwargs) -> AppContext:
    """Wire a NotificationScheduler around an APScheduler instance."""
    clock = kwargs.get("clock", app_now)
    sched_kwargs = {"cue": cue or NoopCue(), "clock": clock}
    if dispatch is not None:
        sched_kwargs["dispatch"] = dispatch
    scheduler = NotificationScheduler(apscheduler, notifier, **sched_kwargs)
    return AppContext(store=store, scheduler=scheduler, **kwargs)


class Coach:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx
        self.settings = settings_from_dict(ctx.store.get(SETTINGS_KEY), base=ctx.settings)
        self.monitor = RolloverMonitor(SleepLog(ctx.store), ctx.scheduler)
        self._agenda = agenda_from_dict(ctx.store.get(AGENDA_KEY), fallback_day=self._today())

    # ---------- State ----------
    def _today(self):
        return today(self.ctx.clock())

    def _save(self, agenda: Agenda) -> Agenda:
        self._agenda = agenda
        self.ctx.store.set(AGENDA_KEY, agenda_to_dict(agenda))
        return agenda

    def ensure_current_day(self) -> Agenda:
        fresh = self.monitor.tick(self._agenda, self._today())
        if fresh is not self._agenda:
            self._save(fresh)
        return self._agenda

    @property
    def agenda(self) -> Agenda:
        return self.ensure_current_day()

    @property
    def sleep(self) -> SleepEntry:
        self.ensure_current_day()
        return self.monitor.sleep

    def save_sleep(self, entry: SleepEntry) -> bool:
        return self.monitor.sleep_log.save(entry)

    def _rearm(self, agenda: Agenda, skip_past: bool = False) -> None:
        if agenda.checked_in:
            self.ctx.scheduler.arrange(agenda, self.settings, skip_past=skip_past)

    # ---------- Lifecycle ----------
    def resume(self) -> Agenda:
        """
        Startup: roll the day if needed, finish any auto-fill and re-arm
        reminders that are still ahead. Times already passed are not replayed.
        """
        agenda = self.fill_missing()
        self._rearm(agenda, skip_past=True)
        return agenda

    def check_in(self) -> Agenda:
        now = self.ctx.clock()
        quote = pick_quote(self.settings.quote_pref)
        agenda = check_in(now, self.settings, quote)
        agenda = autofill(agenda, self.ctx.content, self.ctx.tags.available_tags())
        self._save(agenda)
        logger.info("Checked in at %s", clock_time(now))

        if self.settings.notify.quotes:
            self.ctx.scheduler.notify_now(QUOTE_TITLE, format_quote(quote))
        self._rearm(agenda)
        return agenda

    def fill_missing(self) -> Agenda:
        agenda = self.agenda
        if needs_autofill(agenda):
            agenda = self._save(autofill(agenda, self.ctx.content, self.ctx.tags.available_tags()))
        return agenda

    # ---------- Edits ----------
    def edit_time(self, slot: Slot, hhmm: str, cascade: Optional[bool] = None) -> Agenda:
        """Breakfast and lunch edits shift later meals unless told otherwise."""
        agenda = self.agenda
        if cascade is None:
            cascade = slot in (Slot.BREAKFAST, Slot.LUNCH)
        edited = edit_slot_time(agenda, slot, hhmm, cascade, self.settings)
        if edited is agenda:
            return agenda
        self._save(edited)
        self._rearm(edited)
        return edited

    def edit_note(self, slot: Slot, text: str) -> Agenda:
        """Save the note; a pending reminder picks up the new text."""
        agenda = self.agenda
        if agenda.note(slot) == text:
            return agenda
        edited = self._save(edit_slot_note(agenda, slot, text))
        self._rearm(edited)
        return edited

    def suggest(self, slot: Slot) -> Agenda:
        """Re-roll a meal, or re-plan exercise from the day's rotation."""
        agenda = self.agenda
        if slot in MEAL_SLOTS:
            item = select_pseudo_random(self.ctx.content.recipes_for(slot.value))
        else:
            item = self.ctx.content.plan_for_day(agenda.day_key)
        return self.edit_note(slot, render(item))

    def update_settings(self, settings: Settings) -> Settings:
        self.settings = settings
        self.ctx.store.set(SETTINGS_KEY, settings_to_dict(settings))
        self._rearm(self.agenda)
        return settings

    def reset(self) -> Agenda:
        self.ctx.scheduler.cancel_all()
        return self._save(empty_agenda(self._today()))

    # ---------- Views ----------
    def cards(self) -> List[Tuple[Slot, str, str, str]]:
        """(slot, "HH:MM", countdown, note) for populated slots in time order."""
        now = self.ctx.clock()
        return [
            (slot, clock_time(entry.at), countdown_label(entry.at, now), entry.note)
            for slot, entry in ordered_slots(self.agenda)
        ]

    def refresh_events(self) -> list:
        return fetch_today_events(self.ctx.calendar, self.ctx.clock())
