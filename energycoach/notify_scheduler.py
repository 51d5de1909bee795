# energycoach/notify_scheduler.py
"""
One-shot reminder jobs for the day's slots.

Each slot owns at most one pending job. Re-arranging cancels the slot's
previous job (if it has not fired yet) before registering the new one, so
an edited slot is delivered once, at its new time. A slot whose time is
already behind us and has not moved since the last arrange is left alone,
so a delivered reminder is never queued again.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from functools import partial
from typing import Callable, Dict, Optional, Tuple

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from .agenda import Agenda, Slot
from .channels import AudibleCue, NoopCue, Notifier
from .timeutil import APP_TZ, today
from .timeutil import now as app_now

logger = logging.getLogger(__name__)

MISFIRE_GRACE_SECONDS = 60
SNOOZE_MINUTES = 5
ROLLOVER_JOB_ID = "rollover"


@dataclass(frozen=True)
class NotificationTask:
    slot: Optional[Slot]  # None for a snoozed repeat
    fire_at: datetime
    title: str
    body: str
    day_key: date
    sound: bool
    job_id: str


def _direct(fn: Callable[[], None]) -> None:
    fn()


def category_enabled(slot: Slot, settings) -> bool:
    return settings.notify.meals if slot.is_meal else settings.notify.exercise


class NotificationScheduler:
    """
    Wraps an APScheduler instance. ``dispatch`` hands fired jobs back to the
    control thread (the host passes ``tk_root.after(0, fn)``); by default
    they run on the scheduler's worker thread.
    """

    def __init__(self, scheduler: BaseScheduler, notifier: Notifier,
                 cue: Optional[AudibleCue] = None,
                 clock: Callable[[], datetime] = app_now,
                 dispatch: Callable[[Callable[[], None]], None] = _direct):
        self.scheduler = scheduler
        self.notifier = notifier
        self.cue = cue or NoopCue()
        self.clock = clock
        self.dispatch = dispatch
        self._tasks: Dict[Slot, NotificationTask] = {}
        self._snoozed: Dict[str, NotificationTask] = {}
        # (day, time) each slot had at the last arrange
        self._seen: Dict[Slot, Tuple[date, datetime]] = {}

    # ---------- Arrange / cancel ----------
    def arrange(self, agenda: Agenda, settings, skip_past: bool = False) -> Dict[Slot, NotificationTask]:
        """
        Create one job per slot with a time whose category is enabled.

        A past slot fires right away (delay clamped to zero) only if its
        time moved since the previous arrange, or its job had not fired
        yet. ``skip_past`` drops every past slot, which is how a restart
        avoids replaying them.
        """
        now = self.clock()
        for slot in Slot:
            was_pending = self.cancel(slot)
            entry = agenda.slots[slot]
            previous = self._seen.get(slot)
            if entry.at is None:
                self._seen.pop(slot, None)
                continue
            self._seen[slot] = (agenda.day_key, entry.at)

            if not category_enabled(slot, settings):
                continue
            if entry.at < now:
                if skip_past:
                    continue
                if previous == (agenda.day_key, entry.at) and not was_pending:
                    logger.debug("Not re-arming %s, already past at %s", slot.value, entry.at.strftime("%H:%M"))
                    continue

            run_at = max(entry.at, now)
            task = NotificationTask(
                slot=slot,
                fire_at=run_at,
                title=slot.label,
                body=entry.note or slot.fallback_body,
                day_key=agenda.day_key,
                sound=settings.notify.sound,
                job_id=f"slot:{slot.value}:{run_at.isoformat()}",
            )
            self._add(task)
            self._tasks[slot] = task
            logger.info("Reminder for %s at %s", slot.value, run_at.strftime("%H:%M"))
        return self.pending()

    def _add(self, task: NotificationTask) -> None:
        self.scheduler.add_job(
            self._on_job,
            "date",
            run_date=task.fire_at,
            args=[task],
            id=task.job_id,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )

    def _remove(self, job_id: str) -> bool:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            # Already fired (date jobs remove themselves)
            return False
        return True

    def cancel(self, slot: Slot) -> bool:
        """Drop the slot's job if it has not fired. True if one was removed."""
        task = self._tasks.pop(slot, None)
        if task is None or not self._remove(task.job_id):
            return False
        logger.debug("Cancelled reminder for %s", slot.value)
        return True

    def cancel_all(self) -> None:
        """Drop every pending slot reminder and snoozed repeat."""
        for slot in list(self._tasks):
            self.cancel(slot)
        for job_id in list(self._snoozed):
            del self._snoozed[job_id]
            self._remove(job_id)

    def pending(self) -> Dict[Slot, NotificationTask]:
        return dict(self._tasks)

    def snoozed(self) -> Dict[str, NotificationTask]:
        return dict(self._snoozed)

    # ---------- Firing ----------
    def _on_job(self, task: NotificationTask) -> None:
        # Runs on the scheduler thread; marshal to the control thread
        self.dispatch(partial(self._fire, task))

    def _fire(self, task: NotificationTask) -> None:
        if task.slot is not None and self._tasks.get(task.slot) == task:
            del self._tasks[task.slot]
        self._snoozed.pop(task.job_id, None)
        if today(self.clock()) != task.day_key:
            logger.info("Skipping stale %r reminder from %s", task.title, task.day_key)
            return
        if task.sound:
            self.cue.emit()
        self.notifier.deliver(task.title, task.body)

    def notify_now(self, title: str, body: str) -> bool:
        return self.notifier.deliver(title, body)

    def snooze(self, title: str, body: str, minutes: int = SNOOZE_MINUTES) -> NotificationTask:
        """Deliver the same notification again a few minutes from now (same day only)."""
        now = self.clock()
        run_at = now + timedelta(minutes=minutes)
        task = NotificationTask(
            slot=None,
            fire_at=run_at,
            title=title,
            body=body,
            day_key=today(now),
            sound=False,
            job_id=f"snooze:{title}:{run_at.isoformat()}",
        )
        self._add(task)
        self._snoozed[task.job_id] = task
        return task

    def schedule_rollover(self, callback: Callable[[], None]) -> datetime:
        """Run ``callback`` just after the next midnight (re-seeds the new day)."""
        now = self.clock()
        tomorrow = today(now) + timedelta(days=1)
        midnight_plus = datetime.combine(tomorrow, datetime.min.time()).replace(
            tzinfo=APP_TZ) + timedelta(seconds=5)
        self.scheduler.add_job(
            self.dispatch,
            "date",
            run_date=midnight_plus,
            args=[callback],
            id=ROLLOVER_JOB_ID,
            replace_existing=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )
        return midnight_plus
