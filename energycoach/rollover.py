# energycoach/rollover.py

import logging
from datetime import date
from typing import Optional

from .agenda import Agenda, empty_agenda
from .sleep import SleepEntry, SleepLog

logger = logging.getLogger(__name__)


def check_rollover(agenda: Agenda, today: date) -> Agenda:
    """Return ``agenda`` untouched on its own day, a fresh empty one otherwise."""
    if agenda.day_key == today:
        return agenda
    return empty_agenda(today)


class RolloverMonitor:
    """
    Runs the rollover check on every tick of the host loop. On a new day it
    cancels the old day's reminders and loads that day's sleep entry.
    """

    def __init__(self, sleep_log: SleepLog, scheduler=None):
        self.sleep_log = sleep_log
        self.scheduler = scheduler
        self.sleep: Optional[SleepEntry] = None

    def tick(self, agenda: Agenda, today: date) -> Agenda:
        fresh = check_rollover(agenda, today)
        if fresh is agenda:
            if self.sleep is None or self.sleep.day != today:
                self.sleep = self.sleep_log.load(today)
            return agenda

        logger.info("Day rolled over: %s -> %s", agenda.day_key, today)
        if self.scheduler is not None:
            self.scheduler.cancel_all()
        self.sleep = self.sleep_log.load(today)
        return fresh
