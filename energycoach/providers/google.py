# energycoach/providers/google.py
"""
Read-only Google Calendar events and Google Tasks for today.

Needs an OAuth access token with calendar.readonly / tasks.readonly scope,
passed in or read from ENERGYCOACH_GOOGLE_TOKEN. Every failure surfaces as
CalendarError here; the ``fetch_*`` helpers turn any failure into an empty list.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from urllib.parse import quote

import requests

from ..timeutil import APP_TZ
from .base import CalendarProvider

logger = logging.getLogger(__name__)

CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
TASKLISTS_URL = "https://tasks.googleapis.com/tasks/v1/users/@me/lists"
TASKS_URL = "https://tasks.googleapis.com/tasks/v1/lists/{list_id}/tasks"

REQUEST_TIMEOUT = 10


class CalendarError(Exception):
    pass


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    summary: str
    start: datetime
    end: Optional[datetime] = None
    location: Optional[str] = None
    html_link: Optional[str] = None
    all_day: bool = False


@dataclass(frozen=True)
class CalendarTask:
    id: str
    title: str
    due: datetime
    list_id: str
    list_title: str
    notes: Optional[str] = None
    status: str = "needsAction"
    updated: Optional[str] = None
    link: Optional[str] = None


def _parse_rfc3339(raw: str) -> datetime:
    # fromisoformat on older interpreters does not accept a trailing "Z"
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


def _day_bounds(now: datetime):
    day = now.astimezone(APP_TZ).date()
    start = datetime.combine(day, time.min, tzinfo=APP_TZ)
    end = datetime.combine(day, time.max, tzinfo=APP_TZ)
    return start, end


def _event_time(part: Optional[dict], end_of_day: bool) -> Optional[datetime]:
    if not part:
        return None
    if part.get("dateTime"):
        return _parse_rfc3339(part["dateTime"])
    if part.get("date"):
        d = date.fromisoformat(part["date"])
        return datetime.combine(d, time.max if end_of_day else time.min, tzinfo=timezone.utc)
    return None


def parse_event(raw: dict, now: datetime) -> CalendarEvent:
    start = raw.get("start") or {}
    return CalendarEvent(
        id=raw.get("id", ""),
        summary=raw.get("summary") or "(no title)",
        start=_event_time(start, end_of_day=False) or now,
        end=_event_time(raw.get("end"), end_of_day=True),
        location=raw.get("location"),
        html_link=raw.get("htmlLink"),
        all_day=bool(start.get("date")) and not start.get("dateTime"),
    )


class GoogleCalendar(CalendarProvider):
    def __init__(self, token: Optional[str] = None,
                 session: Optional[requests.Session] = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.token = token or os.environ.get("ENERGYCOACH_GOOGLE_TOKEN", "")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, url: str, params: Optional[dict] = None) -> dict:
        if not self.token:
            raise CalendarError("Google access token not configured (set ENERGYCOACH_GOOGLE_TOKEN)")
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout,
                                    headers={"Authorization": f"Bearer {self.token}"})
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as e:
            raise CalendarError(f"GET {url} failed: {e}") from e

    def list_today_events(self, now: datetime) -> List[CalendarEvent]:
        start, end = _day_bounds(now)
        data = self._get(CALENDAR_EVENTS_URL, params={
            "timeMin": start.isoformat(),
            "timeMax": end.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        })
        return [
            parse_event(e, now) for e in data.get("items") or []
            if e.get("status") != "cancelled"
        ]

    def list_today_tasks(self, now: datetime) -> List[CalendarTask]:
        """Open tasks due today across all task lists, by due time then title."""
        start, end = _day_bounds(now)
        lists = self._get(TASKLISTS_URL, params={"maxResults": 50}).get("items") or []

        tasks = []
        for tl in lists:
            try:
                data = self._get(TASKS_URL.format(list_id=quote(tl["id"], safe="")),
                                 params={"maxResults": 100, "showHidden": "false",
                                         "showCompleted": "false"})
            except CalendarError as e:
                # One broken list should not hide the others
                logger.warning("Skipping task list %s: %s", tl.get("title"), e)
                continue

            for t in data.get("items") or []:
                if t.get("deleted") or t.get("hidden") or t.get("status") == "completed":
                    continue
                if not t.get("due"):
                    continue
                due = _parse_rfc3339(t["due"])
                # Date-only due values arrive as midnight UTC
                if due.time() == time.min and due.utcoffset() == timedelta(0):
                    due = datetime.combine(due.date(), time.min, tzinfo=APP_TZ)
                if not (start <= due <= end):
                    continue
                tasks.append(CalendarTask(
                    id=t["id"],
                    title=t.get("title") or "(untitled)",
                    due=due,
                    list_id=tl["id"],
                    list_title=tl.get("title") or "Tasks",
                    notes=t.get("notes"),
                    status=t.get("status") or "needsAction",
                    updated=t.get("updated"),
                    link=t.get("selfLink"),
                ))

        tasks.sort(key=lambda t: (t.due, t.title))
        return tasks


def fetch_today_events(calendar: Optional[CalendarProvider], now: datetime) -> list:
    """Today's events, or an empty list if anything goes wrong."""
    if calendar is None:
        return []
    try:
        return calendar.list_today_events(now)
    except Exception as e:
        logger.warning("Calendar load failed: %s", e)
        return []


def fetch_today_tasks(calendar: Optional[GoogleCalendar], now: datetime) -> List[CalendarTask]:
    if calendar is None:
        return []
    try:
        return calendar.list_today_tasks(now)
    except Exception as e:
        logger.warning("Tasks load failed: %s", e)
        return []
