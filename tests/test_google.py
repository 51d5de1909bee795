from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from energycoach.providers.google import (
    CALENDAR_EVENTS_URL, TASKLISTS_URL, CalendarError, GoogleCalendar, fetch_today_events,
    fetch_today_tasks, parse_event,
)
from energycoach.timeutil import APP_TZ

NOW = datetime(2025, 6, 10, 9, 0, tzinfo=APP_TZ)


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


def _session(*payloads):
    session = MagicMock()
    session.get.side_effect = [_response(p) for p in payloads]
    return session


class TestEvents:
    def test_lists_today_and_drops_cancelled(self) -> None:
        session = _session({"items": [
            {"id": "1", "summary": "Standup", "start": {"dateTime": "2025-06-10T09:30:00Z"},
             "end": {"dateTime": "2025-06-10T09:45:00Z"}},
            {"id": "2", "summary": "Gone", "status": "cancelled", "start": {"dateTime": "2025-06-10T10:00:00Z"}},
            {"id": "3", "summary": "Holiday", "start": {"date": "2025-06-10"}},
        ]})
        events = GoogleCalendar("tok", session=session).list_today_events(NOW)

        assert [e.id for e in events] == ["1", "3"]
        assert events[0].start == datetime(2025, 6, 10, 9, 30, tzinfo=APP_TZ)
        assert events[1].all_day is True

        url = session.get.call_args.args[0]
        kwargs = session.get.call_args.kwargs
        assert url == CALENDAR_EVENTS_URL
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert kwargs["params"]["singleEvents"] == "true"
        assert kwargs["timeout"] == 10

    def test_untitled_event(self) -> None:
        ev = parse_event({"id": "x", "start": {"dateTime": "2025-06-10T12:00:00+00:00"}}, NOW)
        assert ev.summary == "(no title)"
        assert ev.all_day is False

    def test_missing_token(self, monkeypatch) -> None:
        monkeypatch.delenv("ENERGYCOACH_GOOGLE_TOKEN", raising=False)
        with pytest.raises(CalendarError):
            GoogleCalendar(session=MagicMock()).list_today_events(NOW)

    def test_http_failure_becomes_calendar_error(self) -> None:
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("offline")
        with pytest.raises(CalendarError):
            GoogleCalendar("tok", session=session).list_today_events(NOW)

    def test_fetch_swallows_failures(self) -> None:
        calendar = MagicMock()
        calendar.list_today_events.side_effect = CalendarError("boom")
        assert fetch_today_events(calendar, NOW) == []
        assert fetch_today_events(None, NOW) == []


class TestTasks:
    def test_filters_and_sorts(self) -> None:
        session = _session(
            {"items": [{"id": "L1", "title": "Home"}]},
            {"items": [
                {"id": "b", "title": "Pay bill", "due": "2025-06-10T00:00:00.000Z"},
                {"id": "a", "title": "Call", "due": "2025-06-10T00:00:00.000Z"},
                {"id": "c", "title": "Done", "due": "2025-06-10T00:00:00.000Z", "status": "completed"},
                {"id": "d", "title": "Tomorrow", "due": "2025-06-11T00:00:00.000Z"},
                {"id": "e", "title": "No due"},
                {"id": "f", "title": "Hidden", "due": "2025-06-10T00:00:00.000Z", "hidden": True},
            ]},
        )
        tasks = GoogleCalendar("tok", session=session).list_today_tasks(NOW)

        assert [t.id for t in tasks] == ["a", "b"]
        assert tasks[0].list_title == "Home"
        assert session.get.call_args_list[0].args[0] == TASKLISTS_URL

    def test_one_broken_list_is_skipped(self) -> None:
        session = MagicMock()
        session.get.side_effect = [
            _response({"items": [{"id": "L1", "title": "Broken"}, {"id": "L2", "title": "Work"}]}),
            requests.HTTPError("500"),
            _response({"items": [{"id": "t", "title": "Ship", "due": "2025-06-10T00:00:00.000Z"}]}),
        ]
        tasks = GoogleCalendar("tok", session=session).list_today_tasks(NOW)
        assert [t.list_id for t in tasks] == ["L2"]

    def test_fetch_tasks_swallows_failures(self) -> None:
        calendar = MagicMock()
        calendar.list_today_tasks.side_effect = RuntimeError("boom")
        assert fetch_today_tasks(calendar, NOW) == []
