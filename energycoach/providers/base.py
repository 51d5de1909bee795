# energycoach/providers/base.py
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, List, Set

from ..content import Plan, Recipe, plan_for_day, recipes_for


class ContentProvider(ABC):
    @abstractmethod
    def recipes_for(self, meal: str) -> List[Recipe]:
        """Return the full candidate pool for a meal."""
        ...

    @abstractmethod
    def plan_for_day(self, day: date) -> Plan:
        """Return the workout plan for a calendar day."""
        ...


class TagProvider(ABC):
    @abstractmethod
    def available_tags(self) -> Set[str]:
        """Return the requirement tags that are currently satisfied."""
        ...


class CalendarProvider(ABC):
    @abstractmethod
    def list_today_events(self, now: datetime) -> list:
        """Return today's events; may raise on network/auth failure."""
        ...


class LibraryContent(ContentProvider):
    """The built-in static recipe and workout library."""

    def recipes_for(self, meal: str) -> List[Recipe]:
        return recipes_for(meal)

    def plan_for_day(self, day: date) -> Plan:
        return plan_for_day(day)


class StaticTags(TagProvider):
    def __init__(self, tags: Iterable[str] = ()):
        self._tags = set(tags)

    def available_tags(self) -> Set[str]:
        return set(self._tags)
