"""
models.py: Normalized calendar types shared by the fetcher, formatter and
delivery tasks.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Union

EventTime = Union[date, datetime]


@dataclass(frozen=True)
class WeekWindow:
    """Target week. `end` is the last instant of the last day (inclusive)."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError("Week window end must be after its start")


@dataclass
class Event:
    """A calendar event, either all-day (date start) or timed (datetime start)."""
    start: EventTime
    end: EventTime
    title: str
    location: Optional[str] = None
    cancelled: bool = False
    event_id: Optional[str] = None
    html_link: Optional[str] = None

    @property
    def is_all_day(self) -> bool:
        # datetime is a subclass of date, so check the narrower type
        return not isinstance(self.start, datetime)


@dataclass
class CalendarFetchResult:
    calendar_id: str
    events: List[Event] = field(default_factory=list)
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_message is None


@dataclass
class FetchSummary:
    results: List[CalendarFetchResult] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def find(self, calendar_id: str) -> Optional[CalendarFetchResult]:
        for result in self.results:
            if result.calendar_id == calendar_id:
                return result
        return None
