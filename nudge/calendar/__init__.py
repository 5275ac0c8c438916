"""
calendar package: Google Calendar access, event normalization and the
week window, re-exported from submodules.
"""
from .models import CalendarFetchResult, Event, FetchSummary, WeekWindow
from .week_window import compute_upcoming_week, get_week_start_date
from .fetching import fetch_many, fetch_window, normalize_event, normalize_events

__all__ = [
    'CalendarFetchResult', 'Event', 'FetchSummary', 'WeekWindow',
    'compute_upcoming_week', 'get_week_start_date',
    'fetch_many', 'fetch_window', 'normalize_event', 'normalize_events',
]
