"""Services layer - カレンダーのロジック"""

from lawcal.services.calendar_session import CalendarSession
from lawcal.services.event_form import EventForm, FormMode
from lawcal.services.query import build_query_params, week_bounds

__all__ = [
    "CalendarSession",
    "EventForm",
    "FormMode",
    "build_query_params",
    "week_bounds",
]
