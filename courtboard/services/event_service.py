"""
Event status derivation.

Status is a pure function of the event window and the current instant; it is
never stored or cached, so two requests either side of a boundary may
disagree.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from courtboard.database.models import Event
from courtboard.utils.datetime_utils import to_utc, utcnow

ACTIVE = "active"
UPCOMING = "upcoming"
PAST = "past"


def event_status(event: Event, now: Optional[datetime] = None) -> str:
    """Classify an event as active, upcoming or past at the given instant."""
    now = to_utc(now or utcnow())
    start = to_utc(event.start_date_time)
    end = to_utc(event.end_date_time)
    if start > now:
        return UPCOMING
    if end >= now:
        return ACTIVE
    return PAST


def active_then_upcoming(events: Iterable[Event], now: Optional[datetime] = None) -> List[Event]:
    """
    Active events followed by upcoming ones, each sorted by start time.

    Past events are dropped.
    """
    now = to_utc(now or utcnow())
    active = []
    upcoming = []
    for event in events:
        status = event_status(event, now)
        if status == ACTIVE:
            active.append(event)
        elif status == UPCOMING:
            upcoming.append(event)

    def by_start(e: Event):
        return (to_utc(e.start_date_time), e.id or 0)

    return sorted(active, key=by_start) + sorted(upcoming, key=by_start)
