"""Pure event filtering logic - no I/O dependencies."""

from datetime import date, tzinfo
from itertools import dropwhile

from .events import TrackingEvent
from .timewindow import DateOrDateTime, resolve_window

ALL = "all"


def matches_description(event: TrackingEvent, filter_mode: str | None) -> bool:
    """
    Check an event against a keyword filter.

    No filter matches everything, "all" matches everything, otherwise the
    event needs a description containing the keyword (case-sensitive).
    """
    if not filter_mode or filter_mode == ALL:
        return True
    description = event.description()
    return description is not None and filter_mode in description


def filter_events(
    events: list[TrackingEvent],
    from_bound: DateOrDateTime | None,
    to_bound: DateOrDateTime | None,
    filter_mode: str | None,
    tz: tzinfo | None = None,
) -> list[TrackingEvent]:
    """
    Filter events by time window and description.

    "all" disables the window entirely. Leading stop events are dropped so
    the result always begins with a start (or is empty). Input order is
    preserved.

    Pure function - no I/O.
    """
    selected = events
    if filter_mode != ALL:
        if from_bound is not None:
            lower = from_bound.lower_instant(tz)
            selected = [e for e in selected if e.time() >= lower]
        if to_bound is not None:
            upper = to_bound.upper_instant(tz)
            selected = [e for e in selected if e.time() <= upper]

    selected = [e for e in selected if matches_description(e, filter_mode)]
    return list(dropwhile(lambda e: e.is_stop(), selected))


def select_events(
    events: list[TrackingEvent],
    from_: str | None,
    to: str | None,
    filter_: str | None,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> list[TrackingEvent]:
    """Resolve the raw --from/--to/filter arguments and filter events."""
    filter_mode, from_bound, to_bound = resolve_window(from_, to, filter_, tz=tz, today=today)
    return filter_events(events, from_bound, to_bound, filter_mode, tz=tz)
