"""Shared workflow layer between the CLI commands and the functional core."""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo

from .config import Settings, expand_path
from .adapters.json_store import JsonEventStore
from .core.aggregate import (
    WEEK,
    current_instant,
    format_duration,
    remaining_minutes,
    split_duration,
    total_worked_time,
)
from .core.events import TrackingEvent, normalize
from .core.filtering import select_events
from .core.timewindow import local_today
from .ports.event_store import EventStore

logger = logging.getLogger(__name__)

REMAINING_USAGE = (
    'Remaining only works when "from" and "to" are not set and with no filter or filter "week"'
)


@dataclass
class ShowReport:
    """Worked (or remaining) time, ready for display."""

    hours: int
    minutes: int
    seconds: int
    text: str


def get_store(settings: Settings, data_file: str | None = None) -> JsonEventStore:
    """Resolve the data file from the command line or the config."""
    return JsonEventStore(expand_path(data_file or settings.data_file))


def persist(store: EventStore, events: list[TrackingEvent]) -> list[TrackingEvent]:
    """Sort, de-duplicate and save the log. Returns what was written."""
    events = normalize(events)
    store.save(events)
    return events


def worked_time(
    settings: Settings,
    events: list[TrackingEvent],
    from_: str | None,
    to: str | None,
    filter_: str | None,
    include_seconds: bool = False,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> tuple[int, int, int]:
    """Select events and sum them up into (hours, minutes, seconds)."""
    today = local_today(now, tz)
    selected = select_events(events, from_, to, filter_, tz=tz, today=today)
    logger.debug(f"{len(selected)} of {len(events)} events selected")
    return split_duration(total_worked_time(settings, selected, include_seconds, now, tz))


def combined_remaining_minutes(
    settings: Settings,
    events: list[TrackingEvent],
    filter_: str,
    hours: int,
    minutes: int,
    include_seconds: bool = False,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> int:
    """
    Remaining minutes for the day or the week, never below zero.

    For the day view the week is computed as well: on the last work day
    of the week the week's value wins, on other days the smaller one.
    """
    remaining = remaining_minutes(settings, filter_, hours, minutes)

    if filter_ != WEEK:
        week_hours, week_minutes, _ = worked_time(
            settings, events, None, None, WEEK, include_seconds, now, tz
        )
        remaining_week = remaining_minutes(settings, WEEK, week_hours, week_minutes)

        if local_today(now, tz).weekday() == settings.last_work_weekday():
            remaining = remaining_week
        else:
            remaining = min(remaining, remaining_week)

    return max(remaining, 0)


def show_report(
    settings: Settings,
    events: list[TrackingEvent],
    from_: str | None = None,
    to: str | None = None,
    filter_: str | None = None,
    template: str | None = None,
    include_seconds: bool = False,
    plain: bool = False,
    remaining: bool = False,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> ShowReport | None:
    """
    Compute the text for the show command.

    Returns None when remaining time was requested together with
    incompatible filters.
    """
    now = current_instant(now, include_seconds=True)
    hours, minutes, seconds = worked_time(
        settings, events, from_, to, filter_, include_seconds, now, tz
    )

    filter_ = filter_ or ""
    if remaining:
        if filter_ not in ("", WEEK) or from_ is not None or to is not None:
            return None
        seconds = 0
        left = combined_remaining_minutes(
            settings, events, filter_, hours, minutes, include_seconds, now, tz
        )
        hours, minutes = divmod(left, 60)

    time = format_duration(hours, minutes, seconds, template, include_seconds)
    if plain:
        text = time
    elif remaining:
        text = f"Remaining Work Time: {time}"
    else:
        text = f"Work Time: {time}"
    return ShowReport(hours, minutes, seconds, text)
