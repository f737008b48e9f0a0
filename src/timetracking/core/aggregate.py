"""Worked time aggregation - pure logic, no I/O."""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Protocol

from .events import TrackingEvent
from .timewindow import utc_to_local

CHECKED_ADD_DURATION_ERROR = "couldn't add up durations"
DEFAULT_FORMAT = "{hh}:{mm}:{ss}"
WEEK = "week"


class DurationOverflowError(OverflowError):
    """Summing durations overflowed. Points at a corrupted log."""


class BreakPolicy(Protocol):
    min_daily_break: int


class GoalPolicy(Protocol):
    def goal_minutes(self, filter_mode: str | None) -> int: ...


def checked_add(total: timedelta, duration: timedelta) -> timedelta:
    try:
        return total + duration
    except OverflowError as e:
        raise DurationOverflowError(CHECKED_ADD_DURATION_ERROR) from e


def current_instant(now: datetime | None = None, include_seconds: bool = False) -> datetime:
    """UTC now, truncated to the minute unless include_seconds."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    now = now.replace(microsecond=0)
    if not include_seconds:
        now = now.replace(second=0)
    return now


def split_into_days(
    events: list[TrackingEvent],
    include_seconds: bool = True,
    tz: tzinfo | None = None,
) -> list[list[TrackingEvent]]:
    """
    Group time-ordered events into runs sharing a local calendar date.

    A new run begins whenever the date changes; events are never reordered.
    """
    days: list[list[TrackingEvent]] = []
    current_day = None
    for event in events:
        day = utc_to_local(event.time(include_seconds), tz).date()
        if days and day == current_day:
            days[-1].append(event)
        else:
            days.append([event])
            current_day = day
    return days


def day_worked_time(
    settings: BreakPolicy,
    day: list[TrackingEvent],
    include_seconds: bool = False,
    now: datetime | None = None,
) -> timedelta:
    """
    Worked time for a single day-run.

    Pairs each start with the next stop. A trailing start without a stop is
    still running and counts until `now`. If the gaps between pairs add up
    to less than the minimum daily break, the shortfall is deducted.
    """
    events = iter(day)
    work_day = timedelta(0)
    first = last = None

    while True:
        start = next((e for e in events if e.is_start()), None)
        if start is None:
            break
        stop = next((e for e in events if e.is_stop()), None)

        begin = start.time(include_seconds)
        end = stop.time(include_seconds) if stop else current_instant(now, include_seconds)
        if first is None:
            first = begin
        last = end
        work_day = checked_add(work_day, end - begin)

        if stop is None:
            break

    if settings.min_daily_break > 0 and first is not None:
        pause = (last - first) - work_day
        min_break = timedelta(minutes=settings.min_daily_break)
        if timedelta(0) < pause < min_break:
            work_day -= min_break - pause

    return max(work_day, timedelta(0))


def total_worked_time(
    settings: BreakPolicy,
    events: list[TrackingEvent],
    include_seconds: bool = False,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> timedelta:
    """
    Total worked time across all days in `events`.

    `events` must already be time-ordered and start with a start event
    (see filter_events). Without include_seconds all times are truncated
    to the minute before anything is computed.
    """
    total = timedelta(0)
    for day in split_into_days(events, include_seconds, tz):
        total = checked_add(total, day_worked_time(settings, day, include_seconds, now))
    return total


def split_duration(duration: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole (hours, minutes, seconds)."""
    seconds = duration.days * 86400 + duration.seconds
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def remaining_minutes(
    settings: GoalPolicy,
    filter_mode: str | None,
    hours: int,
    minutes: int,
) -> int:
    """Minutes left until the goal for `filter_mode` is met. May be negative."""
    return settings.goal_minutes(filter_mode) - (hours * 60 + minutes)


def format_duration(
    hours: int,
    minutes: int,
    seconds: int,
    template: str | None = None,
    include_seconds: bool = False,
) -> str:
    """
    Fill a template with the given time.

    {hh} {mm} {ss} are zero padded to two digits, {h} {m} {s} are not.
    """
    seconds = seconds if include_seconds else 0
    template = template or DEFAULT_FORMAT
    return (
        template.replace("{hh}", f"{hours:02}")
        .replace("{mm}", f"{minutes:02}")
        .replace("{ss}", f"{seconds:02}")
        .replace("{h}", f"{hours}")
        .replace("{m}", f"{minutes}")
        .replace("{s}", f"{seconds}")
    )
