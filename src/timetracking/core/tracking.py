"""Start/stop/continue/status logic - pure, warnings are returned, not printed."""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Protocol

from .aggregate import current_instant
from .events import Start, Stop, TrackingEvent
from .timewindow import local_today, parse_date_time, utc_to_local


class StartPolicy(Protocol):
    auto_insert_stop: bool


@dataclass
class TrackingResult:
    """Outcome of a mutating command."""

    events: list[TrackingEvent]
    changed: bool = False
    warnings: list[str] = field(default_factory=list)


@dataclass
class Status:
    """The latest entry of the log."""

    active: bool
    time: datetime
    description: str | None

    def lines(self) -> list[str]:
        lines = [f"Active: {str(self.active).lower()}"]
        if self.description is not None:
            lines.append(f"Description: {self.description}")
        label = "Start" if self.active else "End"
        lines.append(f"{label} Time: {self.time.strftime('%H:%M:%S')}")
        return lines


def _event_time(at: str | None, now: datetime, tz: tzinfo | None) -> datetime:
    if at is None:
        return now
    return parse_date_time(at, tz=tz, today=local_today(now, tz))


def start_tracking(
    settings: StartPolicy,
    events: list[TrackingEvent],
    description: str | None = None,
    at: str | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> TrackingResult:
    """
    Append a start event.

    Only allowed when the log is empty, ends with a stop, or an explicit
    time is given. Otherwise, with auto_insert_stop the running entry is
    stopped first, unless it already has the same description.
    """
    now = current_instant(now, include_seconds=True)
    last = events[-1] if events else None

    if last is None or last.is_stop() or at is not None:
        time = _event_time(at, now, tz)
        return TrackingResult(events + [Start.create(time, description)], changed=True)

    if settings.auto_insert_stop:
        if description is not None and description == last.description():
            return TrackingResult(
                events,
                warnings=[f'Timetracking with the description "{description}" is already running!'],
            )
        return TrackingResult(
            events + [Stop.create(now), Start.create(now, description)],
            changed=True,
        )

    return TrackingResult(events, warnings=["Time tracking is already running!"])


def stop_tracking(
    events: list[TrackingEvent],
    description: str | None = None,
    at: str | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> TrackingResult:
    """Append a stop event unless tracking is already stopped."""
    now = current_instant(now, include_seconds=True)
    last = events[-1] if events else None

    if last is None or last.is_start() or at is not None:
        time = _event_time(at, now, tz)
        return TrackingResult(events + [Stop.create(time, description)], changed=True)

    return TrackingResult(events, warnings=["Time tracking is already stopped!"])


def continue_tracking(
    events: list[TrackingEvent],
    now: datetime | None = None,
) -> TrackingResult:
    """Start again with the description of the most recent start."""
    if not events or not events[-1].is_stop():
        return TrackingResult(
            events,
            warnings=[
                "Time tracking couldn't be continued, because there are no entries. "
                "Use the start command instead!"
            ],
        )

    previous = next((e for e in reversed(events) if e.is_start()), None)
    if previous is None:
        return TrackingResult(events)

    now = current_instant(now, include_seconds=True)
    return TrackingResult(events + [Start.create(now, previous.description())], changed=True)


def tracking_status(
    events: list[TrackingEvent],
    tz: tzinfo | None = None,
) -> Status | None:
    """Status of the latest event, or None for an empty log."""
    if not events:
        return None
    last = events[-1]
    return Status(
        active=last.is_start(),
        time=utc_to_local(last.time(), tz),
        description=last.description(),
    )
