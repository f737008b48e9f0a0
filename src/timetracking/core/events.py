"""Pure event model - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackingData:
    """Payload shared by start and stop events."""

    description: str | None
    time: datetime

    def __post_init__(self):
        if self.time.tzinfo is None:
            raise ValueError("event time must be timezone-aware")
        # Stored as UTC with whole-second resolution
        object.__setattr__(
            self, "time", self.time.astimezone(timezone.utc).replace(microsecond=0)
        )


@dataclass(frozen=True)
class TrackingEvent:
    """
    A single entry of the log.

    Only ever instantiated as one of its two subclasses, Start or Stop.
    """

    data: TrackingData

    label = "Event"

    @classmethod
    def create(cls, time: datetime, description: str | None = None) -> "TrackingEvent":
        return cls(TrackingData(description=description, time=time))

    def time(self, include_seconds: bool = True) -> datetime:
        """Event instant in UTC, with seconds zeroed unless include_seconds."""
        if include_seconds:
            return self.data.time
        return self.data.time.replace(second=0)

    def description(self) -> str | None:
        return self.data.description

    def is_start(self) -> bool:
        return isinstance(self, Start)

    def is_stop(self) -> bool:
        return isinstance(self, Stop)


class Start(TrackingEvent):
    label = "Start"


class Stop(TrackingEvent):
    label = "Stop"


def normalize(events: list[TrackingEvent]) -> list[TrackingEvent]:
    """
    Sort events by time and drop adjacent exact duplicates.

    The sort is stable, so events sharing a timestamp keep their
    relative order.
    """
    result: list[TrackingEvent] = []
    for event in sorted(events, key=lambda e: e.time()):
        if result and result[-1] == event:
            continue
        result.append(event)
    if len(result) != len(events):
        logger.debug(f"Dropped {len(events) - len(result)} duplicate event(s)")
    return result


def format_event(
    event: TrackingEvent,
    tz: tzinfo | None = None,
    prefix: str | None = None,
) -> str:
    """Render an event as 'Start at 2021-04-01 08:00:00 "desc"' in local time."""
    local = event.time().astimezone(tz)
    prefix = prefix if prefix is not None else f"{event.label:5}"
    text = f"{prefix} at {local.strftime('%Y-%m-%d %H:%M:%S')}"
    description = event.description()
    if description is not None:
        text += f' "{description}"'
    return text


def format_events(events: list[TrackingEvent], tz: tzinfo | None = None) -> list[str]:
    """Human readable lines for a list of events."""
    return [format_event(e, tz) for e in events]
