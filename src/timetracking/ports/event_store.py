"""Event store interface."""

from typing import Protocol

from timetracking.core.events import TrackingEvent


class EventStore(Protocol):
    """Interface for loading and persisting the event log."""

    def load(self) -> list[TrackingEvent]:
        """Load all events. Returns an empty list if there is no log yet."""
        ...

    def save(self, events: list[TrackingEvent]) -> None:
        """Replace the whole log atomically."""
        ...
