"""JSON file event store adapter."""

import json
import logging
import os
from datetime import datetime, timezone, tzinfo
from pathlib import Path

from timetracking.core.events import Start, Stop, TrackingEvent, format_events

logger = logging.getLogger(__name__)

KINDS = {"Start": Start, "Stop": Stop}


class StoreError(Exception):
    """Raised when an event file exists but cannot be read or decoded."""


def event_to_dict(event: TrackingEvent) -> dict:
    return {
        event.label: {
            "description": event.description(),
            "time": int(event.time().timestamp()),
        }
    }


def event_from_dict(data: dict) -> TrackingEvent:
    """Decode {"Start": {"description": ..., "time": <unix seconds>}}."""
    if not isinstance(data, dict) or len(data) != 1:
        raise StoreError(f"Invalid event entry: {data!r}")
    (kind, payload), = data.items()
    if kind not in KINDS:
        raise StoreError(f"Unknown event kind: {kind!r}")
    try:
        time = datetime.fromtimestamp(int(payload["time"]), tz=timezone.utc)
        description = payload.get("description")
    except (KeyError, TypeError, ValueError, OverflowError, OSError, AttributeError) as e:
        raise StoreError(f"Invalid {kind} entry: {payload!r}") from e
    if description is not None and not isinstance(description, str):
        raise StoreError(f"Invalid {kind} description: {description!r}")
    return KINDS[kind].create(time, description)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StoreError(f"Cannot read {path}: {e}") from e


def decode_events(text: str) -> list[TrackingEvent]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StoreError(f"Invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise StoreError("Expected a JSON list of events")
    return [event_from_dict(item) for item in data]


def encode_events(events: list[TrackingEvent], pretty: bool = False) -> str:
    return json.dumps([event_to_dict(e) for e in events], indent=2 if pretty else None)


def write_atomic(path: Path, content: str) -> None:
    """Write to a temporary file next to `path`, then rename over it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(path.name + ".tmp")
    try:
        with open(temp_path, "w") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


class JsonEventStore:
    """
    JSON file event store.

    Implements EventStore protocol. The whole log is one JSON list.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> list[TrackingEvent]:
        """Load all events. A missing file is an empty log."""
        if not self.path.exists():
            logger.debug(f"No data file at {self.path}, starting empty")
            return []
        events = decode_events(read_text(self.path))
        logger.debug(f"Loaded {len(events)} events from {self.path}")
        return events

    def save(self, events: list[TrackingEvent]) -> None:
        """Replace the log atomically."""
        write_atomic(self.path, encode_events(events))
        logger.debug(f"Wrote {len(events)} events to {self.path}")

    def export_json(self, events: list[TrackingEvent], path: Path | str, pretty: bool = False) -> None:
        """Write events as importable JSON."""
        Path(path).write_text(encode_events(events, pretty))

    def export_readable(
        self,
        events: list[TrackingEvent],
        path: Path | str,
        tz: tzinfo | None = None,
    ) -> None:
        """Write one human readable line per event. Cannot be imported again."""
        Path(path).write_text("\n".join(format_events(events, tz)))

    def import_json(self, path: Path | str) -> list[TrackingEvent]:
        """Read events from a JSON export."""
        return decode_events(read_text(Path(path)))
