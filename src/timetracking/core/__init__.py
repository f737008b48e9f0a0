"""Functional core - pure event log logic with no I/O."""

from .events import TrackingData, TrackingEvent, Start, Stop, normalize, format_events
from .timewindow import (
    DateBound,
    DateTimeBound,
    ParseError,
    parse_date_time,
    parse_date_or_date_time,
    resolve_window,
)
from .filtering import filter_events, select_events
from .aggregate import (
    DurationOverflowError,
    format_duration,
    remaining_minutes,
    split_duration,
    total_worked_time,
)
from .cleanup import cleanup, find_conflicts
from .tracking import (
    Status,
    TrackingResult,
    continue_tracking,
    start_tracking,
    stop_tracking,
    tracking_status,
)

__all__ = [
    # Events
    "TrackingData",
    "TrackingEvent",
    "Start",
    "Stop",
    "normalize",
    "format_events",
    # Time windows
    "DateBound",
    "DateTimeBound",
    "ParseError",
    "parse_date_time",
    "parse_date_or_date_time",
    "resolve_window",
    # Filtering
    "filter_events",
    "select_events",
    # Aggregation
    "DurationOverflowError",
    "format_duration",
    "remaining_minutes",
    "split_duration",
    "total_worked_time",
    # Cleanup
    "cleanup",
    "find_conflicts",
    # Commands
    "Status",
    "TrackingResult",
    "continue_tracking",
    "start_tracking",
    "stop_tracking",
    "tracking_status",
]
