"""Interactive resolution of repeated start/stop events."""

from datetime import tzinfo
from typing import Callable

from .events import TrackingEvent, format_event

SKIP = "skip"
PROMPT = "Please enter the number of the entry to keep (<num>|skip) [default: skip]"


def _scan(events: list[TrackingEvent]) -> tuple[list[int], list[list[int]]]:
    """
    Walk the log and collect runs of same-kind events.

    Returns the indices of cleanly alternating events and, separately, the
    index runs that conflict. When a run starts, the previously accepted
    event is pulled into it, since any one of them could be the right one.
    """
    kept: list[int] = []
    runs: list[list[int]] = []
    run: list[int] = []
    last_was_start = None

    for i, event in enumerate(events):
        if last_was_start is None:
            last_was_start = event.is_start()
            kept.append(i)
        elif event.is_start() == last_was_start:
            if not run:
                run.append(kept.pop())
            run.append(i)
        else:
            if run:
                runs.append(run)
                run = []
            kept.append(i)
            last_was_start = event.is_start()

    if run:
        runs.append(run)
    return kept, runs


def find_conflicts(
    events: list[TrackingEvent],
) -> tuple[list[TrackingEvent], list[list[TrackingEvent]]]:
    """Split events into (alternating events, conflicting runs)."""
    kept, runs = _scan(events)
    return [events[i] for i in kept], [[events[i] for i in run] for run in runs]


def _choose(
    conflicting: list[TrackingEvent],
    reader: Callable[[str], str],
    echo: Callable[[str], None],
    tz: tzinfo | None,
) -> int | None:
    """Ask which entry of a run to keep. Returns its position, or None to keep all."""
    kind = "start" if conflicting[0].is_start() else "stop"
    echo(f"Repeated {kind} events found:")
    for number, event in enumerate(conflicting, start=1):
        echo(f"({number}) {format_event(event, tz, prefix=kind.capitalize())}")

    while True:
        echo("")
        text = reader(PROMPT).strip()
        if not text or text == SKIP:
            return None
        try:
            number = int(text)
        except ValueError:
            echo("Could not parse number!")
            continue
        if 1 <= number <= len(conflicting):
            return number - 1
        echo("Please use one of the numbers given above!")


def cleanup(
    events: list[TrackingEvent],
    reader: Callable[[str], str],
    echo: Callable[[str], None] = print,
    tz: tzinfo | None = None,
) -> list[TrackingEvent]:
    """
    Resolve every conflicting run with the operator.

    `reader` is called with the prompt text and returns the typed line.
    Skipping a run keeps all of its events. The result keeps the original
    relative order.
    """
    kept, runs = _scan(events)
    for run in runs:
        choice = _choose([events[i] for i in run], reader, echo, tz)
        if choice is None:
            kept.extend(run)
        else:
            kept.append(run[choice])
    return [events[i] for i in sorted(kept)]
