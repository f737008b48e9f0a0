"""tt - Time tracking CLI."""

import logging
import sys
from dataclasses import dataclass

import click

from .adapters.console import ClickLineReader
from .adapters.json_store import JsonEventStore, StoreError
from .config import Settings, expand_path, load_settings
from .core.cleanup import cleanup as resolve_conflicts
from .core.events import TrackingEvent, format_events
from .core.filtering import select_events
from .core.timewindow import ParseError, local_today
from .core.tracking import (
    TrackingResult,
    continue_tracking,
    start_tracking,
    stop_tracking,
    tracking_status,
)
from .ports.line_reader import LineReader
from .workflows import REMAINING_USAGE, get_store, persist, show_report

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """State shared by all commands of one invocation."""

    settings: Settings
    store: JsonEventStore

    def load(self) -> list[TrackingEvent]:
        try:
            return self.store.load()
        except StoreError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    def save(self, events: list[TrackingEvent]) -> None:
        persist(self.store, events)


def _apply(app: AppContext, result: TrackingResult) -> None:
    for warning in result.warnings:
        click.echo(warning, err=True)
    if result.changed:
        app.save(result.events)


filter_options = [
    click.option("--from", "-f", "from_", default=None,
                 help='Show entries after this time [default: today 00:00:00]. '
                      'Formats: "YYYY-MM-DD HH:MM:SS", "YYYY-MM-DD", "HH:MM:SS"'),
    click.option("--to", "-t", "to", default=None,
                 help="Show entries before this time [default: end of the from day]"),
    click.argument("filter_", metavar="[FILTER]", required=False),
]


def with_filter(func):
    for option in reversed(filter_options):
        func = option(func)
    return func


@click.group(invoke_without_command=True)
@click.version_option(package_name="timetracking")
@click.option("--data-file", "-d", default=None, help="Data file to use [default: from config]")
@click.option("--config-file", "-c", default=None, help="Config file to use")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, data_file: str | None, config_file: str | None, debug: bool):
    """tt - track your working time."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    settings = load_settings(config_file)
    ctx.obj = AppContext(settings=settings, store=get_store(settings, data_file))

    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


@main.command()
@click.argument("description", required=False)
@click.option("--at", "-a", default=None, help='Time of the event, "HH:MM:SS" or "YYYY-MM-DD HH:MM:SS"')
@click.pass_obj
def start(app: AppContext, description: str | None, at: str | None):
    """Start time tracking."""
    try:
        result = start_tracking(
            app.settings, app.load(), description, at, tz=app.settings.tzinfo()
        )
    except ParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    _apply(app, result)


@main.command()
@click.argument("description", required=False)
@click.option("--at", "-a", default=None, help='Time of the event, "HH:MM:SS" or "YYYY-MM-DD HH:MM:SS"')
@click.pass_obj
def stop(app: AppContext, description: str | None, at: str | None):
    """Stop time tracking."""
    try:
        result = stop_tracking(app.load(), description, at, tz=app.settings.tzinfo())
    except ParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    _apply(app, result)


@main.command("continue")
@click.pass_obj
def continue_(app: AppContext):
    """Continue time tracking with the last description."""
    _apply(app, continue_tracking(app.load()))


@main.command()
@click.pass_obj
def status(app: AppContext):
    """Show the latest entry. Exits with 0 if tracking is active."""
    current = tracking_status(app.load(), tz=app.settings.tzinfo())
    if current is None:
        click.echo("No Events found!")
        sys.exit(1)

    for line in current.lines():
        click.echo(line)
    sys.exit(0 if current.active else 1)


@main.command("list")
@with_filter
@click.pass_obj
def list_(app: AppContext, from_: str | None, to: str | None, filter_: str | None):
    """List entries. FILTER is "week", "all" or part of a description."""
    tz = app.settings.tzinfo()
    try:
        events = select_events(app.load(), from_, to, filter_, tz=tz, today=local_today(tz=tz))
    except ParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for line in format_events(events, tz):
        click.echo(line)


@main.command()
@with_filter
@click.option("--plain", "-p", is_flag=True, help="Show only the time with no additional text")
@click.option("--remaining", "-r", is_flag=True, help="Show time until the time goals are met")
@click.option("--include-seconds", "-s", "-i", is_flag=True, help="Include seconds in the calculation")
@click.option("--format", "template", default=None, help='Output format [default: "{hh}:{mm}:{ss}"]')
@click.pass_obj
def show(
    app: AppContext,
    from_: str | None = None,
    to: str | None = None,
    filter_: str | None = None,
    plain: bool = False,
    remaining: bool = False,
    include_seconds: bool = False,
    template: str | None = None,
):
    """Show work time for a time span. FILTER is "week", "all" or part of a description."""
    try:
        report = show_report(
            app.settings,
            app.load(),
            from_,
            to,
            filter_,
            template=template,
            include_seconds=include_seconds,
            plain=plain,
            remaining=remaining,
            tz=app.settings.tzinfo(),
        )
    except ParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if report is None:
        click.echo(REMAINING_USAGE, err=True)
        return
    click.echo(report.text)


@main.command()
@click.pass_obj
def cleanup(app: AppContext):
    """Interactively resolve repeated start or stop entries."""
    reader: LineReader = ClickLineReader()
    events = app.load()
    cleaned = resolve_conflicts(events, reader, echo=click.echo, tz=app.settings.tzinfo())
    if cleaned != events:
        app.save(cleaned)


@main.command()
@click.pass_obj
def path(app: AppContext):
    """Show the path to the data file."""
    click.echo(str(app.store.path))


@main.command()
@click.argument("target")
@click.option("--readable", "-r", is_flag=True,
              help="Human readable format. Cannot be imported again")
@click.option("--pretty", "-p", is_flag=True, help="Pretty print JSON")
@click.pass_obj
def export(app: AppContext, target: str, readable: bool, pretty: bool):
    """Export data to a file."""
    events = app.load()
    target_path = expand_path(target)
    if readable:
        app.store.export_readable(events, target_path, tz=app.settings.tzinfo())
    else:
        app.store.export_json(events, target_path, pretty)
    logger.debug(f"Exported {len(events)} events to {target_path}")


@main.command("import")
@click.argument("source")
@click.pass_obj
def import_(app: AppContext, source: str):
    """Replace the data with events from a JSON export."""
    try:
        events = app.store.import_json(expand_path(source))
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    app.save(events)


if __name__ == "__main__":
    main()
