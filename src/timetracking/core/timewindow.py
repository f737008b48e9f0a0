"""Parsing of user supplied times and resolution of filter windows."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo

TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%H")
DATE_FORMAT = "%Y-%m-%d"
DATE_TIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d %H")

START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59)


class ParseError(ValueError):
    """Raised when a date/time string matches none of the accepted formats."""


def local_to_utc(moment: datetime, tz: tzinfo | None = None) -> datetime:
    """
    Convert a naive local datetime to an aware UTC datetime.

    The offset is the one in force at `moment` itself, so windows around a
    daylight saving change get the right boundaries. With tz=None the
    system's local zone is used.
    """
    if tz is None:
        return moment.astimezone(timezone.utc)
    return moment.replace(tzinfo=tz).astimezone(timezone.utc)


def utc_to_local(instant: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert an aware instant to local time (system zone when tz is None)."""
    return instant.astimezone(tz)


def local_today(now: datetime | None = None, tz: tzinfo | None = None) -> date:
    """The current local calendar date."""
    if now is None:
        return datetime.now(tz).date()
    return utc_to_local(now, tz).date()


@dataclass(frozen=True)
class DateBound:
    """A whole calendar day, 00:00:00 to 23:59:59 local time."""

    day: date

    def date(self) -> date:
        return self.day

    def lower_instant(self, tz: tzinfo | None = None) -> datetime:
        return local_to_utc(datetime.combine(self.day, START_OF_DAY), tz)

    def upper_instant(self, tz: tzinfo | None = None) -> datetime:
        return local_to_utc(datetime.combine(self.day, END_OF_DAY), tz)


@dataclass(frozen=True)
class DateTimeBound:
    """An exact local date and time."""

    moment: datetime

    def date(self) -> date:
        return self.moment.date()

    def lower_instant(self, tz: tzinfo | None = None) -> datetime:
        return local_to_utc(self.moment, tz)

    def upper_instant(self, tz: tzinfo | None = None) -> datetime:
        return local_to_utc(self.moment, tz)


DateOrDateTime = DateBound | DateTimeBound


def _try_formats(text: str, formats: tuple[str, ...]) -> datetime | None:
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _parse_local(text: str, today: date) -> datetime:
    """Parse a time or date-time string into a naive local datetime."""
    text = text.strip()

    parsed = _try_formats(text, TIME_FORMATS)
    if parsed is not None:
        return datetime.combine(today, parsed.time())

    parsed = _try_formats(text, DATE_TIME_FORMATS)
    if parsed is not None:
        return parsed

    raise ParseError(
        f'Could not parse "{text}". Use "HH:MM:SS", "YYYY-MM-DD" or "YYYY-MM-DD HH:MM:SS"'
    )


def parse_date_time(
    text: str,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> datetime:
    """
    Parse a point in time given as local time.

    Accepts "HH:MM:SS", "HH:MM" and "HH" (on `today`), then
    "YYYY-MM-DD HH:MM:SS" and its minute and hour only variants.
    Returns an aware UTC datetime.
    """
    today = today or local_today(tz=tz)
    return local_to_utc(_parse_local(text, today), tz)


def parse_date_or_date_time(
    text: str,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> DateOrDateTime:
    """Parse a filter boundary: a bare "YYYY-MM-DD" is a whole day."""
    try:
        return DateBound(datetime.strptime(text.strip(), DATE_FORMAT).date())
    except ValueError:
        pass
    today = today or local_today(tz=tz)
    return DateTimeBound(_parse_local(text, today))


def week_bounds(today: date) -> tuple[DateBound, DateBound]:
    """Monday and Sunday of the week containing `today`."""
    offset = today.weekday()
    monday = today - timedelta(days=offset)
    sunday = today + timedelta(days=6 - offset)
    return DateBound(monday), DateBound(sunday)


def resolve_window(
    from_: str | None,
    to: str | None,
    filter_: str | None,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> tuple[str | None, DateOrDateTime, DateOrDateTime]:
    """
    Resolve --from/--to/filter arguments into (filter, from_bound, to_bound).

    The "week" filter replaces any explicit bounds with the current
    Monday-Sunday window and is consumed (the returned filter is None).
    Without --to the window ends with the day of the from bound.
    """
    today = today or local_today(tz=tz)

    if filter_ == "week":
        monday, sunday = week_bounds(today)
        return None, monday, sunday

    if from_ is None:
        from_bound: DateOrDateTime = DateBound(today)
    else:
        from_bound = parse_date_or_date_time(from_, tz=tz, today=today)

    if to is None:
        to_bound: DateOrDateTime = DateBound(from_bound.date())
    else:
        to_bound = parse_date_or_date_time(to, tz=tz, today=today)

    return filter_, from_bound, to_bound
