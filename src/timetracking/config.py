"""Configuration management for timetracking."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TT_HOME = Path(os.environ.get("TT_HOME", Path.home() / ".config" / "timetracking"))
CONFIG_FILE = TT_HOME / "timetracking.conf"
PROJECT_CONFIG_NAME = "timetracking.project.conf"
LOCAL_CONFIG_NAME = ".timetracking.conf"
ENV_PREFIX = "TT_"

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class TimeGoal:
    """A target amount of work, written as "H:MM" in config files."""

    hours: int = 0
    minutes: int = 0

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    @classmethod
    def parse(cls, value: str) -> "TimeGoal":
        hours, _, minutes = value.strip().partition(":")
        goal = cls(int(hours), int(minutes or 0))
        if goal.hours < 0 or not 0 <= goal.minutes < 60:
            raise ValueError(f"invalid time goal: {value}")
        return goal


@dataclass
class Settings:
    """timetracking configuration."""

    data_file: str = "~/timetracking.json"
    auto_insert_stop: bool = False
    enable_project_settings: bool = False
    min_daily_break: int = 0
    time_goal_daily: TimeGoal = field(default_factory=lambda: TimeGoal(8, 0))
    time_goal_weekly: TimeGoal = field(default_factory=lambda: TimeGoal(40, 0))
    last_day_of_work_week: str = "Friday"
    timezone: str = ""

    def goal_minutes(self, filter_mode: str | None) -> int:
        """Weekly goal for the "week" filter, daily goal otherwise."""
        if filter_mode == "week":
            return self.time_goal_weekly.total_minutes
        return self.time_goal_daily.total_minutes

    def last_work_weekday(self) -> int:
        """Weekday index (Monday = 0) of the last work day."""
        return WEEKDAYS.index(self.last_day_of_work_week.strip().lower())

    def tzinfo(self) -> ZoneInfo | None:
        """Configured zone, or None for the system's local time."""
        return ZoneInfo(self.timezone) if self.timezone else None


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables."""
    return Path(os.path.expandvars(os.path.expanduser(str(path))))


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value}")


def _parse_weekday(value: str) -> str:
    if value.strip().lower() not in WEEKDAYS:
        raise ValueError(f"not a weekday: {value}")
    return value.strip().capitalize()


def _parse_timezone(value: str) -> str:
    if value:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
    return value


def parse_config_text(text: str) -> dict[str, str]:
    """Parse `key = value` lines into a dict with lower-case keys."""
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        values[key] = value
    return values


def apply_setting(settings: Settings, key: str, value: str, source: str = "") -> None:
    """Set one option from its string form. Bad keys and values are logged and skipped."""
    try:
        match key:
            case "data_file":
                settings.data_file = value
            case "auto_insert_stop":
                settings.auto_insert_stop = _parse_bool(value)
            case "enable_project_settings":
                settings.enable_project_settings = _parse_bool(value)
            case "min_daily_break":
                minutes = int(value)
                if minutes < 0:
                    raise ValueError(f"negative break: {value}")
                settings.min_daily_break = minutes
            case "time_goal_daily":
                settings.time_goal_daily = TimeGoal.parse(value)
            case "time_goal_weekly":
                settings.time_goal_weekly = TimeGoal.parse(value)
            case "last_day_of_work_week":
                settings.last_day_of_work_week = _parse_weekday(value)
            case "timezone":
                settings.timezone = _parse_timezone(value)
            case _:
                logger.warning(f"Ignoring unknown setting '{key}' in {source}")
    except ValueError as e:
        logger.warning(f"Ignoring invalid value for '{key}' in {source}: {e}")


def merge_file(settings: Settings, path: Path) -> bool:
    """Apply a config file if it exists. Returns whether it was read."""
    if not path.is_file():
        return False
    logger.debug(f"Reading settings from {path}")
    for key, value in parse_config_text(path.read_text()).items():
        apply_setting(settings, key, value, str(path))
    return True


def find_project_config(start: Path) -> Path | None:
    """Nearest project config file in `start` or one of its parents."""
    for directory in [start, *start.parents]:
        candidate = directory / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def load_settings(
    config_file: str | Path | None = None,
    cwd: Path | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    """
    Load settings, later sources overriding earlier ones.

    Order: defaults, user config file (or `config_file`), nearest project
    config (when enable_project_settings is on), ./.timetracking.conf,
    TT_* environment variables.
    """
    settings = Settings()
    cwd = cwd or Path.cwd()
    environ = os.environ if environ is None else environ

    user_config = expand_path(config_file) if config_file else CONFIG_FILE
    merge_file(settings, user_config)

    if settings.enable_project_settings:
        project_config = find_project_config(cwd)
        if project_config:
            merge_file(settings, project_config)

    merge_file(settings, cwd / LOCAL_CONFIG_NAME)

    for option in fields(Settings):
        name = ENV_PREFIX + option.name.upper()
        if name in environ:
            apply_setting(settings, option.name, environ[name].strip(), "environment")

    return settings
