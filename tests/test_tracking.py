"""Tests for start/stop/continue/status logic."""

from datetime import datetime, timezone

import pytest

from timetracking.config import Settings
from timetracking.core.events import Start, Stop
from timetracking.core.timewindow import ParseError
from timetracking.core.tracking import (
    Status,
    continue_tracking,
    start_tracking,
    stop_tracking,
    tracking_status,
)

UTC = timezone.utc


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2021, 4, 1, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def now():
    return at(10, 0, 30)


@pytest.fixture
def running():
    return [Start.create(at(9), "work")]


@pytest.fixture
def stopped():
    return [Start.create(at(8), "work"), Stop.create(at(9))]


class TestStartTracking:
    def test_empty_log(self, now):
        result = start_tracking(Settings(), [], "work", now=now, tz=UTC)
        assert result.changed is True
        assert result.events == [Start.create(now, "work")]
        assert result.warnings == []

    def test_after_stop(self, stopped, now):
        result = start_tracking(Settings(), stopped, now=now, tz=UTC)
        assert result.events == stopped + [Start.create(now)]

    def test_already_running(self, running, now):
        result = start_tracking(Settings(), running, "other", now=now, tz=UTC)
        assert result.changed is False
        assert result.events == running
        assert result.warnings == ["Time tracking is already running!"]

    def test_explicit_time_overrides_running(self, running, now):
        result = start_tracking(Settings(), running, "late", at="09:30", now=now, tz=UTC)
        assert result.changed is True
        assert result.events[-1] == Start.create(at(9, 30), "late")

    def test_auto_insert_stop(self, running, now):
        result = start_tracking(Settings(auto_insert_stop=True), running, "other", now=now, tz=UTC)
        assert result.changed is True
        assert result.events == running + [Stop.create(now), Start.create(now, "other")]

    def test_auto_insert_stop_without_description(self, running, now):
        result = start_tracking(Settings(auto_insert_stop=True), running, now=now, tz=UTC)
        assert result.events[-2:] == [Stop.create(now), Start.create(now)]

    def test_auto_insert_stop_same_description(self, running, now):
        result = start_tracking(Settings(auto_insert_stop=True), running, "work", now=now, tz=UTC)
        assert result.changed is False
        assert result.warnings == ['Timetracking with the description "work" is already running!']

    def test_invalid_time(self, now):
        with pytest.raises(ParseError):
            start_tracking(Settings(), [], at="noon", now=now, tz=UTC)

    def test_does_not_mutate_input(self, stopped, now):
        before = list(stopped)
        start_tracking(Settings(), stopped, now=now, tz=UTC)
        assert stopped == before


class TestStopTracking:
    def test_after_start(self, running, now):
        result = stop_tracking(running, "done", now=now, tz=UTC)
        assert result.changed is True
        assert result.events == running + [Stop.create(now, "done")]

    def test_empty_log(self, now):
        result = stop_tracking([], now=now, tz=UTC)
        assert result.events == [Stop.create(now)]

    def test_already_stopped(self, stopped, now):
        result = stop_tracking(stopped, now=now, tz=UTC)
        assert result.changed is False
        assert result.warnings == ["Time tracking is already stopped!"]

    def test_explicit_time(self, stopped, now):
        result = stop_tracking(stopped, at="2021-04-01 08:30", now=now, tz=UTC)
        assert result.events[-1] == Stop.create(at(8, 30))


class TestContinueTracking:
    def test_reuses_last_description(self, now):
        events = [Start.create(at(7), "old"), Stop.create(at(8)), Start.create(at(8, 30), "recent"), Stop.create(at(9))]
        result = continue_tracking(events, now=now)
        assert result.changed is True
        assert result.events[-1] == Start.create(now, "recent")

    def test_running(self, running, now):
        result = continue_tracking(running, now=now)
        assert result.changed is False
        assert len(result.warnings) == 1

    def test_empty(self, now):
        result = continue_tracking([], now=now)
        assert result.changed is False
        assert "Use the start command instead!" in result.warnings[0]

    def test_no_previous_start(self, now):
        events = [Stop.create(at(9))]
        result = continue_tracking(events, now=now)
        assert result.changed is False
        assert result.events == events


class TestTrackingStatus:
    def test_empty(self):
        assert tracking_status([]) is None

    def test_active(self, running):
        status = tracking_status(running, tz=UTC)
        assert status == Status(active=True, time=at(9), description="work")
        assert status.lines() == ["Active: true", "Description: work", "Start Time: 09:00:00"]

    def test_inactive_without_description(self, stopped):
        status = tracking_status(stopped, tz=UTC)
        assert status.active is False
        assert status.lines() == ["Active: false", "End Time: 09:00:00"]
