"""Tests for core event filtering."""

from datetime import date, datetime, timezone

import pytest

from timetracking.core.events import Start, Stop
from timetracking.core.filtering import filter_events, matches_description, select_events
from timetracking.core.timewindow import DateBound, DateTimeBound

UTC = timezone.utc


def at(day: int, hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2021, 4, day, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def two_days():
    return [
        Start.create(at(1, 9), "work"),
        Stop.create(at(1, 12)),
        Start.create(at(2, 9), "meeting with team"),
        Stop.create(at(2, 10), "meeting done"),
        Start.create(at(2, 11)),
        Stop.create(at(2, 12)),
    ]


class TestMatchesDescription:
    def test_no_filter_matches(self):
        assert matches_description(Start.create(at(1, 9)), None) is True
        assert matches_description(Start.create(at(1, 9)), "") is True

    def test_all_matches_missing_description(self):
        assert matches_description(Start.create(at(1, 9)), "all") is True

    def test_substring_is_case_sensitive(self):
        event = Start.create(at(1, 9), "Team meeting")
        assert matches_description(event, "meeting") is True
        assert matches_description(event, "Meeting") is False

    def test_missing_description_never_matches_keyword(self):
        assert matches_description(Start.create(at(1, 9)), "meeting") is False


class TestFilterEvents:
    def test_date_window(self, two_days):
        result = filter_events(two_days, DateBound(date(2021, 4, 2)), DateBound(date(2021, 4, 2)), None, tz=UTC)
        assert result == two_days[2:]

    def test_all_ignores_bounds(self, two_days):
        far_away = DateBound(date(1999, 1, 1))
        assert filter_events(two_days, far_away, far_away, "all", tz=UTC) == two_days

    def test_missing_bounds_are_open(self, two_days):
        assert filter_events(two_days, None, None, None, tz=UTC) == two_days

    def test_bounds_are_inclusive(self):
        events = [
            Start.create(at(1, 0, 0, 0)),
            Stop.create(at(1, 23, 59, 59)),
            Start.create(at(2, 0, 0, 0)),
        ]
        day = DateBound(date(2021, 4, 1))
        assert filter_events(events, day, day, None, tz=UTC) == events[:2]

    def test_date_time_bounds(self, two_days):
        result = filter_events(
            two_days,
            DateTimeBound(datetime(2021, 4, 2, 10, 30)),
            DateTimeBound(datetime(2021, 4, 2, 12, 0)),
            None,
            tz=UTC,
        )
        assert result == two_days[4:]

    def test_leading_stops_are_dropped(self):
        events = [Stop.create(at(1, 8)), Stop.create(at(1, 8, 30)), Start.create(at(1, 9)), Stop.create(at(1, 10))]
        result = filter_events(events, None, None, None, tz=UTC)
        assert result == events[2:]

    def test_window_cutting_into_pair_drops_stop(self, two_days):
        result = filter_events(two_days, DateTimeBound(datetime(2021, 4, 2, 9, 30)), DateBound(date(2021, 4, 2)), None, tz=UTC)
        assert result[0].is_start()
        assert result == two_days[4:]

    def test_only_stops_gives_empty(self):
        events = [Stop.create(at(1, 8)), Stop.create(at(1, 9))]
        assert filter_events(events, None, None, "all", tz=UTC) == []

    def test_keyword_filter(self, two_days):
        result = filter_events(two_days, None, None, "meeting", tz=UTC)
        assert result == [two_days[2], two_days[3]]

    def test_keyword_drops_events_without_description(self):
        events = [Start.create(at(1, 9), "meeting"), Stop.create(at(1, 10))]
        assert filter_events(events, None, None, "meeting", tz=UTC) == [events[0]]

    def test_preserves_input_order(self):
        events = [Start.create(at(1, 11)), Stop.create(at(1, 12)), Start.create(at(1, 9))]
        assert filter_events(events, None, None, None, tz=UTC) == events


class TestSelectEvents:
    def test_defaults_to_today(self, two_days):
        assert select_events(two_days, None, None, None, tz=UTC, today=date(2021, 4, 1)) == two_days[:2]

    def test_week(self, two_days):
        assert select_events(two_days, None, None, "week", tz=UTC, today=date(2021, 4, 1)) == two_days

    def test_week_does_not_filter_descriptions(self, two_days):
        result = select_events(two_days, None, None, "week", tz=UTC, today=date(2021, 4, 2))
        assert Start.create(at(2, 11)) in result

    def test_keyword_within_day(self, two_days):
        result = select_events(two_days, "2021-04-02", None, "meeting", tz=UTC, today=date(2021, 4, 5))
        assert result == [two_days[2], two_days[3]]
