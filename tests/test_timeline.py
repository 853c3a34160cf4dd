"""Unit tests for depgraph.graph.timeline."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from depgraph.graph.models import GraphNode, TimelineStatus
from depgraph.graph.timeline import (
    effective_range_days,
    evaluate_timeline,
    oldest_created_at,
    parse_created_at,
    timeline_label,
)

NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


def _node(node_id: str, created_at: str | None) -> GraphNode:
    return GraphNode(id=node_id, label=node_id, created_at=created_at)


def _days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat()


class TestParsing:
    def test_zulu_suffix(self):
        assert parse_created_at("2025-06-01T00:00:00Z") == datetime(2025, 6, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_created_at("2025-06-01T00:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "2025-13-45", 12345])
    def test_unparseable_is_none(self, value):
        assert parse_created_at(value) is None


class TestRange:
    def test_oldest_ignores_unknown_dates(self):
        nodes = [_node("a", _days_ago(10)), _node("b", "garbage"), _node("c", None)]
        assert oldest_created_at(nodes, NOW) == NOW - timedelta(days=10)

    def test_oldest_defaults_to_now(self):
        assert oldest_created_at([_node("a", None)], NOW) == NOW

    def test_minimum_range_is_a_week(self):
        oldest = NOW - timedelta(days=1)
        assert effective_range_days(oldest, NOW) == 7

    def test_range_rounds_up(self):
        oldest = NOW - timedelta(days=20, hours=1)
        assert effective_range_days(oldest, NOW) == 21


class TestEvaluate:
    def test_today_marks_nothing_new(self):
        nodes = [_node("a", _days_ago(3)), _node("b", _days_ago(0.5))]
        result = evaluate_timeline(nodes, 100, now=NOW)
        assert result.days_back == 0
        assert result.label == "Today"
        assert all(s is TimelineStatus.UNCHANGED for s in result.statuses.values())

    def test_going_back_flags_newer_nodes(self):
        nodes = [_node("old", _days_ago(30)), _node("recent", _days_ago(2))]
        # range 30 days, slider 50 -> 15 days back
        result = evaluate_timeline(nodes, 50, now=NOW)
        assert result.range_days == 30
        assert result.days_back == 15
        assert result.status_of("recent") is TimelineStatus.NEW
        assert result.status_of("old") is TimelineStatus.UNCHANGED

    def test_slider_zero_reaches_oldest(self):
        nodes = [_node("old", _days_ago(30)), _node("recent", _days_ago(2))]
        result = evaluate_timeline(nodes, 0, now=NOW)
        assert result.cutoff == NOW - timedelta(days=30)
        # Created exactly at the cutoff is not "after" it
        assert result.status_of("old") is TimelineStatus.UNCHANGED
        assert result.status_of("recent") is TimelineStatus.NEW

    def test_unknown_dates_are_unchanged(self):
        nodes = [_node("none", None), _node("bad", "not a date"), _node("ok", _days_ago(1))]
        result = evaluate_timeline(nodes, 0, now=NOW)
        assert result.status_of("none") is TimelineStatus.UNCHANGED
        assert result.status_of("bad") is TimelineStatus.UNCHANGED
        assert result.status_of("ok") is TimelineStatus.NEW

    def test_minimum_range_applies_for_fresh_data(self):
        result = evaluate_timeline([_node("a", _days_ago(1))], 0, now=NOW)
        assert result.range_days == 7
        assert result.days_back == 7

    def test_monotonic_in_slider(self):
        nodes = [_node(f"n{d}", _days_ago(d)) for d in (0.2, 1, 3, 8, 15, 40, 90)]
        previous_new = None
        for slider in range(0, 101, 5):
            result = evaluate_timeline(nodes, slider, now=NOW)
            new = {k for k, s in result.statuses.items() if s is TimelineStatus.NEW}
            if previous_new is not None:
                assert new <= previous_new
            previous_new = new

    def test_deleted_is_never_produced(self):
        nodes = [_node(f"n{d}", _days_ago(d)) for d in range(0, 60, 7)]
        for slider in (0, 33, 66, 100):
            result = evaluate_timeline(nodes, slider, now=NOW)
            assert TimelineStatus.DELETED not in result.statuses.values()

    @pytest.mark.parametrize("slider", [-1, 101])
    def test_out_of_range_slider_rejected(self, slider):
        with pytest.raises(ValueError):
            evaluate_timeline([], slider, now=NOW)

    def test_zero_time_sentinel_clamps_cutoff(self):
        nodes = [_node("zero", "0001-01-01T00:00:00Z"), _node("recent", _days_ago(2))]
        result = evaluate_timeline(nodes, 0, now=NOW)
        assert result.cutoff == datetime.min.replace(tzinfo=timezone.utc)
        assert result.status_of("zero") is TimelineStatus.UNCHANGED
        assert result.status_of("recent") is TimelineStatus.NEW
        assert result.to_dict()["cutoff"].startswith("0001-01-01")

    def test_naive_now_is_accepted(self):
        result = evaluate_timeline([_node("a", _days_ago(3))], 0, now=NOW.replace(tzinfo=None))
        assert result.status_of("a") is TimelineStatus.NEW


class TestLabel:
    @pytest.mark.parametrize(
        "days_back, label",
        [
            (0, "Today"),
            (0.4, "Today"),
            (1, "1 Day Ago"),
            (1.5, "2 Days Ago"),
            (6, "6 Days Ago"),
            (7, "1 Week Ago"),
            (13, "1 Week Ago"),
            (14, "2 Weeks Ago"),
            (25, "4 Weeks Ago"),
            (30, "1 Month Ago"),
            (59, "1 Month Ago"),
            (60, "2 Months Ago"),
            (100, "3 Months Ago"),
        ],
    )
    def test_buckets(self, days_back, label):
        assert timeline_label(days_back) == label
