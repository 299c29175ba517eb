"""Characterisation tests for boundary extrapolation."""

from __future__ import annotations

import copy
import math

import pytest

from sqlseries.models import SeriesOptions
from sqlseries.processing import SqlSeries
from sqlseries.processing.extrapolation import correction_factor, extrapolate
from tests.conftest import get_test_logger
from tests.helpers import T0_MS, build_result, minute_series

logger = get_test_logger(__name__)
logger.info("Starting tests for extrapolation")

VALUES = [0, 100, 90, 95, 97, 99, 101, 103, 110, 50]


def _window(points):
    """Window hugging the series: 10 s before the first and 5 s after the last point."""
    return points[0][1] / 1000 - 10, points[-1][1] / 1000 + 5


def test_short_series_untouched() -> None:
    points = minute_series([0, 5, 6, 7, 8, 9, 10, 11, 2])
    expected = copy.deepcopy(points)
    start, end = _window(points)
    assert extrapolate(points, start, end, True) == expected


def test_both_boundaries_extrapolated() -> None:
    points = minute_series(VALUES)
    start, end = _window(points)
    result = extrapolate(points, start, end, True)
    logger.info("Extrapolated: %s", result)

    assert result is points
    # (100 - 90) / 100 * 0.1 = 0.01
    assert result[0][0] == pytest.approx(101.0)
    # (110 - 103) / 110 * 0.1 -> 110 * 1.0063636...
    assert result[-1][0] == pytest.approx(110.7)
    assert [point[0] for point in result[1:-1]] == VALUES[1:-1]
    assert [point[1] for point in result] == [T0_MS + index * 60_000 for index in range(10)]


def test_negative_trend_keeps_sign() -> None:
    values = [0, 100, 120, 1, 1, 1, 1, 1, 1, 1]
    points = minute_series(values)
    start, _ = _window(points)
    extrapolate(points, start, points[-1][1] / 1000 + 3600, False)
    assert points[0][0] == pytest.approx(98.0)
    assert points[-1][0] == 1


def test_not_till_now_and_nonzero_start_is_skipped() -> None:
    points = minute_series([5] + VALUES[1:])
    expected = copy.deepcopy(points)
    start, end = _window(points)
    assert extrapolate(points, start, end, False) == expected


def test_far_window_edges_leave_points() -> None:
    points = minute_series(VALUES)
    expected = copy.deepcopy(points)
    extrapolate(points, points[0][1] / 1000 - 600, points[-1][1] / 1000 + 600, True)
    assert points == expected


def test_trailing_gap_marker_is_overwritten() -> None:
    points = minute_series(VALUES[:-1] + [None])
    start, end = _window(points)
    extrapolate(points, start, end, True)
    assert points[-1][0] == pytest.approx(110 * (1 + math.fmod((110 - 103) / 110 * 0.1, 1)))
    assert points[-1][1] == T0_MS + 9 * 60_000
    assert points[0][0] == pytest.approx(101.0)


def test_correction_factor_edge_cases() -> None:
    assert correction_factor(0, 5) == 0.0
    assert correction_factor(None, 5) is None
    assert correction_factor("bad", 5) is None
    # |diff| above one keeps only the fractional part
    assert correction_factor(1, 13) == pytest.approx(-0.2)


def test_series_engine_applies_extrapolation() -> None:
    rows = [
        {"ts": f"2024-01-01T00:{index:02d}:00Z", "hits": value}
        for index, value in enumerate(VALUES)
    ]
    result = build_result([("ts", "DateTime"), ("hits", "UInt32")], rows)
    options = SeriesOptions(
        use_utc=True,
        window_start=T0_MS / 1000 - 10,
        window_end=(T0_MS + 9 * 60_000) / 1000 + 5,
        window_ends_at_now=True,
    )
    plain = SqlSeries(result, options).to_time_series(False)[0]
    stretched = SqlSeries(result, options).to_time_series(True)[0]

    assert plain.values == VALUES
    assert stretched.values[0] == pytest.approx(101.0)
    assert stretched.values[-1] == pytest.approx(110.7)
