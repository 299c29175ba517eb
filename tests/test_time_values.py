"""Numeric coercion and time normalisation tests."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from sqlseries.config import ConfigurationError
from sqlseries.processing.time_values import (
    EPOCH_MILLISECONDS,
    EPOCH_SECONDS,
    coerce_number,
    detect_epoch_unit,
    local_zone,
    normalize_time_value,
    window_bound_seconds,
)
from tests.conftest import get_test_logger
from tests.helpers import T0_MS

logger = get_test_logger(__name__)
logger.info("Starting tests for time value normalisation")


def test_coerce_number() -> None:
    assert coerce_number("42.5") == 42.5
    assert coerce_number(" 7 ") == 7.0
    assert coerce_number(3) == 3
    assert coerce_number("abc") == "abc"
    assert coerce_number(None) is None
    assert coerce_number("") == ""
    assert coerce_number("nan") == "nan"
    assert coerce_number("inf") == "inf"
    assert coerce_number("Infinity") == "Infinity"
    assert coerce_number(True) is True


def test_detect_epoch_unit_closest_to_now_wins() -> None:
    now = float(T0_MS)
    assert detect_epoch_unit(T0_MS // 1000, now) == EPOCH_SECONDS
    assert detect_epoch_unit(T0_MS, now) == EPOCH_MILLISECONDS
    # both readings equally far from now
    assert detect_epoch_unit(0, now) == EPOCH_SECONDS


def test_numeric_time_values() -> None:
    now = float(T0_MS)
    assert normalize_time_value(T0_MS // 1000, True, now_ms=now) == T0_MS
    assert normalize_time_value(str(T0_MS // 1000), True, now_ms=now) == T0_MS
    assert normalize_time_value(str(T0_MS), False, now_ms=now) == T0_MS


def test_string_time_values() -> None:
    assert normalize_time_value("2024-01-01T00:00:00Z", True) == T0_MS
    assert normalize_time_value("2024-01-01T00:00:00Z", False, timezone="Europe/Bucharest") == T0_MS
    assert normalize_time_value("2024-01-01 00:00:00", True) == T0_MS
    assert normalize_time_value("2024-01-01 02:00:00", False, timezone="Europe/Bucharest") == T0_MS
    assert normalize_time_value("2024-01-01 00:01:00.500", True) == T0_MS + 60_500


def test_datetime_objects() -> None:
    assert normalize_time_value(datetime(2024, 1, 1, tzinfo=timezone.utc), False) == T0_MS


@pytest.mark.parametrize("raw", ["not a time", None, ""])
def test_unparseable_time_is_nan(raw) -> None:
    logger.info("Normalising unparseable value %r", raw)
    assert math.isnan(normalize_time_value(raw, True))


def test_window_bounds() -> None:
    assert window_bound_seconds(None) == 0.0
    assert window_bound_seconds(1704067200) == 1704067200.0
    assert window_bound_seconds("1704067200") == 1704067200.0
    assert window_bound_seconds("2024-01-01T00:00:00Z") == 1704067200.0
    with pytest.raises(ValueError):
        window_bound_seconds("yesterday-ish")


def test_unknown_local_timezone_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        local_zone("Mars/Base")
    with pytest.raises(ConfigurationError):
        normalize_time_value("2024-01-01 00:00:00", False, timezone="Mars/Base")
    # aware and numeric instants never consult the local zone
    assert normalize_time_value("2024-01-01T00:00:00Z", False, timezone="Mars/Base") == T0_MS
