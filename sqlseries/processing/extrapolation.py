"""Boundary extrapolation for series sampled over a truncated window.

The first and last buckets of a fixed-cadence series are often only partly
filled when the query runs, which shows up as an artificial dip at the edges.
``extrapolate`` stretches those boundary points from their two inner
neighbours: the neighbour value is scaled by ``1 + frac((v1 - v2) / v1 * 0.1)``
where ``frac`` keeps the sign of its argument (``math.fmod``).
"""
from __future__ import annotations

import math
from typing import Any, List, Optional

from ..models import Datapoint
from .time_values import to_number

MINIMUM_DATAPOINTS = 10
START_BOUNDARY = 0
CORRECTION_SCALE = 0.1


def correction_factor(anchor: Any, neighbour: Any) -> Optional[float]:
    """Fractional trend term between two inner values, ``None`` if not numeric."""
    a = to_number(anchor)
    b = to_number(neighbour)
    if a is None or b is None:
        return None
    if a == 0:
        return 0.0
    diff = (a - b) / a * CORRECTION_SCALE
    return math.fmod(diff, 1)


def _boundary_value(anchor: Any, neighbour: Any) -> Optional[float]:
    factor = correction_factor(anchor, neighbour)
    if factor is None:
        return None
    return to_number(anchor) * (1 + factor)


def extrapolate(
    datapoints: List[Datapoint],
    window_start: float,
    window_end: float,
    window_ends_at_now: bool,
) -> List[Datapoint]:
    """Adjust the first and/or last datapoint in place and return the list.

    ``window_start`` and ``window_end`` are epoch seconds; datapoint
    timestamps are epoch milliseconds.
    """
    count = len(datapoints)
    if count < MINIMUM_DATAPOINTS:
        return datapoints
    if not window_ends_at_now and datapoints[0][0] != START_BOUNDARY:
        return datapoints

    first_ts = datapoints[0][1]
    last_ts = datapoints[-1][1]
    duration_to_start = first_ts / 1000 - window_start
    duration_to_end = window_end - last_ts / 1000
    average_spacing = (last_ts - first_ts) / 1000 / (count - 1)
    threshold = average_spacing / 2

    if duration_to_start < threshold and datapoints[0][0] == START_BOUNDARY:
        value = _boundary_value(datapoints[1][0], datapoints[2][0])
        if value is not None:
            datapoints[0][0] = value

    if duration_to_end < threshold:
        value = _boundary_value(datapoints[-2][0], datapoints[-3][0])
        if value is not None:
            datapoints[-1][0] = value

    return datapoints


__all__ = ["CORRECTION_SCALE", "MINIMUM_DATAPOINTS", "START_BOUNDARY", "correction_factor", "extrapolate"]
