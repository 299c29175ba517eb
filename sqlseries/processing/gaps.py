"""Null gap markers for time series sharing one time axis."""
from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from ..models import Datapoint


def frontier_gaps(series: Mapping[str, Sequence[Datapoint]], previous_time: float) -> Dict[str, Datapoint]:
    """Markers for series that reported nothing at ``previous_time``.

    Called once each time the row time moves past ``previous_time``.
    """
    return {
        key: [None, previous_time]
        for key, points in series.items()
        if points and points[-1][1] < previous_time
    }


def history_gaps(series: Mapping[str, Sequence[Datapoint]], timestamp: float) -> List[Datapoint]:
    """Markers a new series needs for every known timestamp older than ``timestamp``."""
    seen = {point[1] for points in series.values() for point in points if point[1] < timestamp}
    return [[None, value] for value in sorted(seen)]


__all__ = ["frontier_gaps", "history_gaps"]
