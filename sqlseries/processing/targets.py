"""Multi-target request handling on top of :class:`SqlSeries`.

A dashboard panel sends several query targets at once. Each target is shaped
independently; a configuration problem in one target is reported against its
``ref_id`` and never stops its siblings.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..config.settings import ConfigurationError, split_keys
from ..models import LogFrame, OutputTable, ResultError, ResultSet, SeriesOptions, TimeSeries
from .series import SqlSeries

LOGGER = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("table", "logs", "timeseries")
DEFAULT_FORMAT = "timeseries"


@dataclass(slots=True)
class QueryTarget:
    ref_id: str
    format: str = DEFAULT_FORMAT
    time_key: str = ""
    data_keys: str = ""
    label_keys: str = ""
    extrapolate: bool = True
    hide: bool = False

    def __post_init__(self) -> None:
        if self.format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"Unsupported output format `{self.format}`; use one of {', '.join(SUPPORTED_FORMATS)}"
            )


@dataclass(slots=True)
class QueryWindow:
    start: float = 0.0
    end: float = 0.0
    ends_at_now: bool = False
    use_utc: bool = False
    timezone: Optional[str] = None


@dataclass(slots=True)
class TargetResponse:
    data: List[Any] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [item.to_dict() for item in self.data],
            "errors": dict(self.errors),
        }


def target_options(target: QueryTarget, window: QueryWindow) -> SeriesOptions:
    return SeriesOptions(
        ref_id=target.ref_id,
        time_column=target.time_key.strip() or None,
        value_columns=tuple(split_keys(target.data_keys)),
        group_by_columns=tuple(split_keys(target.label_keys)),
        use_utc=window.use_utc,
        timezone=window.timezone,
        window_start=window.start,
        window_end=window.end,
        window_ends_at_now=window.ends_at_now,
        extrapolate=target.extrapolate,
    )


def shape_result(series: SqlSeries, output_format: str) -> List[OutputTable] | List[LogFrame] | List[TimeSeries]:
    if output_format == "table":
        return series.to_table()
    if output_format == "logs":
        return series.to_logs()
    return series.to_time_series(series.options.extrapolate)


def run_targets(
    targets: Iterable[QueryTarget],
    results: Mapping[str, Any],
    window: QueryWindow,
) -> TargetResponse:
    """Shape every visible target whose result is present in ``results``.

    ``results`` maps ``ref_id`` to a :class:`ResultSet` or a raw payload
    mapping. Missing results are skipped silently, as the fetch layer
    already reported them.
    """
    response = TargetResponse()
    for target in targets:
        if target.hide:
            continue
        raw = results.get(target.ref_id)
        if raw is None:
            LOGGER.debug("No result for target %s; skipping", target.ref_id)
            continue
        try:
            result = raw if isinstance(raw, ResultSet) else ResultSet.from_payload(raw)
            series = SqlSeries(result, target_options(target, window))
            response.data.extend(shape_result(series, target.format))
        except (ConfigurationError, ResultError) as exc:
            LOGGER.warning("Target %s failed: %s", target.ref_id, exc)
            response.errors[target.ref_id] = str(exc)
    return response


def variable_values(result: ResultSet, key: str) -> List[Dict[str, Any]]:
    """Return ``[{"text": value}]`` entries for a template variable column."""
    key = (key or "").strip()
    if not key:
        raise ConfigurationError("Add variable key")
    if not result.rows:
        return []
    if key not in result.rows[0]:
        raise ConfigurationError("Variable key is not part of data schema")
    return [{"text": row.get(key)} for row in result.rows]


__all__ = [
    "DEFAULT_FORMAT",
    "QueryTarget",
    "QueryWindow",
    "SUPPORTED_FORMATS",
    "TargetResponse",
    "run_targets",
    "shape_result",
    "target_options",
    "variable_values",
]
