"""Data containers for query results and shaped outputs."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

Row = Dict[str, Any]
Datapoint = List[Any]


class ResultError(ValueError):
    """Raised when a result payload is malformed or reports a source error."""


@dataclass(frozen=True, slots=True)
class ColumnMeta:
    name: str
    type: str


@dataclass(slots=True)
class ResultSet:
    """Rows plus the column metadata describing them."""

    columns: List[ColumnMeta] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ResultSet":
        """Build a result set from ``{"meta": [...], "data": [...]}`` JSON.

        ``columns``/``rows`` are accepted as aliases. A non-empty ``error``
        entry means the source rejected the query and raises ``ResultError``.
        """
        if not isinstance(payload, Mapping):
            raise ResultError("Result payload must be a JSON object")
        error = payload.get("error")
        if error:
            raise ResultError(str(error))

        raw_meta = payload.get("meta", payload.get("columns")) or []
        raw_rows = payload.get("data", payload.get("rows")) or []
        if not isinstance(raw_meta, list) or not isinstance(raw_rows, list):
            raise ResultError("Result payload `meta` and `data` must be lists")

        columns: List[ColumnMeta] = []
        for entry in raw_meta:
            if not isinstance(entry, Mapping) or "name" not in entry:
                raise ResultError(f"Invalid column definition: {entry!r}")
            columns.append(ColumnMeta(name=str(entry["name"]), type=str(entry.get("type", ""))))

        rows: List[Row] = []
        for row in raw_rows:
            if not isinstance(row, Mapping):
                raise ResultError(f"Invalid row: {row!r}")
            rows.append(dict(row))
        return cls(columns=columns, rows=rows)


@dataclass(frozen=True, slots=True)
class ScalarCell:
    value: Any


@dataclass(frozen=True, slots=True)
class PivotedCell:
    pairs: Tuple[Tuple[str, Any], ...]


Cell = Union[ScalarCell, PivotedCell]


def _is_pair(item: Any) -> bool:
    return isinstance(item, (list, tuple)) and len(item) == 2


def split_cell(value: Any) -> Cell:
    """Classify a raw cell as a scalar or a list of ``[sub_key, value]`` pairs."""
    if isinstance(value, (list, tuple)) and all(_is_pair(item) for item in value):
        return PivotedCell(pairs=tuple((str(key), item) for key, item in value))
    return ScalarCell(value=value)


@dataclass(slots=True)
class SeriesOptions:
    """Formatting options applied to one query target."""

    ref_id: str = "A"
    time_column: Optional[str] = None
    value_columns: Sequence[str] = ()
    group_by_columns: Sequence[str] = ()
    use_utc: bool = False
    timezone: Optional[str] = None
    window_start: float = 0.0
    window_end: float = 0.0
    window_ends_at_now: bool = False
    extrapolate: bool = False


@dataclass(slots=True)
class TableColumn:
    text: str
    type: str


@dataclass(slots=True)
class OutputTable:
    columns: List[TableColumn]
    rows: List[List[Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "columns": [{"text": column.text, "type": column.type} for column in self.columns],
            "rows": [list(row) for row in self.rows],
            "type": "table",
        }


@dataclass(slots=True)
class LogField:
    name: str
    value: Any
    type: str
    labels: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name, "value": self.value, "type": self.type}
        if self.labels is not None:
            payload["labels"] = dict(self.labels)
        return payload


@dataclass(slots=True)
class LogFrame:
    ref_id: str
    message_field: LogField
    other_fields: List[LogField] = field(default_factory=list)

    @property
    def labels(self) -> Dict[str, Any]:
        return dict(self.message_field.labels or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "refId": self.ref_id,
            "meta": {"preferredVisualisationType": "logs"},
            "messageField": self.message_field.to_dict(),
            "otherFields": [item.to_dict() for item in self.other_fields],
        }


@dataclass(slots=True)
class TimeSeries:
    target: str
    datapoints: List[Datapoint] = field(default_factory=list)

    @property
    def timestamps(self) -> List[Any]:
        return [point[1] for point in self.datapoints]

    @property
    def values(self) -> List[Any]:
        return [point[0] for point in self.datapoints]

    def to_dict(self) -> Dict[str, Any]:
        return {"target": self.target, "datapoints": [list(point) for point in self.datapoints]}


def json_safe(value: Any) -> Any:
    """Replace NaN/inf floats (unparseable instants) with ``None``."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value


__all__ = [
    "Cell",
    "ColumnMeta",
    "Datapoint",
    "LogField",
    "LogFrame",
    "OutputTable",
    "PivotedCell",
    "ResultError",
    "ResultSet",
    "Row",
    "ScalarCell",
    "SeriesOptions",
    "TableColumn",
    "TimeSeries",
    "json_safe",
    "split_cell",
]
