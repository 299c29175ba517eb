"""Shape one query result into table, log or time-series output."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config.settings import ConfigurationError
from ..models import (
    ColumnMeta,
    Datapoint,
    LogField,
    LogFrame,
    OutputTable,
    PivotedCell,
    ResultSet,
    Row,
    ScalarCell,
    SeriesOptions,
    TableColumn,
    TimeSeries,
    split_cell,
)
from .column_types import ColumnKind, classify, is_array_type, is_float_type, unwrap_type, value_type
from .extrapolation import extrapolate as extrapolate_boundaries
from .gaps import frontier_gaps, history_gaps
from .time_values import coerce_number, normalize_time_value, to_number

LOGGER = logging.getLogger(__name__)

MESSAGE_COLUMN = "content"
RESERVED_LOG_FIELDS = frozenset({"level", "id"})
LABEL_SEPARATOR = ", "


class SqlSeries:
    """Result shaper for a single query target.

    Build one per target, then call exactly one of :meth:`to_table`,
    :meth:`to_logs` or :meth:`to_time_series`. The instance never mutates the
    rows it was given.
    """

    def __init__(self, result: ResultSet, options: Optional[SeriesOptions] = None) -> None:
        self.options = options or SeriesOptions()
        self.meta: List[ColumnMeta] = list(result.columns)
        self.rows: List[Row] = list(result.rows)
        self.kinds: Dict[str, ColumnKind] = {column.name: classify(column.type) for column in self.meta}

        self.time_key = self._resolve_time_key()
        number_keys = [
            column.name
            for column in self.meta
            if self.kinds[column.name] is ColumnKind.NUMBER and column.name != self.time_key
        ]
        string_keys = [
            column.name
            for column in self.meta
            if self.kinds[column.name] is ColumnKind.STRING and column.name != self.time_key
        ]
        array_keys = [column.name for column in self.meta if is_array_type(column.type)]
        data_keys = [key for key in self.options.value_columns if key in number_keys or key in array_keys]
        self.data_keys: List[str] = data_keys or number_keys
        self.label_keys: List[str] = [key for key in self.options.group_by_columns if key in string_keys]

    # ------------------------------------------------------------------
    # column resolution
    # ------------------------------------------------------------------
    def _resolve_time_key(self) -> Optional[str]:
        configured = self.options.time_column
        if configured and configured in self.kinds:
            return configured
        for column in self.meta:
            if self.kinds[column.name] is ColumnKind.TIME:
                return column.name
        return self._find_epoch_column()

    def _find_epoch_column(self) -> Optional[str]:
        """Pick the integer column whose first-row value is largest."""
        candidates = [
            column.name
            for column in self.meta
            if self.kinds[column.name] is ColumnKind.NUMBER and not is_float_type(column.type)
        ]
        if not candidates or not self.rows:
            return None
        first_row = self.rows[0]

        def _first_value(name: str) -> float:
            number = to_number(first_row.get(name))
            return float("-inf") if number is None else number

        best = candidates[0]
        for name in candidates[1:]:
            if _first_value(best) < _first_value(name):
                best = name
        LOGGER.debug("No time column typed as time; using epoch-like column %s", best)
        return best

    # ------------------------------------------------------------------
    # table
    # ------------------------------------------------------------------
    def to_table(self) -> List[OutputTable]:
        if not self.rows:
            return []
        columns = [TableColumn(text=column.name, type=value_type(column.type)) for column in self.meta]
        rows = [
            [
                coerce_number(row.get(column.text)) if column.type == "number" else row.get(column.text)
                for column in columns
            ]
            for row in self.rows
        ]
        return [OutputTable(columns=columns, rows=rows)]

    # ------------------------------------------------------------------
    # logs
    # ------------------------------------------------------------------
    def _message_column(self) -> Optional[str]:
        names = [column.name for column in self.meta]
        if MESSAGE_COLUMN in names:
            return MESSAGE_COLUMN
        for column in self.meta:
            if self.kinds[column.name] is ColumnKind.STRING:
                return column.name
        return None

    def to_logs(self) -> List[LogFrame]:
        if not self.rows:
            return []
        message_column = self._message_column()
        if message_column is None:
            LOGGER.info("Result for %s has no string column; no log frames produced", self.options.ref_id)
            return []

        field_types: Dict[str, str] = {}
        label_columns: List[str] = []
        for index, column in enumerate(self.meta):
            kind = self.kinds[column.name]
            if index == 0 and unwrap_type(column.type) == "UInt64":
                kind = ColumnKind.TIME
            if (
                kind is ColumnKind.STRING
                and column.name != message_column
                and column.name not in RESERVED_LOG_FIELDS
            ):
                label_columns.append(column.name)
            field_types[column.name] = kind.value

        frames: List[LogFrame] = []
        for row in self.rows:
            labels = {name: row[name] for name in label_columns if name in row}
            message = LogField(
                name=message_column,
                value=row.get(message_column),
                type=field_types[message_column],
                labels=labels,
            )
            others = [
                LogField(name=column.name, value=row[column.name], type=field_types[column.name])
                for column in self.meta
                if column.name in row and column.name != message_column and column.name not in label_columns
            ]
            frames.append(LogFrame(ref_id=self.options.ref_id, message_field=message, other_fields=others))
        return frames

    # ------------------------------------------------------------------
    # time series
    # ------------------------------------------------------------------
    def _series_names(self, row: Row, keys: Sequence[str]) -> List[Optional[str]]:
        """Series name per data key, ``None`` meaning "use the column name"."""
        if not self.label_keys:
            return [None] * len(keys)
        if len(self.label_keys) == len(self.data_keys):
            return [_label_text(row.get(self.label_keys[self.data_keys.index(key)])) for key in keys]
        joined = LABEL_SEPARATOR.join(_label_text(row.get(name)) for name in self.label_keys)
        return [joined] * len(keys)

    def _push(self, metrics: Dict[str, List[Datapoint]], key: str, value: Any, timestamp: Any) -> None:
        if key not in metrics:
            metrics[key] = history_gaps(metrics, timestamp)
        metrics[key].append([coerce_number(value), timestamp])

    def to_time_series(self, extrapolate: Optional[bool] = None) -> List[TimeSeries]:
        if not self.rows:
            return []
        if not self.time_key:
            raise ConfigurationError("no time column selected or resolvable")
        if extrapolate is None:
            extrapolate = self.options.extrapolate

        metrics: Dict[str, List[Datapoint]] = {}
        last_time = self._time_of(self.rows[0])

        for row in self.rows:
            current = self._time_of(row)
            if last_time < current:
                for key, marker in frontier_gaps(metrics, last_time).items():
                    metrics[key].append(marker)
                last_time = current

            keys = [key for key in self.data_keys if key in row]
            for key, name in zip(keys, self._series_names(row, keys)):
                cell = split_cell(row[key])
                if isinstance(cell, PivotedCell):
                    for sub_key, value in cell.pairs:
                        self._push(metrics, sub_key, value, current)
                elif isinstance(cell, ScalarCell):
                    self._push(metrics, name if name is not None else key, cell.value, current)

        for key, marker in frontier_gaps(metrics, last_time).items():
            metrics[key].append(marker)

        output: List[TimeSeries] = []
        for target, datapoints in metrics.items():
            if extrapolate:
                datapoints = extrapolate_boundaries(
                    datapoints,
                    self.options.window_start,
                    self.options.window_end,
                    self.options.window_ends_at_now,
                )
            output.append(TimeSeries(target=target, datapoints=datapoints))
        return output

    def _time_of(self, row: Row) -> Any:
        return normalize_time_value(
            row.get(self.time_key),
            self.options.use_utc,
            timezone=self.options.timezone,
        )


def _label_text(value: Any) -> str:
    return "" if value is None else str(value)


__all__ = ["LABEL_SEPARATOR", "MESSAGE_COLUMN", "RESERVED_LOG_FIELDS", "SqlSeries"]
