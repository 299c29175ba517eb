"""Column classification, value normalisation and output shaping."""

from .column_types import ColumnKind, classify, unwrap_type, value_type
from .extrapolation import extrapolate
from .series import SqlSeries
from .targets import QueryTarget, QueryWindow, TargetResponse, run_targets, variable_values
from .time_values import coerce_number, detect_epoch_unit, normalize_time_value

__all__ = [
    "ColumnKind",
    "QueryTarget",
    "QueryWindow",
    "SqlSeries",
    "TargetResponse",
    "classify",
    "coerce_number",
    "detect_epoch_unit",
    "extrapolate",
    "normalize_time_value",
    "run_targets",
    "unwrap_type",
    "value_type",
    "variable_values",
]
