"""Shape columnar query results into table, log and time-series outputs."""

from .models import ColumnMeta, ResultError, ResultSet, SeriesOptions
from .processing.series import SqlSeries

__all__ = [
    "ColumnMeta",
    "ResultError",
    "ResultSet",
    "SeriesOptions",
    "SqlSeries",
    "config",
    "processing",
]
