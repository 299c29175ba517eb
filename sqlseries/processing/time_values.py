"""Time and numeric value normalisation for result cells."""
from __future__ import annotations

import logging
import math
import time
from datetime import datetime, tzinfo
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
from dateutil import parser

from ..config.settings import resolve_timezone

LOGGER = logging.getLogger(__name__)

EPOCH_SECONDS = "s"
EPOCH_MILLISECONDS = "ms"

Number = Union[int, float]


def to_number(value: Any) -> Optional[Number]:
    """Return ``value`` as a finite number, or ``None`` when it is not numeric."""
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def coerce_number(value: Any) -> Any:
    """Convert numeric-looking values to numbers, passing anything else through.

    Empty strings, booleans and non-finite values such as ``"Infinity"`` are
    not numeric here and come back unchanged rather than as 0, 1 or inf.
    """
    number = to_number(value)
    return value if number is None else number


def now_millis() -> float:
    return time.time() * 1000


def detect_epoch_unit(value: Number, now_ms: Optional[float] = None) -> str:
    """Guess whether an epoch number counts seconds or milliseconds.

    The interpretation landing closer to ``now_ms`` wins; a tie resolves to
    seconds.
    """
    now = now_millis() if now_ms is None else now_ms
    if abs(now - value) >= abs(now - value * 1000):
        return EPOCH_SECONDS
    return EPOCH_MILLISECONDS


def local_zone(timezone: Optional[str] = None) -> tzinfo:
    """Zone used for naive instants; raises ``ConfigurationError`` for unknown names."""
    if timezone:
        return resolve_timezone(timezone)
    return datetime.now().astimezone().tzinfo


def normalize_time_value(
    raw: Any,
    utc: bool,
    *,
    timezone: Optional[str] = None,
    now_ms: Optional[float] = None,
) -> Number:
    """Return epoch milliseconds for a raw time cell, or NaN when unparseable.

    Numbers and numeric strings go through :func:`detect_epoch_unit`. Other
    values are parsed as calendar instants; naive instants are read in UTC
    when ``utc`` is set and in ``timezone`` (system local by default)
    otherwise.
    """
    number = to_number(raw)
    if number is not None:
        if detect_epoch_unit(number, now_ms) == EPOCH_SECONDS:
            number = number * 1000
        return int(number)

    try:
        stamp = pd.Timestamp(raw)
    except (TypeError, ValueError, OverflowError) as exc:
        LOGGER.debug("Unparseable time value %r: %s", raw, exc)
        return math.nan
    if pd.isna(stamp):
        return math.nan

    if stamp.tzinfo is None:
        zone = "UTC" if utc else local_zone(timezone)
        stamp = stamp.tz_localize(zone, ambiguous="NaT", nonexistent="shift_forward")
        if pd.isna(stamp):
            return math.nan
    return int(stamp.value // 1_000_000)


def window_bound_seconds(value: Any) -> float:
    """Epoch seconds for a window bound given as epoch seconds or ISO-8601 text."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, datetime):
        return value.timestamp()
    number = to_number(value)
    if number is not None:
        return float(number)
    try:
        return parser.isoparse(str(value)).timestamp()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid window bound {value!r}") from exc


__all__ = [
    "EPOCH_MILLISECONDS",
    "EPOCH_SECONDS",
    "coerce_number",
    "detect_epoch_unit",
    "local_zone",
    "normalize_time_value",
    "now_millis",
    "window_bound_seconds",
    "to_number",
]
