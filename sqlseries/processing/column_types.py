"""Semantic classification of source-system column type tags."""
from __future__ import annotations

import re
from enum import Enum


class ColumnKind(Enum):
    NUMBER = "number"
    STRING = "string"
    TIME = "time"
    OTHER = "other"


_WRAPPER = re.compile(r"^(?:Nullable|LowCardinality)\((.*)\)$")
_NUMBER = re.compile(r"^(?:U?Int(?:8|16|32|64|128|256)|Float(?:32|64)|Decimal(?:32|64|128|256)?(?:\(.*\))?)$")
_TIME = re.compile(r"^(?:Date|Date32|DateTime|DateTime64)(?:\(.*\))?$")
_ADDRESS = {"IPv4", "IPv6"}


def unwrap_type(type_tag: str) -> str:
    """Strip ``Nullable(...)`` and ``LowCardinality(...)`` wrappers."""
    tag = (type_tag or "").strip()
    match = _WRAPPER.match(tag)
    while match:
        tag = match.group(1).strip()
        match = _WRAPPER.match(tag)
    return tag


def classify(type_tag: str) -> ColumnKind:
    """Map a type tag to its semantic kind; unknown tags are strings."""
    tag = unwrap_type(type_tag)
    if _NUMBER.match(tag):
        return ColumnKind.NUMBER
    if _TIME.match(tag):
        return ColumnKind.TIME
    if tag in _ADDRESS:
        return ColumnKind.OTHER
    return ColumnKind.STRING


def value_type(type_tag: str) -> str:
    """Return the table column type: ``number`` or ``string``."""
    return "number" if classify(type_tag) is ColumnKind.NUMBER else "string"


def is_float_type(type_tag: str) -> bool:
    return "Float" in unwrap_type(type_tag)


def is_array_type(type_tag: str) -> bool:
    """True for ``Array(...)`` columns, which may carry pre-pivoted pairs."""
    return unwrap_type(type_tag).startswith("Array(")


__all__ = ["ColumnKind", "classify", "is_array_type", "is_float_type", "unwrap_type", "value_type"]
