"""Shared helper utilities for the sqlseries test-suite."""

from .data import (
    T0_MS,
    build_host_cpu_result,
    build_log_result,
    build_result,
    minute_series,
    result_payload,
)

__all__ = [
    "T0_MS",
    "build_host_cpu_result",
    "build_log_result",
    "build_result",
    "minute_series",
    "result_payload",
]
