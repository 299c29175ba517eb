from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from sqlseries.config import ConfigurationError, load_settings
from sqlseries.config.settings import split_keys
from sqlseries.models import SeriesOptions
from sqlseries.processing import SqlSeries, variable_values
from sqlseries.processing.time_values import window_bound_seconds

from ..common import console, load_result, write_json

shape_app = typer.Typer(help="Shape saved query results into table, logs or time series")

MAX_PREVIEW_ROWS = 20


def _build_options(
    config: Optional[Path],
    *,
    ref_id: str = "A",
    time_key: Optional[str] = None,
    data_keys: Optional[str] = None,
    label_keys: Optional[str] = None,
    utc: Optional[bool] = None,
    timezone: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    till_now: bool = False,
    extrapolate: Optional[bool] = None,
) -> SeriesOptions:
    try:
        settings = load_settings(config)
        window_start = window_bound_seconds(start)
        window_end = window_bound_seconds(end) if end else time.time()
        return settings.series_options(
            ref_id=ref_id,
            time_column=time_key or None,
            value_columns=tuple(split_keys(data_keys)) or None,
            group_by_columns=tuple(split_keys(label_keys)) or None,
            use_utc=utc,
            timezone=timezone,
            window_start=window_start,
            window_end=window_end,
            window_ends_at_now=till_now or not end,
            extrapolate=extrapolate,
        )
    except (ConfigurationError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _preview(rows: List[List[object]], headers: List[str], title: str) -> None:
    table = Table(title=title)
    for header in headers:
        table.add_column(header)
    for row in rows[:MAX_PREVIEW_ROWS]:
        table.add_row(*("" if cell is None else str(cell) for cell in row))
    console().print(table)
    if len(rows) > MAX_PREVIEW_ROWS:
        console().print(f"[dim]... {len(rows) - MAX_PREVIEW_ROWS} more rows[/]")


@shape_app.command("table")
def table(
    result: Path = typer.Argument(..., help="JSON payload with `meta` and `data`"),
    out: Optional[Path] = typer.Option(None, help="Write the shaped output as JSON"),
    config: Optional[Path] = typer.Option(None, help="Optional settings file"),
) -> None:
    series = SqlSeries(load_result(result), _build_options(config))
    tables = series.to_table()
    if out:
        write_json([item.to_dict() for item in tables], out)
        console().print(f"[green]{out}[/] written")
        return
    if not tables:
        console().print("[yellow]Result is empty[/]")
        return
    output = tables[0]
    _preview(output.rows, [f"{column.text} ({column.type})" for column in output.columns], "table")


@shape_app.command("logs")
def logs(
    result: Path = typer.Argument(..., help="JSON payload with `meta` and `data`"),
    out: Optional[Path] = typer.Option(None),
    ref_id: str = typer.Option("A", "--ref-id"),
    config: Optional[Path] = typer.Option(None),
) -> None:
    series = SqlSeries(load_result(result), _build_options(config, ref_id=ref_id))
    frames = series.to_logs()
    if out:
        write_json([frame.to_dict() for frame in frames], out)
        console().print(f"[green]{out}[/] written")
        return
    if not frames:
        console().print("[yellow]No log frames (result has no string column)[/]")
        return
    rows = [
        [
            frame.message_field.value,
            ", ".join(f"{key}={value}" for key, value in frame.labels.items()),
            ", ".join(f"{item.name}={item.value}" for item in frame.other_fields),
        ]
        for frame in frames
    ]
    _preview(rows, [frames[0].message_field.name, "labels", "fields"], "logs")


@shape_app.command("timeseries")
def timeseries(
    result: Path = typer.Argument(..., help="JSON payload with `meta` and `data`"),
    out: Optional[Path] = typer.Option(None),
    time_key: Optional[str] = typer.Option(None, "--time-key", help="Time column name"),
    data_keys: Optional[str] = typer.Option(None, "--data-keys", help="Comma separated value columns"),
    label_keys: Optional[str] = typer.Option(None, "--label-keys", help="Comma separated label columns"),
    utc: Optional[bool] = typer.Option(None, "--utc/--local", help="Read naive timestamps as UTC or local time"),
    timezone: Optional[str] = typer.Option(None, help="Local timezone name"),
    start: Optional[str] = typer.Option(None, "--from", help="Window start (epoch seconds or ISO-8601)"),
    end: Optional[str] = typer.Option(None, "--to", help="Window end; defaults to now"),
    extrapolate: Optional[bool] = typer.Option(None, "--extrapolate/--no-extrapolate"),
    config: Optional[Path] = typer.Option(None),
) -> None:
    options = _build_options(
        config,
        time_key=time_key,
        data_keys=data_keys,
        label_keys=label_keys,
        utc=utc,
        timezone=timezone,
        start=start,
        end=end,
        extrapolate=extrapolate,
    )
    series = SqlSeries(load_result(result), options)
    try:
        output = series.to_time_series(options.extrapolate)
    except ConfigurationError as exc:
        console().print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    if out:
        write_json([item.to_dict() for item in output], out)
        console().print(f"[green]{out}[/] written")
        return
    rows = [
        [
            item.target,
            len(item.datapoints),
            sum(1 for value in item.values if value is None),
            item.datapoints[0][1] if item.datapoints else None,
            item.datapoints[-1][1] if item.datapoints else None,
        ]
        for item in output
    ]
    _preview(rows, ["target", "points", "gaps", "first_ms", "last_ms"], f"time series (time column: {series.time_key})")


@shape_app.command("variables")
def variables(
    result: Path = typer.Argument(..., help="JSON payload with `meta` and `data`"),
    key: str = typer.Option(..., "--key", help="Column providing the variable values"),
) -> None:
    try:
        values = variable_values(load_result(result), key)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    for item in values:
        console().print(item["text"])
