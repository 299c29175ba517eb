"""FastAPI application exposing result shaping over HTTP."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List

from fastapi import APIRouter, FastAPI, HTTPException
from uvicorn import Config, Server

from sqlseries.config import ConfigurationError, Settings, load_settings
from sqlseries.models import ResultError, ResultSet, SeriesOptions, json_safe
from sqlseries.processing import QueryTarget, QueryWindow, SqlSeries, run_targets, variable_values
from sqlseries.processing.targets import shape_result
from sqlseries.processing.time_values import window_bound_seconds

from .schemas import (
    QueryRequest,
    QueryResponse,
    ResultPayload,
    ShapeOptions,
    ShapeRequest,
    ShapeResponse,
    VariablesRequest,
    VariableValue,
)

LOGGER = logging.getLogger(__name__)

router = APIRouter()


def current_settings() -> Settings:
    return load_settings()


def to_result_set(payload: ResultPayload) -> ResultSet:
    try:
        return ResultSet.from_payload(payload.model_dump())
    except ResultError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def build_options(options: ShapeOptions, settings: Settings) -> SeriesOptions:
    try:
        return settings.series_options(
            ref_id=options.ref_id,
            time_column=options.time_key or None,
            value_columns=tuple(options.data_keys) or None,
            group_by_columns=tuple(options.label_keys) or None,
            use_utc=options.use_utc,
            timezone=options.timezone,
            window_start=window_bound_seconds(options.window_start),
            window_end=window_bound_seconds(options.window_end) if options.window_end is not None else time.time(),
            window_ends_at_now=options.window_ends_at_now or options.window_end is None,
            extrapolate=options.extrapolate,
        )
    except (ConfigurationError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/api/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.post("/api/shape", response_model=ShapeResponse)
async def api_shape(request: ShapeRequest) -> ShapeResponse:
    options = build_options(request.options, current_settings())
    series = SqlSeries(to_result_set(request.result), options)
    try:
        output = shape_result(series, request.format)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ShapeResponse(format=request.format, data=[json_safe(item.to_dict()) for item in output])


@router.post("/api/query", response_model=QueryResponse)
async def api_query(request: QueryRequest) -> QueryResponse:
    try:
        targets = [QueryTarget(**target.model_dump()) for target in request.targets]
        window = QueryWindow(
            start=window_bound_seconds(request.window.start),
            end=window_bound_seconds(request.window.end) if request.window.end is not None else time.time(),
            ends_at_now=request.window.ends_at_now or request.window.end is None,
            use_utc=request.window.use_utc,
            timezone=request.window.timezone,
        )
    except (ConfigurationError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    results = {ref_id: payload.model_dump() for ref_id, payload in request.results.items()}
    response = run_targets(targets, results, window)
    payload = json_safe(response.to_dict())
    return QueryResponse(data=payload["data"], errors=payload["errors"])


@router.post("/api/variables", response_model=List[VariableValue])
async def api_variables(request: VariablesRequest) -> List[VariableValue]:
    try:
        values = variable_values(to_result_set(request.result), request.key)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [VariableValue(**item) for item in values]


app = FastAPI(title="SQLSERIES API")
app.include_router(router)


def start_ui(host: str, port: int) -> None:
    """Start the FastAPI server via uvicorn."""

    config = Config(app=app, host=host, port=port, log_level="info")
    server = Server(config=config)
    LOGGER.info("Serving sqlseries API on %s:%s", host, port)
    asyncio.run(server.serve())
