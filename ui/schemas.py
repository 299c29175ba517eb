"""Pydantic models for HTTP API requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

OutputFormat = Literal["table", "logs", "timeseries"]
WindowBound = Union[float, str, None]


class ColumnSchema(BaseModel):
    name: str
    type: str = ""


class ResultPayload(BaseModel):
    meta: List[ColumnSchema] = Field(default_factory=list)
    data: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None


class ShapeOptions(BaseModel):
    ref_id: str = "A"
    time_key: Optional[str] = None
    data_keys: List[str] = Field(default_factory=list)
    label_keys: List[str] = Field(default_factory=list)
    use_utc: Optional[bool] = None
    timezone: Optional[str] = None
    window_start: WindowBound = Field(None, description="Epoch seconds or ISO-8601")
    window_end: WindowBound = Field(None, description="Epoch seconds or ISO-8601")
    window_ends_at_now: bool = False
    extrapolate: Optional[bool] = None


class ShapeRequest(BaseModel):
    format: OutputFormat = "timeseries"
    result: ResultPayload
    options: ShapeOptions = Field(default_factory=ShapeOptions)


class ShapeResponse(BaseModel):
    format: OutputFormat
    data: List[Dict[str, Any]] = Field(default_factory=list)


class TargetSchema(BaseModel):
    ref_id: str
    format: OutputFormat = "timeseries"
    time_key: str = ""
    data_keys: str = Field("", description="Comma separated value columns")
    label_keys: str = Field("", description="Comma separated label columns")
    extrapolate: bool = True
    hide: bool = False


class WindowSchema(BaseModel):
    start: WindowBound = None
    end: WindowBound = None
    ends_at_now: bool = False
    use_utc: bool = False
    timezone: Optional[str] = None


class QueryRequest(BaseModel):
    targets: List[TargetSchema]
    results: Dict[str, ResultPayload] = Field(default_factory=dict)
    window: WindowSchema = Field(default_factory=WindowSchema)


class QueryResponse(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)


class VariablesRequest(BaseModel):
    result: ResultPayload
    key: str


class VariableValue(BaseModel):
    text: Any
