"""Central configuration for result shaping defaults."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..models import SeriesOptions

DEFAULT_CONFIG_PATH = Path("config/sqlseries.yaml")
CONFIG_ENV_VAR = "SQLSERIES_CONFIG"


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid or a required column cannot be resolved."""


@dataclass(slots=True)
class FormattingConfig:
    use_utc: bool = False
    timezone: Optional[str] = None
    extrapolate: bool = True
    time_column: Optional[str] = None
    value_columns: List[str] = field(default_factory=list)
    group_by_columns: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8090


@dataclass(slots=True)
class Settings:
    formatting: FormattingConfig = field(default_factory=FormattingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def series_options(self, **overrides: Any) -> SeriesOptions:
        """Build ``SeriesOptions`` from the configured defaults plus overrides.

        ``None`` overrides are ignored so callers can pass optional CLI/API
        values straight through.
        """
        fmt = self.formatting
        values: Dict[str, Any] = {
            "use_utc": fmt.use_utc,
            "timezone": fmt.timezone,
            "extrapolate": fmt.extrapolate,
            "time_column": fmt.time_column,
            "value_columns": tuple(fmt.value_columns),
            "group_by_columns": tuple(fmt.group_by_columns),
        }
        known = {item.name for item in fields(SeriesOptions)}
        for key, value in overrides.items():
            if key not in known:
                raise ConfigurationError(f"Unknown series option `{key}`")
            if value is not None:
                values[key] = value
        if values.get("timezone"):
            resolve_timezone(values["timezone"])
        return SeriesOptions(**values)


def resolve_timezone(name: str) -> ZoneInfo:
    """Return the zone for an IANA name, raising ``ConfigurationError`` if unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone `{name}`") from exc


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file {path} does not exist")
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text) or {}
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise ConfigurationError("Unsupported configuration format; use YAML or JSON")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Invalid configuration format: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return data


def _string_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return split_keys(value)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return [item.strip() for item in value if item.strip()]
    raise ConfigurationError(f"`formatting.{key}` must be a list of column names")


def split_keys(value: Optional[str | Sequence[str]]) -> List[str]:
    """Split a comma separated key list, dropping blanks."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def _parse_formatting(raw: Dict[str, Any]) -> FormattingConfig:
    unknown = set(raw) - {item.name for item in fields(FormattingConfig)}
    if unknown:
        raise ConfigurationError(f"Unknown formatting keys: {', '.join(sorted(unknown))}")
    timezone = raw.get("timezone")
    if timezone:
        resolve_timezone(str(timezone))
    return FormattingConfig(
        use_utc=bool(raw.get("use_utc", False)),
        timezone=str(timezone) if timezone else None,
        extrapolate=bool(raw.get("extrapolate", True)),
        time_column=raw.get("time_column") or None,
        value_columns=_string_list(raw.get("value_columns"), "value_columns"),
        group_by_columns=_string_list(raw.get("group_by_columns"), "group_by_columns"),
    )


def _parse_server(raw: Dict[str, Any]) -> ServerConfig:
    try:
        port = int(raw.get("port", 8090))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError("`server.port` must be an integer") from exc
    if not 0 < port < 65536:
        raise ConfigurationError("`server.port` must be between 1 and 65535")
    return ServerConfig(host=str(raw.get("host", "127.0.0.1")), port=port)


def load_settings(path: Optional[Path | str] = None) -> Settings:
    """Load settings from ``path``, ``$SQLSERIES_CONFIG`` or ``config/sqlseries.yaml``.

    An explicit path must exist; when no candidate exists the defaults apply.
    """
    if path:
        raw = _load_file(Path(path))
    else:
        candidates: List[Path] = []
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            candidates.append(Path(env_path))
        candidates.append(DEFAULT_CONFIG_PATH)
        for candidate in candidates:
            if candidate.exists():
                raw = _load_file(candidate)
                break
        else:
            return Settings()

    formatting_raw = raw.get("formatting") or {}
    server_raw = raw.get("server") or {}
    if not isinstance(formatting_raw, dict) or not isinstance(server_raw, dict):
        raise ConfigurationError("`formatting` and `server` sections must be mappings")
    return Settings(formatting=_parse_formatting(formatting_raw), server=_parse_server(server_raw))


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "FormattingConfig",
    "ServerConfig",
    "Settings",
    "load_settings",
    "resolve_timezone",
    "split_keys",
]
