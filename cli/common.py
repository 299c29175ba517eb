from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from sqlseries.models import ResultError, ResultSet, json_safe

from . import APP_ROOT

_CONSOLE = Console()
LOG_DIR = APP_ROOT / "logs" / "cli"


def console() -> Console:
    return _CONSOLE


def ensure_dir(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(name: str, level: int = logging.INFO) -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_path = LOG_DIR / f"{name}.log"
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def load_result(path: Path) -> ResultSet:
    """Read a saved ``{"meta": ..., "data": ...}`` payload from disk."""
    if not path.exists():
        raise typer.BadParameter(f"Result file {path} not found")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return ResultSet.from_payload(payload)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    except ResultError as exc:
        raise typer.BadParameter(f"{path}: {exc}") from exc


def write_json(payload: Any, out: Path) -> Path:
    ensure_dir(out)
    out.write_text(json.dumps(json_safe(payload), indent=2, default=str, allow_nan=False), encoding="utf-8")
    return out
