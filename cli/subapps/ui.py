from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from sqlseries.config import ConfigurationError, load_settings

from ..common import console

ui_app = typer.Typer(help="Serve the result shaping HTTP API")


@ui_app.command("start")
def start_ui(
    host: Optional[str] = typer.Option(None, "--host", "-h"),
    port: Optional[int] = typer.Option(None, "--port", "-p"),
    config: Optional[Path] = typer.Option(None, help="Optional settings file"),
) -> None:
    """Start the FastAPI server."""
    from ui.server import start_ui as run_server

    try:
        settings = load_settings(config)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    host = host or settings.server.host
    port = port or settings.server.port
    console().print(f"Starting API on http://{host}:{port}")

    try:
        run_server(host, port)
    except KeyboardInterrupt:
        console().print("Shutting down")
