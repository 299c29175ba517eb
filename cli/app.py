from __future__ import annotations

import typer

from .common import configure_logging, console
from .menu import render_menu
from .subapps.shape import shape_app
from .subapps.ui import ui_app

app = typer.Typer(help="SQLSERIES command line interface")
app.add_typer(shape_app, name="shape")
app.add_typer(ui_app, name="ui")

MENU_OPTIONS = [
    ("shape table <result.json>", "Flat table with numeric coercion"),
    ("shape logs <result.json>", "One log frame per row"),
    ("shape timeseries <result.json>", "Labeled series with gap markers"),
    ("shape variables <result.json> --key <col>", "Template variable values"),
    ("ui start", "Serve the HTTP API"),
]


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    configure_logging("cli")
    if ctx.invoked_subcommand is None:
        render_menu(MENU_OPTIONS)
        console().print("Run [cyan]python -m cli.app --help[/] for all options")


if __name__ == "__main__":
    app()
