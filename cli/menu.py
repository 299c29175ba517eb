from __future__ import annotations

from typing import Iterable

from rich.panel import Panel
from rich.table import Table

from .common import console


def render_menu(options: Iterable[tuple[str, str]]) -> None:
    table = Table()
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Command", style="green")
    table.add_column("Description")
    for idx, (command, label) in enumerate(options, start=1):
        table.add_row(str(idx), command, label)
    console().print(Panel(table, title="sqlseries", subtitle="python -m cli.app <command> --help"))
