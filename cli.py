#!/usr/bin/env python3
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from core import registry
from core.distributor import Distributor
from core.export import save_messages
from core.levels import LogLevel
from core.message import LogMessage


class LevelChoice(str, Enum):
    debug = "debug"
    information = "information"
    warning = "warning"
    error = "error"


app = typer.Typer(help="livelog: leveled log distribution with a live view")
console = Console()

DEMO_MESSAGES = [
    (LogLevel.DEBUG, "loader", "Opening %s", ("data.csv",)),
    (LogLevel.INFORMATION, "loader", "Read %d rows", (1280,)),
    (LogLevel.WARNING, "parser", "Skipped %d malformed rows", (3,)),
    (LogLevel.INFORMATION, "model", "Fit finished in %.2f s", (0.84,)),
    (LogLevel.ERROR, "writer", "Cannot write %s: disk full", ("out.csv",)),
]


def _demo_messages() -> list[LogMessage]:
    return [
        LogMessage.create(text, *args, source=source, level=level)
        for level, source, text, args in DEMO_MESSAGES
    ]


@app.command()
def demo(
    level: LevelChoice = typer.Option(LevelChoice.information, case_sensitive=False, help="Distributor threshold"),
    console_output: bool = typer.Option(True, "--console/--no-console", help="Print accepted messages"),
    notify_all: bool = typer.Option(True, "--notify-all/--notify-filtered", help="Notify subscribers of every message"),
):
    """Emit sample messages and summarize what subscribers received."""
    distributor = Distributor(
        level=LogLevel.parse(level.value),
        console_output=console_output,
        notify_all=notify_all,
    )
    received: list[LogMessage] = []
    with distributor.subscribe(lambda n: received.append(n.message)):
        for message in _demo_messages():
            distributor.log(message)

    table = Table(title="Delivered to subscribers")
    table.add_column("Level", style="cyan")
    table.add_column("Source", style="magenta")
    table.add_column("Message")
    for message in received:
        table.add_row(message.level.label, message.source, message.text)
    console.print(table)
    console.print(f"[green]✓ {len(received)} of {len(DEMO_MESSAGES)} messages delivered[/green]")


@app.command()
def export(
    output: Path = typer.Option(Path("livelog.txt"), help="File to write (overwritten)"),
):
    """Write the sample messages to a text file, one formatted line each."""
    path = save_messages(_demo_messages(), output, registry.current())
    console.print(f"[green]✓ Saved {len(DEMO_MESSAGES)} messages to {path}[/green]")


@app.command()
def view(
    level: LevelChoice = typer.Option(LevelChoice.debug, case_sensitive=False, help="Distributor threshold"),
):
    """Open the live log window and feed it the sample messages."""
    from PySide6.QtCore import QTimer

    from app.main import main

    distributor = Distributor(level=LogLevel.parse(level.value), console_output=False)
    registry.set_current(distributor)

    def feed(_window):
        for i, message in enumerate(_demo_messages()):
            QTimer.singleShot(300 * (i + 1), lambda m=message: distributor.log(
                LogMessage.create(m.text, source=m.source, level=m.level)
            ))

    raise typer.Exit(main(distributor, on_ready=feed))


if __name__ == "__main__":
    app()
