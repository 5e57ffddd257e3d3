"""Shared loop: feed trace lines through a Reconstructor and print records."""

from __future__ import annotations

from collections.abc import Iterable

import click
from rich.console import Console
from rich.table import Table

from sockdump.config import SockdumpConfig
from sockdump.engine.reconstructor import Reconstructor, SessionStats
from sockdump.output.emitter import PacketEmitter

console = Console(stderr=True)

TOOL_PREFIX = "sockdump"


def report_diagnostic(message: str) -> None:
    click.echo(f"{TOOL_PREFIX}: {message}", err=True)


def dump_stream(lines: Iterable[str], config: SockdumpConfig) -> SessionStats:
    """Reconstruct packets from ``lines`` and write them to stdout."""
    reconstructor = Reconstructor(config, on_diagnostic=report_diagnostic)
    emitter = PacketEmitter(debug=config.debug, payload_limit=config.payload_limit)

    try:
        for record in reconstructor.run(lines):
            click.echo(emitter.render(record))
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")

    return reconstructor.stats


def print_summary(stats: SessionStats) -> None:
    console.print("\n[bold]Session Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()

    table.add_row("Lines", str(stats.lines))
    table.add_row("Events", str(stats.events))
    table.add_row("Unparsable", str(stats.unparsable))
    table.add_row("Unresolved resumes", str(stats.unresolved))
    table.add_row("Ignored syscalls", str(stats.ignored))
    table.add_row("Candidates", str(stats.candidates))
    table.add_row("Emitted", str(stats.emitted))
    table.add_row("Dropped (size)", str(stats.dropped_small))
    table.add_row("Dropped (TCP flow)", str(stats.dropped_flow))
    console.print(table)
