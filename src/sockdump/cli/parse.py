"""CLI command: sockdump parse [FILE] — read a recorded trace."""

from __future__ import annotations

from typing import TextIO

import click

from sockdump.cli.stream import dump_stream, print_summary


@click.command()
@click.argument(
    "trace_file",
    type=click.File("r", encoding="utf-8", errors="replace"),
    default="-",
)
@click.pass_context
def parse(ctx: click.Context, trace_file: TextIO) -> None:
    """Reconstruct packets from a recorded strace log (stdin by default)."""
    config = ctx.obj["config"]
    stats = dump_stream(trace_file, config)
    if ctx.obj.get("summary"):
        print_summary(stats)
