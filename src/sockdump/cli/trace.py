"""CLI command: sockdump trace <PID | COMMAND...> — trace live."""

from __future__ import annotations

import signal
import sys

import click
import psutil

from sockdump.capture.strace import StraceSource, TracerError
from sockdump.cli.stream import console, dump_stream, print_summary


def _describe_pid(pid: int) -> str:
    try:
        return psutil.Process(pid).name()
    except psutil.NoSuchProcess:
        raise click.BadParameter(f"no process with PID {pid}", param_hint="TARGET") from None
    except psutil.AccessDenied:
        return "?"


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("target", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def trace(ctx: click.Context, target: tuple[str, ...]) -> None:
    """Trace a running PID, or launch COMMAND under strace."""
    config = ctx.obj["config"]

    if len(target) == 1 and target[0].isdigit():
        pid = int(target[0])
        console.print(
            f"[bold]sockdump[/bold] attaching to PID {pid} ({_describe_pid(pid)})",
            highlight=False,
        )
    else:
        console.print(
            f"[bold]sockdump[/bold] running [cyan]{' '.join(target)}[/cyan]",
            highlight=False,
        )

    source = StraceSource(
        target, strace_path=config.strace_path, string_limit=config.string_limit
    )

    def _signal_handler(signum: int, frame: object) -> None:
        console.print("\n[dim]Stopping...[/dim]")
        source.stop()

    try:
        source.start()
    except TracerError as exc:
        raise click.ClickException(str(exc)) from exc

    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        stats = dump_stream(source.lines(), config)
    finally:
        source.stop()

    if ctx.obj.get("summary"):
        print_summary(stats)

    sys.exit(source.exit_status)
