"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from sockdump import __version__
from sockdump.config import SockdumpConfig


@click.group()
@click.version_option(version=__version__, prog_name="sockdump")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML config file.",
)
@click.option("--debug", "-d", is_flag=True, help="Human-readable debug output.")
@click.option("--min-size", type=int, default=None, help="Minimum packet size in bytes [12].")
@click.option(
    "--max-tcp-seq",
    type=int,
    default=None,
    help="Packets kept per TCP flow direction [5].",
)
@click.option("--summary", is_flag=True, help="Print session statistics to stderr.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    debug: bool,
    min_size: int | None,
    max_tcp_seq: int | None,
    summary: bool,
    verbose: bool,
) -> None:
    """sockdump — reconstruct socket traffic from strace output."""
    try:
        config = SockdumpConfig.load(config_path)
        if debug:
            config.debug = True
        if min_size is not None:
            config.min_size = min_size
        if max_tcp_seq is not None:
            config.max_tcp_seq = max_tcp_seq
        config.verbose = verbose
        config.validate()
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["summary"] = summary

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from sockdump.cli.parse import parse  # noqa: F811
    from sockdump.cli.trace import trace  # noqa: F811

    main.add_command(trace)
    main.add_command(parse)


_register_commands()
