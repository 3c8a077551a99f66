"""GitFlow CLI -- terminal interface for the repository state engine.

This module is NEVER imported from gitflow/__init__.py.
It is only loaded via the ``gitflow`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging

import click

from gitflow.cli.formatting import get_console
from gitflow.repository import DEFAULT_AUTHOR, Repository


@click.group()
@click.option(
    "--strict/--lenient",
    default=False,
    help="Treat rejected commands as errors (default: lenient, report and continue).",
)
@click.option(
    "--verify",
    is_flag=True,
    help="Check repository invariants after every command.",
)
@click.option(
    "--author",
    default=DEFAULT_AUTHOR,
    envvar="GITFLOW_AUTHOR",
    show_default=True,
    help="Author recorded on commits.",
)
@click.option(
    "--sequential-ids",
    is_flag=True,
    help="Use deterministic commit ids and timestamps (c0001, c0002, ...).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log engine decisions to stderr.")
@click.version_option(package_name="gitflow-engine")
@click.pass_context
def cli(
    ctx: click.Context,
    strict: bool,
    verify: bool,
    author: str,
    sequential_ids: bool,
    verbose: bool,
) -> None:
    """GitFlow: an in-memory version control playground for a single file."""
    ctx.ensure_object(dict)
    ctx.obj["strict"] = strict
    ctx.obj["verify"] = verify
    ctx.obj["author"] = author
    ctx.obj["sequential_ids"] = sequential_ids
    if verbose:
        _setup_logging(logging.DEBUG)


def _setup_logging(level: int) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _open_repository(ctx: click.Context) -> Repository:
    """Create a fresh Repository from the group options."""
    from gitflow.engine.ids import SequentialIdFactory, TickingClock

    obj = ctx.obj
    kwargs = {}
    if obj["sequential_ids"]:
        kwargs = {"id_factory": SequentialIdFactory(), "clock": TickingClock()}
    return Repository.open(
        strict=obj["strict"],
        verify=obj["verify"],
        author=obj["author"],
        **kwargs,
    )


__all__ = ["cli", "get_console"]


# Register subcommands after cli group is defined
from gitflow.cli.commands.run import run  # noqa: E402
from gitflow.cli.commands.shell import shell  # noqa: E402

cli.add_command(run)
cli.add_command(shell)
