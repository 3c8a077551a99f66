"""gitflow run -- replay a command script against a fresh repository."""

from __future__ import annotations

from typing import TextIO

import click

from gitflow.cli.formatting import (
    format_error,
    format_log,
    format_result,
    format_status,
    get_console,
)


@click.command()
@click.argument("script", type=click.File("r"))
@click.option("--json", "as_json", is_flag=True, help="Print the final snapshot as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Do not print per-command outcomes.")
@click.pass_context
def run(ctx: click.Context, script: TextIO, as_json: bool, quiet: bool) -> None:
    """Apply the commands in SCRIPT, starting from a fresh repository.

    SCRIPT holds a JSON array of command objects or one JSON object per
    line.  Use ``-`` to read from stdin.  With --strict, the first rejected
    command aborts the run with exit code 1.
    """
    from gitflow.cli import _open_repository
    from gitflow.models.commands import parse_commands

    console = get_console()
    try:
        commands = parse_commands(script.read())
        repo = _open_repository(ctx)
        for command in commands:
            result = repo.dispatch(command)
            if not quiet and not as_json:
                format_result(result, console)

        if as_json:
            click.echo(repo.snapshot.to_json())
            return

        console.print()
        format_status(repo.status(), console)
        console.print()
        entries = repo.log()
        format_log(entries, console, {c.id: repo.branches_at(c.id) for c in entries})
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
