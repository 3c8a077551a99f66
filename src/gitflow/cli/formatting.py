"""Rich formatting helpers for the GitFlow CLI.

Provides functions that format engine results and views for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from gitflow.formatting import lane_color

if TYPE_CHECKING:
    from gitflow.models.branch import BranchInfo
    from gitflow.models.commit import Commit
    from gitflow.models.transition import TransitionResult
    from gitflow.operations.diff import TextDiff
    from gitflow.operations.history import StatusInfo
    from gitflow.operations.timeline import Timeline


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_result(result: TransitionResult, console: Console) -> None:
    """Display one line for a dispatched command."""
    kind = getattr(result.command, "kind", "?")
    if result.rejected:
        exc = result.to_exception()
        reason = escape(str(exc)) if exc is not None else result.outcome.value
        console.print(
            f"[yellow]{kind}[/yellow] rejected ([dim]{result.outcome.value}[/dim]): {reason}",
            highlight=False,
        )
        return

    line = f"[green]{kind}[/green] {result.outcome.value}"
    if result.commit_id:
        line += f" [yellow]{result.commit_id}[/yellow]"
    if result.outcome.value == "conflict":
        source = result.snapshot.merge_state.source_branch if result.snapshot.merge_state else "?"
        line += (
            f"\n  [bold red]CONFLICT[/bold red] merging '{escape(source)}': "
            f"resolve the markers, then stage and commit"
        )
    console.print(line, highlight=False)


def format_log(
    entries: list[Commit],
    console: Console,
    labels: dict[str, list[str]] | None = None,
) -> None:
    """Display commit log in compact table format.

    ``labels`` maps commit ids to the branch names shown after the message.
    """
    if not entries:
        console.print("[dim]No commits.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Id", style="yellow")
    table.add_column("Time", style="dim")
    table.add_column("Author", style="cyan")
    table.add_column("Message")

    for entry in entries:
        message = escape(entry.message)
        if entry.is_merge:
            message = f"[magenta]{message}[/magenta]"
        names = (labels or {}).get(entry.id)
        if names:
            message += f" [cyan]({escape(', '.join(names))})[/cyan]"
        table.add_row(
            entry.id,
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
            escape(entry.author),
            message,
        )

    console.print(table)


def format_status(info: StatusInfo, console: Console) -> None:
    """Display repository status information."""
    if info.head_id is None:
        console.print("[dim]HEAD does not resolve to a commit.[/dim]")
        return

    if info.is_detached:
        console.print(f"HEAD detached at [yellow]{info.head_id}[/yellow]")
    else:
        console.print(
            f"On branch [green]{escape(info.branch_name)}[/green]  "
            f"([yellow]{info.head_id}[/yellow])"
        )

    console.print(f"  Commits: {info.commit_count}")
    console.print(f"  Working: {', '.join(info.badges)}")

    if info.merge_source:
        console.print(
            f"  [bold red]Merging '{escape(info.merge_source)}'[/bold red]: "
            "fix conflicts, then stage and commit"
        )


def format_branches(branches: list[BranchInfo], console: Console) -> None:
    for info in branches:
        marker = "*" if info.is_current else " "
        style = "green" if info.is_current else ""
        name = Text(f"{marker} {info.name}", style=style)
        line = Text.assemble(name, "  ", (info.commit_id, "yellow"))
        if info.message:
            line.append(f"  {info.message}")
        console.print(line)


def format_timeline(timeline: Timeline, console: Console) -> None:
    """Display the commit graph, newest first, one row per commit."""
    if not timeline.nodes:
        console.print("[dim]No commits.[/dim]")
        return

    for node in reversed(timeline.nodes):
        cells = []
        for lane in range(len(timeline.lanes)):
            if lane == node.lane:
                cells.append(("@" if node.is_head else "*", f"bold {lane_color(lane)}"))
            else:
                cells.append(("|", lane_color(lane)))
            cells.append((" ", ""))
        line = Text.assemble(*cells)
        line.append(node.commit.id, style="yellow")
        if node.labels:
            line.append(f" ({', '.join(node.labels)})", style="cyan")
        line.append(f" {node.commit.message}")
        console.print(line)


def format_working_directory(text: str, console: Console) -> None:
    """Display the working directory with conflict markers highlighted."""
    for line in text.split("\n"):
        if line.startswith(("<<<<<<<", "=======", ">>>>>>>")):
            console.print(Text(line, style="bold red"))
        else:
            console.print(Text(line))


def format_diff(diff: TextDiff, console: Console) -> None:
    """Display a unified diff with red/green lines."""
    if diff.is_empty:
        console.print("[dim]No changes.[/dim]")
        return
    for line in diff.lines:
        if line.startswith(("+++", "---")):
            console.print(Text(line, style="bold"))
        elif line.startswith("@@"):
            console.print(Text(line, style="cyan"))
        elif line.startswith("+"):
            console.print(Text(line, style="green"))
        elif line.startswith("-"):
            console.print(Text(line, style="red"))
        else:
            console.print(Text(line))


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {message}", highlight=False)
