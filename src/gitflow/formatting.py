"""Pretty-print support for GitFlow objects.

Uses rich library for formatted terminal output.
All functions accept their target object and print to a rich Console.

To avoid circular imports, this module does NOT import domain models
at module level. Functions access object attributes dynamically.
"""
from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Lane colors for timeline output, cycled by lane index.
LANE_COLORS = ("green", "cyan", "magenta", "yellow", "blue", "red")


def _ensure_utf8_stdout() -> None:
    """Reconfigure stdout to UTF-8 on Windows to avoid cp1252 encoding errors."""
    import sys
    if sys.platform == "win32" and hasattr(sys.stdout, "reconfigure"):
        try:
            sys.stdout.reconfigure(encoding="utf-8")
        except (OSError, ValueError):
            pass


def _make_console(file: Any = None) -> Console:
    """Create a Console, optionally writing to a file-like object."""
    if file is not None:
        return Console(file=file, force_terminal=True, width=100)
    _ensure_utf8_stdout()
    return Console()


def lane_color(lane: int) -> str:
    return LANE_COLORS[lane % len(LANE_COLORS)]


def pprint_commit(
    commit: Any,
    *,
    abbreviate: bool = False,
    show_content: bool = True,
    file: Any = None,
) -> None:
    """Pretty-print a Commit.

    Args:
        commit: A Commit instance.
        abbreviate: If True, truncate long messages/content. Default False.
        show_content: Include the file snapshot below the header fields.
        file: Optional file-like object for output (used in tests).
    """
    console = _make_console(file)

    body_parts: list[str] = []
    body_parts.append(f"[bold]Id:[/bold]        {commit.id}")
    if commit.parents:
        label = "Parents:" if len(commit.parents) > 1 else "Parent: "
        body_parts.append(f"[bold]{label}[/bold]   {', '.join(commit.parents)}")
    msg = commit.message
    if abbreviate and len(msg) > 120:
        msg = msg[:117] + "..."
    body_parts.append(f"[bold]Message:[/bold]   {escape(msg)}")
    body_parts.append(f"[bold]Author:[/bold]    {escape(commit.author)}")
    body_parts.append(f"[bold]Date:[/bold]      {commit.timestamp:%Y-%m-%d %H:%M:%S}")

    if show_content:
        content = commit.content
        if abbreviate and len(content) > 200:
            content = content[:197] + "..."
        body_parts.append("")
        body_parts.append("[bold]Content:[/bold]")
        body_parts.append(escape(content))

    kind = "Merge commit" if commit.is_merge else "Commit"
    panel = Panel(
        "\n".join(body_parts),
        title=f"[bold]{kind} {commit.id}[/bold]",
        border_style="blue",
    )
    console.print(panel)


def pprint_status_info(status: Any, *, file: Any = None) -> None:
    """Pretty-print a StatusInfo.

    Args:
        status: A StatusInfo instance.
        file: Optional file-like object for output (used in tests).
    """
    console = _make_console(file)

    body_parts: list[str] = []

    branch = escape(status.branch_name) if status.branch_name else "[italic]detached[/italic]"
    head = status.head_id or "None"
    body_parts.append(f"[bold]Branch:[/bold]  {branch}")
    body_parts.append(f"[bold]HEAD:[/bold]    {head}")
    body_parts.append(f"[bold]State:[/bold]   {status.state.value}")
    body_parts.append(f"[bold]Working:[/bold] {', '.join(status.badges)}")
    body_parts.append(
        f"[bold]Commits:[/bold] {status.commit_count} on branch, {status.total_commits} total"
    )

    if status.recent_commits:
        body_parts.append("")
        for commit in status.recent_commits:
            body_parts.append(f"  [yellow]{commit.id}[/yellow] {escape(commit.message)}")

    if status.merge_source:
        body_parts.append(
            f"\n[bold red]MERGING '{escape(status.merge_source)}': resolve conflicts, "
            f"then stage and commit[/bold red]"
        )
    elif status.has_conflict_markers:
        body_parts.append("\n[bold yellow]WARNING: conflict markers in working directory[/bold yellow]")
    if status.is_detached:
        body_parts.append("\n[bold yellow]WARNING: HEAD is detached[/bold yellow]")

    panel = Panel(
        "\n".join(body_parts),
        title="[bold]Status[/bold]",
        border_style="red" if status.merge_source else "cyan",
    )
    console.print(panel)


def pprint_text_diff(diff: Any, *, file: Any = None) -> None:
    """Pretty-print a TextDiff with red/green line coloring."""
    console = _make_console(file)
    if diff.is_empty:
        console.print("[dim]No changes.[/dim]")
        return
    for line in diff.lines:
        if line.startswith("+++") or line.startswith("---"):
            console.print(Text(line, style="bold"))
        elif line.startswith("@@"):
            console.print(Text(line, style="cyan"))
        elif line.startswith("+"):
            console.print(Text(line, style="green"))
        elif line.startswith("-"):
            console.print(Text(line, style="red"))
        else:
            console.print(Text(line))
    console.print(f"[green]+{diff.added}[/green] [red]-{diff.removed}[/red]")


def pprint_timeline(timeline: Any, *, file: Any = None) -> None:
    """Pretty-print a Timeline as a lane-per-row grid.

    Each row is a branch lane; each column a commit in creation order.
    The HEAD commit is drawn as ``@``, merge commits as ``M``.
    """
    console = _make_console(file)

    width = max((n.column for n in timeline.nodes), default=-1) + 1
    rows = [["·"] * width for _ in timeline.lanes]
    for node in timeline.nodes:
        mark = "@" if node.is_head else ("M" if node.commit.is_merge else "o")
        rows[node.lane][node.column] = mark

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Lane", style="bold")
    table.add_column("Commits")
    for lane, name in enumerate(timeline.lanes):
        color = lane_color(lane)
        table.add_row(Text(name, style=color), Text(" ".join(rows[lane]), style=color))
    console.print(table)
