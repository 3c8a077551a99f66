"""gitflow shell -- interactive session over one in-memory repository."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from gitflow.cli.formatting import (
    format_branches,
    format_diff,
    format_error,
    format_log,
    format_result,
    format_status,
    format_timeline,
    format_working_directory,
    get_console,
)
from gitflow.exceptions import GitFlowError

if TYPE_CHECKING:
    from rich.console import Console

    from gitflow.repository import Repository

SHELL_HELP = """\
Commands:
  edit [TEXT]        replace the working file (no TEXT: open $EDITOR); \\n expands to a newline
  show               print the working file
  diff [--staged]    diff the working file against HEAD or the staging area
  stage              stage the working file
  commit MESSAGE     commit the staged file
  branch NAME [ID]   create a branch at HEAD (or at commit ID)
  checkout NAME      switch to a branch
  merge NAME         merge a branch into the current one
  resolve ours|theirs|edit
                     resolve a pending merge conflict in the working file
  revert ID          undo a commit with a new commit
  init               start over from a fresh repository
  status | log | graph | branches
  help | quit"""


class ShellError(Exception):
    """Bad usage of a shell command (wrong arguments)."""


def _require(args: list[str], count: int, usage: str) -> None:
    if len(args) < count:
        raise ShellError(f"usage: {usage}")


class _Shell:
    """Dispatches one parsed input line to the repository."""

    def __init__(self, repo: Repository, console: Console) -> None:
        self.repo = repo
        self.console = console
        self.commands: dict[str, Callable[[list[str]], None]] = {
            "edit": self.do_edit,
            "show": self.do_show,
            "diff": self.do_diff,
            "stage": self.do_stage,
            "commit": self.do_commit,
            "branch": self.do_branch,
            "checkout": self.do_checkout,
            "merge": self.do_merge,
            "resolve": self.do_resolve,
            "revert": self.do_revert,
            "init": self.do_init,
            "status": self.do_status,
            "log": self.do_log,
            "graph": self.do_graph,
            "branches": self.do_branches,
            "help": self.do_help,
        }

    def prompt(self) -> str:
        repo = self.repo
        where = repo.current_branch or f"({repo.head})"
        marker = "|MERGING" if repo.is_merging else ""
        return f"{where}{marker}>"

    def execute(self, line: str) -> None:
        # Backslashes stay literal so "edit a\nb" reaches do_edit intact
        lexer = shlex.shlex(line, posix=True)
        lexer.whitespace_split = True
        lexer.commenters = ""
        lexer.escape = ""
        words = list(lexer)
        if not words:
            return
        name, args = words[0], words[1:]
        handler = self.commands.get(name)
        if handler is None:
            raise ShellError(f"unknown command '{name}' (try 'help')")
        handler(args)

    # Commands --------------------------------------------------------

    def do_edit(self, args: list[str]) -> None:
        if args:
            text = " ".join(args).replace("\\n", "\n")
        else:
            text = click.edit(self.repo.working_directory)
            if text is None:
                self.console.print("[dim]Editor closed without saving.[/dim]")
                return
        format_result(self.repo.edit(text), self.console)

    def do_show(self, args: list[str]) -> None:
        format_working_directory(self.repo.working_directory, self.console)

    def do_diff(self, args: list[str]) -> None:
        format_diff(self.repo.diff(staged="--staged" in args), self.console)

    def do_stage(self, args: list[str]) -> None:
        format_result(self.repo.stage(), self.console)

    def do_commit(self, args: list[str]) -> None:
        _require(args, 1, "commit MESSAGE")
        format_result(self.repo.commit(" ".join(args)), self.console)

    def do_branch(self, args: list[str]) -> None:
        _require(args, 1, "branch NAME [COMMIT_ID]")
        source = args[1] if len(args) > 1 else None
        format_result(self.repo.branch(args[0], source), self.console)

    def do_checkout(self, args: list[str]) -> None:
        _require(args, 1, "checkout NAME")
        format_result(self.repo.checkout(args[0]), self.console)

    def do_merge(self, args: list[str]) -> None:
        _require(args, 1, "merge NAME")
        format_result(self.repo.merge(args[0]), self.console)

    def do_resolve(self, args: list[str]) -> None:
        _require(args, 1, "resolve ours|theirs|edit")
        snap = self.repo.snapshot
        if snap.merge_state is None:
            raise ShellError("no merge in progress")
        choice = args[0]
        if choice == "ours":
            text = snap.head_commit.content
        elif choice == "theirs":
            source = snap.get_branch(snap.merge_state.source_branch)
            text = snap.commits[source.commit_id].content
        elif choice == "edit":
            text = click.edit(snap.working_directory)
            if text is None:
                self.console.print("[dim]Editor closed without saving.[/dim]")
                return
        else:
            raise ShellError("usage: resolve ours|theirs|edit")
        format_result(self.repo.edit(text), self.console)

    def do_revert(self, args: list[str]) -> None:
        _require(args, 1, "revert COMMIT_ID")
        format_result(self.repo.revert(args[0]), self.console)

    def do_init(self, args: list[str]) -> None:
        format_result(self.repo.init(), self.console)

    def do_status(self, args: list[str]) -> None:
        format_status(self.repo.status(), self.console)

    def do_log(self, args: list[str]) -> None:
        entries = self.repo.log()
        format_log(entries, self.console, {c.id: self.repo.branches_at(c.id) for c in entries})

    def do_graph(self, args: list[str]) -> None:
        format_timeline(self.repo.timeline(), self.console)

    def do_branches(self, args: list[str]) -> None:
        format_branches(self.repo.list_branches(), self.console)

    def do_help(self, args: list[str]) -> None:
        self.console.print(SHELL_HELP, highlight=False, markup=False)


@click.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Start an interactive session on a fresh repository.

    Type 'help' for the list of commands, 'quit' (or EOF) to leave.
    Nothing is saved when the session ends.
    """
    from gitflow.cli import _open_repository

    console = get_console()
    sh = _Shell(_open_repository(ctx), console)
    console.print("[bold]GitFlow shell[/bold] [dim](type 'help' for commands)[/dim]")

    while True:
        try:
            line = click.prompt(sh.prompt(), default="", show_default=False, prompt_suffix=" ")
        except click.Abort:
            break
        if line.strip() in ("quit", "exit"):
            break
        try:
            sh.execute(line)
        except (GitFlowError, ShellError, ValueError) as e:
            format_error(str(e), console)
