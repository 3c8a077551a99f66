"""Diff operations: unified text diffs of the virtual file.

Compares two versions of the file (commit contents, staged snapshot,
working directory) for display.  Merging does not use this module; it has
its own patch machinery in ``gitflow.operations.merge``.
"""
from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from gitflow.exceptions import CommitNotFoundError

if TYPE_CHECKING:
    from gitflow.models.snapshot import RepositorySnapshot


@dataclass(frozen=True)
class TextDiff:
    """Unified diff between two texts.

    Attributes:
        from_label: Label of the old side (e.g. a commit id or ``HEAD``).
        to_label: Label of the new side.
        lines: Unified diff output lines, without trailing newlines.
        added: Number of added lines.
        removed: Number of removed lines.
    """

    from_label: str
    to_label: str
    lines: list[str] = field(default_factory=list)
    added: int = 0
    removed: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __str__(self) -> str:
        return "\n".join(self.lines)

    def pprint(self) -> None:
        """Pretty-print this diff with colors."""
        from gitflow.formatting import pprint_text_diff

        pprint_text_diff(self)


def diff_text(
    old: str,
    new: str,
    *,
    from_label: str = "a",
    to_label: str = "b",
    context: int = 3,
) -> TextDiff:
    """Compute a unified diff between two texts."""
    lines = list(
        difflib.unified_diff(
            old.split("\n"),
            new.split("\n"),
            fromfile=from_label,
            tofile=to_label,
            n=context,
            lineterm="",
        )
    )
    added = sum(1 for ln in lines if ln.startswith("+") and not ln.startswith("+++"))
    removed = sum(1 for ln in lines if ln.startswith("-") and not ln.startswith("---"))
    return TextDiff(
        from_label=from_label,
        to_label=to_label,
        lines=lines,
        added=added,
        removed=removed,
    )


def working_diff(
    snapshot: RepositorySnapshot,
    *,
    against: Literal["head", "staged"] = "head",
) -> TextDiff:
    """Diff the working directory against HEAD or the staging area.

    Diffing against an empty staging area falls back to HEAD.
    """
    if against == "staged" and snapshot.staging_area is not None:
        return diff_text(
            snapshot.staging_area,
            snapshot.working_directory,
            from_label="staged",
            to_label="working",
        )
    head = snapshot.head_commit
    old = head.content if head is not None else ""
    return diff_text(old, snapshot.working_directory, from_label="HEAD", to_label="working")


def commit_diff(snapshot: RepositorySnapshot, commit_a: str, commit_b: str) -> TextDiff:
    """Diff the contents of two commits.

    Raises:
        CommitNotFoundError: If either commit is missing.
    """
    a = snapshot.commits.get(commit_a)
    if a is None:
        raise CommitNotFoundError(commit_a)
    b = snapshot.commits.get(commit_b)
    if b is None:
        raise CommitNotFoundError(commit_b)
    return diff_text(a.content, b.content, from_label=a.id, to_label=b.id)
