"""Branch helpers for GitFlow.

Git-style branch name validation and branch lookups over a snapshot.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitflow.models.snapshot import RepositorySnapshot


# Characters forbidden in branch names (git-style)
_FORBIDDEN_CHARS = re.compile(r"[\s~^:?*\[\\]")


def branch_name_problem(name: str) -> str | None:
    """Return why ``name`` is not a valid branch name, or None if it is."""
    if not name:
        return "branch name cannot be empty"
    if ".." in name:
        return "branch name cannot contain '..'"
    if name.endswith(".lock"):
        return "branch name cannot end with '.lock'"
    if name.startswith("."):
        return "branch name cannot start with '.'"
    if name.endswith("."):
        return "branch name cannot end with '.'"
    if _FORBIDDEN_CHARS.search(name):
        return "branch name contains forbidden characters (whitespace, ~, ^, :, ?, *, [, \\)"
    if name.startswith("/") or name.endswith("/") or "//" in name:
        return "branch name has invalid slash usage"
    return None


def branches_at(
    snapshot: RepositorySnapshot,
    commit_id: str,
    default_branch: str = "main",
) -> list[str]:
    """Names of the branches pointing at ``commit_id``, default branch first."""
    names = [b.name for b in snapshot.branches.values() if b.commit_id == commit_id]
    return sort_branch_names(names, default_branch)


def sort_branch_names(names: list[str], default_branch: str = "main") -> list[str]:
    """Sort branch names alphabetically with the default branch first."""
    return sorted(names, key=lambda n: (n != default_branch, n))
