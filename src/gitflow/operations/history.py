"""History operations: log, status, and branch listing."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gitflow.models.branch import BranchInfo
from gitflow.operations.branch import sort_branch_names
from gitflow.operations.dag import first_parent_history

if TYPE_CHECKING:
    from gitflow.models.commit import Commit
    from gitflow.models.snapshot import RepositorySnapshot


class RepoState(str, enum.Enum):
    """Repository-level state machine position."""

    CLEAN = "clean"
    STAGED = "staged"
    CONFLICTED = "conflicted"

    def __str__(self) -> str:
        return self.value


def repo_state(snapshot: RepositorySnapshot) -> RepoState:
    """Conflicted while a merge is pending, staged while something is staged."""
    if snapshot.merge_state is not None:
        return RepoState.CONFLICTED
    if snapshot.staging_area is not None:
        return RepoState.STAGED
    return RepoState.CLEAN


def log(snapshot: RepositorySnapshot, limit: int | None = None) -> list[Commit]:
    """First-parent history from HEAD, newest first."""
    return first_parent_history(snapshot.commits, snapshot.resolve_head(), limit=limit)


@dataclass(frozen=True)
class StatusInfo:
    """Current repository status returned by Repository.status().

    Attributes:
        head_id: Commit HEAD resolves to, or None if HEAD dangles.
        branch_name: Current branch name, or None if detached.
        is_detached: Whether HEAD is in detached state.
        state: Position in the clean/staged/conflicted state machine.
        is_staged: Whether the staging area holds a snapshot.
        is_modified: Whether the working directory differs from HEAD.
        has_conflict_markers: Whether ``<<<<<<< HEAD`` is in the working directory.
        merge_source: Branch being merged while a merge is pending.
        commit_count: Length of the first-parent chain from HEAD.
        total_commits: Size of the commit store.
        recent_commits: Last 3 commits on the first-parent chain.
    """

    head_id: str | None
    branch_name: str | None  # None if detached
    is_detached: bool
    state: RepoState
    is_staged: bool
    is_modified: bool
    has_conflict_markers: bool
    merge_source: str | None
    commit_count: int
    total_commits: int
    recent_commits: list[Commit] = field(default_factory=list)

    @property
    def badges(self) -> list[str]:
        """Working copy badges: ``staged`` and/or ``modified``, else ``clean``."""
        badges = []
        if self.is_staged:
            badges.append("staged")
        if self.is_modified:
            badges.append("modified")
        return badges or ["clean"]

    def __str__(self) -> str:
        head = self.head_id or "None"
        branch = self.branch_name or "detached"
        return f"{branch} @ {head} | {self.commit_count} commits | {self.state.value}"

    def pprint(self) -> None:
        """Pretty-print this status using rich formatting."""
        from gitflow.formatting import pprint_status_info

        pprint_status_info(self)


def compute_status(snapshot: RepositorySnapshot, *, recent: int = 3) -> StatusInfo:
    """Build a StatusInfo for the snapshot."""
    head_commit = snapshot.head_commit
    chain = log(snapshot)
    return StatusInfo(
        head_id=snapshot.resolve_head(),
        branch_name=snapshot.current_branch,
        is_detached=snapshot.is_detached,
        state=repo_state(snapshot),
        is_staged=snapshot.staging_area is not None,
        is_modified=head_commit is None or snapshot.working_directory != head_commit.content,
        has_conflict_markers=snapshot.has_conflict_markers,
        merge_source=snapshot.merge_state.source_branch if snapshot.merge_state else None,
        commit_count=len(chain),
        total_commits=len(snapshot.commits),
        recent_commits=chain[:recent],
    )


def list_branches(
    snapshot: RepositorySnapshot,
    *,
    default_branch: str = "main",
    verbose: bool = False,
) -> list[BranchInfo]:
    """List branches, default branch first, then alphabetical.

    With ``verbose``, also reports each branch's first-parent chain length.
    """
    current = snapshot.current_branch
    infos: list[BranchInfo] = []
    for name in sort_branch_names(list(snapshot.branches), default_branch):
        branch = snapshot.branches[name]
        tip = snapshot.commits.get(branch.commit_id)
        infos.append(
            BranchInfo(
                name=name,
                commit_id=branch.commit_id,
                is_current=name == current,
                commit_count=(
                    len(first_parent_history(snapshot.commits, branch.commit_id))
                    if verbose else None
                ),
                message=tip.message if tip is not None else None,
            )
        )
    return infos
