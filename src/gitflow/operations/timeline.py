"""Timeline layout: assign commits to branch lanes for graph views.

Each branch claims the commits on its first-parent chain that no earlier
branch has claimed, walking branches default-first then alphabetically.
Commits no branch reaches fall into the default branch's lane.  Columns
follow creation order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gitflow.operations.branch import sort_branch_names

if TYPE_CHECKING:
    from gitflow.models.commit import Commit
    from gitflow.models.snapshot import RepositorySnapshot


@dataclass(frozen=True)
class TimelineNode:
    """A commit placed on the timeline grid."""

    commit: Commit
    branch: str
    lane: int
    column: int
    is_head: bool = False
    labels: tuple[str, ...] = ()  # branches whose tip is this commit


@dataclass(frozen=True)
class Timeline:
    """Lane layout of the whole commit store.

    Attributes:
        lanes: Branch name for each lane index.
        nodes: One node per commit, in creation order.
        edges: (parent_id, child_id) pairs for every parent link.
    """

    lanes: list[str] = field(default_factory=list)
    nodes: list[TimelineNode] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)

    def node(self, commit_id: str) -> TimelineNode | None:
        for n in self.nodes:
            if n.commit.id == commit_id:
                return n
        return None


def assign_branches(
    snapshot: RepositorySnapshot,
    default_branch: str = "main",
) -> dict[str, str]:
    """Map each reachable commit id to the branch lane that claims it."""
    owner: dict[str, str] = {}
    for name in sort_branch_names(list(snapshot.branches), default_branch):
        current: str | None = snapshot.branches[name].commit_id
        while current is not None and current not in owner:
            commit = snapshot.commits.get(current)
            if commit is None:
                break
            owner[current] = name
            current = commit.first_parent
    return owner


def build_timeline(
    snapshot: RepositorySnapshot,
    default_branch: str = "main",
) -> Timeline:
    """Lay out every commit of the snapshot on branch lanes."""
    lanes = sort_branch_names(list(snapshot.branches), default_branch)
    fallback = default_branch if default_branch in lanes else (lanes[0] if lanes else default_branch)
    if fallback not in lanes:
        lanes.append(fallback)
    lane_of = {name: i for i, name in enumerate(lanes)}

    owner = assign_branches(snapshot, default_branch)
    head_id = snapshot.resolve_head()

    tips: dict[str, list[str]] = {}
    for name in lanes:
        branch = snapshot.branches.get(name)
        if branch is not None:
            tips.setdefault(branch.commit_id, []).append(name)

    nodes: list[TimelineNode] = []
    edges: list[tuple[str, str]] = []
    for column, cid in enumerate(snapshot.commit_order):
        commit = snapshot.commits.get(cid)
        if commit is None:
            continue
        branch = owner.get(cid, fallback)
        nodes.append(
            TimelineNode(
                commit=commit,
                branch=branch,
                lane=lane_of[branch],
                column=column,
                is_head=cid == head_id,
                labels=tuple(tips.get(cid, ())),
            )
        )
        edges.extend((parent, cid) for parent in commit.parents)

    return Timeline(lanes=lanes, nodes=nodes, edges=edges)
