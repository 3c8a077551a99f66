"""DAG utilities for GitFlow -- ancestor queries and common-ancestor resolution.

Full traversals follow every parent edge (merge commits included) and are
what merging relies on.  ``first_parent_history`` follows only ``parents[0]``
and exists for display and revert-parent selection; the two must not be
substituted for one another.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitflow.models.commit import Commit
    from gitflow.models.snapshot import RepositorySnapshot


def walk_ancestors(
    commits: Mapping[str, Commit],
    start: str,
    *,
    stop_at: set[str] | None = None,
) -> Iterator[str]:
    """BFS walk from a start id, yielding each visited commit id once.

    Follows all parents.  Ids missing from ``commits`` are yielded but not
    expanded.

    Args:
        commits: Commit store.
        start: Starting commit id.
        stop_at: Optional set of known-visited ids.  When a commit is in
            this set, it is yielded but its parents are not enqueued.
    """
    visited: set[str] = set()
    queue: deque[str] = deque([start])
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        yield current
        if stop_at is not None and current in stop_at:
            continue
        commit = commits.get(current)
        if commit is None:
            continue
        for parent in commit.parents:
            if parent not in visited:
                queue.append(parent)


def get_all_ancestors(
    commits: Mapping[str, Commit],
    commit_id: str,
    *,
    stop_at: set[str] | None = None,
) -> set[str]:
    """Get all ancestor ids of a commit (including itself)."""
    return set(walk_ancestors(commits, commit_id, stop_at=stop_at))


def is_ancestor(
    commits: Mapping[str, Commit],
    potential_ancestor: str,
    commit_id: str,
) -> bool:
    """Check if potential_ancestor is reachable from commit_id.

    A commit counts as its own ancestor.  Stops as soon as the target is
    found.
    """
    for cid in walk_ancestors(commits, commit_id):
        if cid == potential_ancestor:
            return True
    return False


def common_ancestors(
    commits: Mapping[str, Commit],
    commit_a: str,
    commit_b: str,
) -> set[str]:
    """Ids reachable from both commits."""
    return get_all_ancestors(commits, commit_a) & get_all_ancestors(commits, commit_b)


def most_recent_common_ancestor(
    snapshot: RepositorySnapshot,
    commit_a: str,
    commit_b: str,
) -> str | None:
    """Find the merge base of two commits.

    Intersects the full ancestor sets of both commits and picks the
    candidate created last (highest index in ``commit_order``).  This is a
    recency heuristic rather than a lowest-common-ancestor guarantee.

    Returns:
        The merge base id, or None if the histories share no commit.
    """
    candidates = common_ancestors(snapshot.commits, commit_a, commit_b)
    if not candidates:
        return None
    return _latest_in_order(candidates, snapshot.commit_order)


def _latest_in_order(candidates: set[str], order: Sequence[str]) -> str:
    for cid in reversed(order):
        if cid in candidates:
            return cid
    # Candidates outside commit_order only appear in hand-built snapshots.
    return min(candidates)


def first_parent_history(
    commits: Mapping[str, Commit],
    start: str | None,
    *,
    limit: int | None = None,
) -> list[Commit]:
    """Walk the first-parent chain from ``start`` back to the root.

    Returns commits tip first.  Guards against revisits so a malformed
    store cannot loop forever.
    """
    history: list[Commit] = []
    visited: set[str] = set()
    current = start
    while current is not None and current not in visited:
        if limit is not None and len(history) >= limit:
            break
        visited.add(current)
        commit = commits.get(current)
        if commit is None:
            break
        history.append(commit)
        current = commit.first_parent
    return history


def find_cycle(commits: Mapping[str, Commit]) -> list[str] | None:
    """Return one parent cycle as a list of ids, or None if the store is a DAG.

    Iterative three-colour DFS over every commit.
    """
    white, grey, black = 0, 1, 2
    colour: dict[str, int] = {cid: white for cid in commits}

    for root in commits:
        if colour[root] != white:
            continue
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(commits[root].parents))]
        path: list[str] = [root]
        colour[root] = grey
        while stack:
            node, parents = stack[-1]
            advanced = False
            for parent in parents:
                if parent not in commits:
                    continue
                if colour[parent] == grey:
                    return path[path.index(parent):] + [parent]
                if colour[parent] == white:
                    colour[parent] = grey
                    stack.append((parent, iter(commits[parent].parents)))
                    path.append(parent)
                    advanced = True
                    break
            if not advanced:
                colour[node] = black
                stack.pop()
                path.pop()
    return None
