"""Structural invariant checks for repository snapshots.

Used by property tests and by ``Repository(verify=True)``, which re-checks
every snapshot the engine produces.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitflow.exceptions import InvariantViolationError
from gitflow.models.refs import BranchHead
from gitflow.operations.dag import find_cycle

if TYPE_CHECKING:
    from gitflow.models.snapshot import RepositorySnapshot

logger = logging.getLogger(__name__)


def check_invariants(snapshot: RepositorySnapshot) -> list[str]:
    """Return a description of every invariant the snapshot breaks."""
    violations: list[str] = []
    commits = snapshot.commits
    order = snapshot.commit_order

    # Commit store
    for cid, commit in commits.items():
        if commit.id != cid:
            violations.append(f"commit stored under '{cid}' has id '{commit.id}'")
        for parent in commit.parents:
            if parent not in commits:
                violations.append(f"commit '{cid}' references missing parent '{parent}'")
        if commit.is_merge and list(commit.parents) != sorted(commit.parents):
            violations.append(f"merge commit '{cid}' parents are not sorted")

    cycle = find_cycle(commits)
    if cycle is not None:
        violations.append(f"parent cycle: {' -> '.join(cycle)}")

    # Creation order
    if len(order) != len(commits):
        violations.append(
            f"commit_order has {len(order)} entries for {len(commits)} commits"
        )
    if len(set(order)) != len(order):
        violations.append("commit_order contains duplicate ids")
    if set(order) != set(commits):
        missing = sorted(set(commits) - set(order))
        extra = sorted(set(order) - set(commits))
        if missing:
            violations.append(f"commits missing from commit_order: {missing}")
        if extra:
            violations.append(f"commit_order lists unknown ids: {extra}")
    position = {cid: i for i, cid in enumerate(order)}
    for cid, commit in commits.items():
        for parent in commit.parents:
            if cid in position and parent in position and position[parent] > position[cid]:
                violations.append(f"parent '{parent}' created after child '{cid}'")

    # Branch registry
    for key, branch in snapshot.branches.items():
        if branch.name != key:
            violations.append(f"branch stored under '{key}' is named '{branch.name}'")
        if branch.commit_id not in commits:
            violations.append(
                f"branch '{key}' points at missing commit '{branch.commit_id}'"
            )

    # HEAD
    head = snapshot.head
    if isinstance(head, BranchHead):
        if head.name not in snapshot.branches:
            violations.append(f"HEAD is on missing branch '{head.name}'")
    elif head.id not in commits:
        violations.append(f"HEAD is detached at missing commit '{head.id}'")

    # Pending merge
    if snapshot.merge_state is not None:
        if not isinstance(head, BranchHead):
            violations.append("merge in progress with detached HEAD")
        if snapshot.merge_state.source_branch not in snapshot.branches:
            violations.append(
                f"merge source '{snapshot.merge_state.source_branch}' does not exist"
            )

    return violations


def assert_invariants(snapshot: RepositorySnapshot) -> None:
    """Raise InvariantViolationError if the snapshot breaks any invariant."""
    violations = check_invariants(snapshot)
    if violations:
        logger.warning("Snapshot failed %d invariant check(s)", len(violations))
        raise InvariantViolationError(violations)
