"""Transition outcome models for GitFlow.

Outcome names what a command did, or why it did nothing.  TransitionResult
pairs the next snapshot with that outcome so collaborators can report on a
command without diffing snapshots themselves.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gitflow.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    CommitNotFoundError,
    DetachedHeadError,
    GitFlowError,
    InvalidBranchNameError,
    MergeInProgressError,
    NoCommonAncestorError,
    NothingStagedError,
    NothingToMergeError,
    NothingToStageError,
    RootCommitError,
    SelfMergeError,
    UnknownCommandError,
)

if TYPE_CHECKING:
    from gitflow.models.snapshot import RepositorySnapshot


class Outcome(str, enum.Enum):
    """Result tag of a single transition."""

    # Applied
    INITIALIZED = "initialized"
    EDITED = "edited"
    STAGED = "staged"
    COMMITTED = "committed"
    MERGE_COMPLETED = "merge_completed"
    BRANCH_CREATED = "branch_created"
    CHECKED_OUT = "checked_out"
    FAST_FORWARD = "fast_forward"
    MERGED = "merged"
    CONFLICT = "conflict"
    REVERTED = "reverted"

    # Rejected (snapshot unchanged)
    NOTHING_TO_STAGE = "nothing_to_stage"
    NOTHING_STAGED = "nothing_staged"
    DETACHED_HEAD = "detached_head"
    MERGE_IN_PROGRESS = "merge_in_progress"
    BRANCH_EXISTS = "branch_exists"
    INVALID_BRANCH_NAME = "invalid_branch_name"
    BRANCH_NOT_FOUND = "branch_not_found"
    COMMIT_NOT_FOUND = "commit_not_found"
    SELF_MERGE = "self_merge"
    UP_TO_DATE = "up_to_date"
    NO_COMMON_ANCESTOR = "no_common_ancestor"
    ROOT_COMMIT = "root_commit"
    UNKNOWN_COMMAND = "unknown_command"

    @property
    def rejected(self) -> bool:
        return self in REJECTED_OUTCOMES

    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


REJECTED_OUTCOMES: frozenset[Outcome] = frozenset({
    Outcome.NOTHING_TO_STAGE,
    Outcome.NOTHING_STAGED,
    Outcome.DETACHED_HEAD,
    Outcome.MERGE_IN_PROGRESS,
    Outcome.BRANCH_EXISTS,
    Outcome.INVALID_BRANCH_NAME,
    Outcome.BRANCH_NOT_FOUND,
    Outcome.COMMIT_NOT_FOUND,
    Outcome.SELF_MERGE,
    Outcome.UP_TO_DATE,
    Outcome.NO_COMMON_ANCESTOR,
    Outcome.ROOT_COMMIT,
    Outcome.UNKNOWN_COMMAND,
})


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of dispatching one command.

    Attributes:
        snapshot: The next snapshot.  For rejected outcomes this is the
            very same object as ``previous``.
        outcome: What happened.
        previous: The snapshot the command was applied to.
        command: The dispatched command.
        commit_id: Id of the commit created or reached (commit, merge,
            fast-forward, revert), if any.
        detail: Extra context for rejections (branch name, reason, ...).
    """

    snapshot: RepositorySnapshot
    outcome: Outcome
    previous: RepositorySnapshot
    command: object = None
    commit_id: str | None = None
    detail: str | None = None

    @property
    def rejected(self) -> bool:
        return self.outcome.rejected

    @property
    def changed(self) -> bool:
        return self.snapshot is not self.previous

    def to_exception(self) -> GitFlowError | None:
        """Map a rejected outcome to the matching exception, or None."""
        if not self.rejected:
            return None
        cmd = self.command
        prev = self.previous
        detail = self.detail or ""
        o = self.outcome

        if o is Outcome.NOTHING_TO_STAGE:
            return NothingToStageError()
        if o is Outcome.NOTHING_STAGED:
            return NothingStagedError()
        if o is Outcome.DETACHED_HEAD:
            return DetachedHeadError()
        if o is Outcome.MERGE_IN_PROGRESS:
            source = prev.merge_state.source_branch if prev.merge_state else None
            return MergeInProgressError(source)
        if o is Outcome.BRANCH_EXISTS:
            return BranchExistsError(getattr(cmd, "name", detail))
        if o is Outcome.INVALID_BRANCH_NAME:
            return InvalidBranchNameError(getattr(cmd, "name", ""), detail)
        if o is Outcome.BRANCH_NOT_FOUND:
            return BranchNotFoundError(detail)
        if o is Outcome.COMMIT_NOT_FOUND:
            return CommitNotFoundError(detail)
        if o is Outcome.SELF_MERGE:
            return SelfMergeError(detail)
        if o is Outcome.UP_TO_DATE:
            return NothingToMergeError(detail)
        if o is Outcome.NO_COMMON_ANCESTOR:
            return NoCommonAncestorError(detail, prev.current_branch)
        if o is Outcome.ROOT_COMMIT:
            return RootCommitError(detail)
        return UnknownCommandError(detail or getattr(cmd, "kind", type(cmd).__name__))

    def raise_if_rejected(self) -> TransitionResult:
        """Raise the mapped GitFlowError when the command was rejected."""
        exc = self.to_exception()
        if exc is not None:
            raise exc
        return self

    def __str__(self) -> str:
        kind = getattr(self.command, "kind", "?")
        cid = f" {self.commit_id}" if self.commit_id else ""
        return f"{kind}: {self.outcome.value}{cid}"
