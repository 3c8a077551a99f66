"""Transition engine for GitFlow.

The single entry point of the repository state engine: a pure function from
(snapshot, command) to the next snapshot.  Commands whose preconditions do
not hold are rejected as no-ops -- the previous snapshot object comes back
unchanged, tagged with an Outcome that says why.

Snapshots are never mutated.  Every handler builds fresh dicts/tuples for
the parts it changes and shares the rest with the previous snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel

from gitflow.engine.ids import Clock, IdFactory, RandomIdFactory, new_commit_id, utc_now
from gitflow.exceptions import CommandValidationError, CommitNotFoundError
from gitflow.models.branch import Branch
from gitflow.models.commands import (
    CheckoutCommand,
    CommitCommand,
    CreateBranchCommand,
    EditWorkingDirectoryCommand,
    InitCommand,
    MergeCommand,
    RevertCommand,
    StageCommand,
    parse_command,
)
from gitflow.models.commit import Commit
from gitflow.models.config import EngineConfig
from gitflow.models.merge import ConflictedMerge, MergeState
from gitflow.models.refs import BranchHead
from gitflow.models.snapshot import RepositorySnapshot
from gitflow.models.transition import Outcome, TransitionResult
from gitflow.operations.branch import branch_name_problem
from gitflow.operations.dag import most_recent_common_ancestor
from gitflow.operations.merge import three_way_merge

if TYPE_CHECKING:
    Handler = Callable[[RepositorySnapshot, BaseModel], TransitionResult]

logger = logging.getLogger(__name__)


class TransitionEngine:
    """Applies commands to repository snapshots.

    The engine holds no repository state of its own -- only configuration
    and the id/time sources used when it has to create a commit.

    Example::

        engine = TransitionEngine()
        snap = engine.initial_snapshot()
        snap = engine.apply(snap, EditWorkingDirectoryCommand(text="v2"))
        snap = engine.apply(snap, StageCommand())
        snap = engine.apply(snap, CommitCommand(message="m1", author="u"))
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        id_factory: IdFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._id_factory = id_factory or RandomIdFactory(self.config.commit_id_length)
        self._clock = clock or utc_now
        self._handlers: dict[type[BaseModel], Handler] = {
            InitCommand: self._init,
            EditWorkingDirectoryCommand: self._edit,
            StageCommand: self._stage,
            CommitCommand: self._commit,
            CreateBranchCommand: self._create_branch,
            CheckoutCommand: self._checkout,
            MergeCommand: self._merge,
            RevertCommand: self._revert,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initial_snapshot(self) -> RepositorySnapshot:
        """A fresh repository: one root commit on the default branch."""
        cfg = self.config
        root = Commit(
            id=cfg.root_commit_id,
            parents=(),
            message=cfg.root_message,
            author=cfg.system_author,
            timestamp=self._clock(),
            content=cfg.initial_content,
        )
        return RepositorySnapshot(
            commits={root.id: root},
            branches={cfg.default_branch: Branch(name=cfg.default_branch, commit_id=root.id)},
            head=BranchHead(name=cfg.default_branch),
            staging_area=None,
            working_directory=root.content,
            commit_order=(root.id,),
            merge_state=None,
        )

    def apply(self, snapshot: RepositorySnapshot, command: object) -> RepositorySnapshot:
        """Apply a command and return the next snapshot."""
        return self.dispatch(snapshot, command).snapshot

    def dispatch(self, snapshot: RepositorySnapshot, command: object) -> TransitionResult:
        """Apply a command and report what happened.

        ``command`` may be a command model or a command dict; anything that
        is not a known command is rejected as ``UNKNOWN_COMMAND``.
        """
        if isinstance(command, dict):
            try:
                command = parse_command(command)
            except CommandValidationError as e:
                logger.debug("Rejected command payload: %s", e)
                return _reject(snapshot, command, Outcome.UNKNOWN_COMMAND, str(command.get("kind", "?")))

        handler = self._handlers.get(type(command))
        if handler is None:
            return _reject(snapshot, command, Outcome.UNKNOWN_COMMAND, type(command).__name__)
        return handler(snapshot, command)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _init(self, snapshot: RepositorySnapshot, cmd: InitCommand) -> TransitionResult:
        fresh = self.initial_snapshot()
        logger.debug("Initialized repository at %s", fresh.commit_order[0])
        return _done(snapshot, fresh, cmd, Outcome.INITIALIZED, fresh.commit_order[0])

    def _edit(
        self, snapshot: RepositorySnapshot, cmd: EditWorkingDirectoryCommand
    ) -> TransitionResult:
        nxt = snapshot.model_copy(update={"working_directory": cmd.text})
        return _done(snapshot, nxt, cmd, Outcome.EDITED)

    def _stage(self, snapshot: RepositorySnapshot, cmd: StageCommand) -> TransitionResult:
        head = snapshot.head_commit
        head_content = head.content if head is not None else None
        if snapshot.working_directory == head_content and snapshot.merge_state is None:
            return _reject(snapshot, cmd, Outcome.NOTHING_TO_STAGE)
        nxt = snapshot.model_copy(update={"staging_area": snapshot.working_directory})
        return _done(snapshot, nxt, cmd, Outcome.STAGED)

    def _commit(self, snapshot: RepositorySnapshot, cmd: CommitCommand) -> TransitionResult:
        if snapshot.staging_area is None:
            return _reject(snapshot, cmd, Outcome.NOTHING_STAGED)
        branch_name = snapshot.current_branch
        if branch_name is None:
            return _reject(snapshot, cmd, Outcome.DETACHED_HEAD)
        branch = snapshot.branches.get(branch_name)
        if branch is None:
            return _reject(snapshot, cmd, Outcome.BRANCH_NOT_FOUND, branch_name)

        if snapshot.merge_state is not None:
            source_name = snapshot.merge_state.source_branch
            source = snapshot.branches.get(source_name)
            if source is None:
                return _reject(snapshot, cmd, Outcome.BRANCH_NOT_FOUND, source_name)
            parents = _merge_parents(branch.commit_id, source.commit_id)
            commit = self._new_commit(
                snapshot, parents, cmd.message, cmd.author, snapshot.staging_area
            )
            nxt = _with_commit(
                snapshot,
                commit,
                branch_name,
                working_directory=commit.content,
                staging_area=None,
                merge_state=None,
            )
            logger.info("Completed merge of '%s' into '%s' as %s", source_name, branch_name, commit.id)
            return _done(snapshot, nxt, cmd, Outcome.MERGE_COMPLETED, commit.id)

        commit = self._new_commit(
            snapshot, (branch.commit_id,), cmd.message, cmd.author, snapshot.staging_area
        )
        nxt = _with_commit(snapshot, commit, branch_name, staging_area=None)
        logger.debug("Committed %s on '%s'", commit.id, branch_name)
        return _done(snapshot, nxt, cmd, Outcome.COMMITTED, commit.id)

    def _create_branch(
        self, snapshot: RepositorySnapshot, cmd: CreateBranchCommand
    ) -> TransitionResult:
        if snapshot.merge_state is not None:
            return _reject(snapshot, cmd, Outcome.MERGE_IN_PROGRESS)
        if self.config.validate_branch_names:
            problem = branch_name_problem(cmd.name)
            if problem is not None:
                return _reject(snapshot, cmd, Outcome.INVALID_BRANCH_NAME, problem)
        if cmd.name in snapshot.branches:
            return _reject(snapshot, cmd, Outcome.BRANCH_EXISTS, cmd.name)

        source = cmd.from_commit_id or snapshot.resolve_head()
        if source is None or source not in snapshot.commits:
            return _reject(snapshot, cmd, Outcome.COMMIT_NOT_FOUND, source or "HEAD")

        branches = {**snapshot.branches, cmd.name: Branch(name=cmd.name, commit_id=source)}
        nxt = snapshot.model_copy(update={"branches": branches})
        logger.debug("Created branch '%s' at %s", cmd.name, source)
        return _done(snapshot, nxt, cmd, Outcome.BRANCH_CREATED, source)

    def _checkout(self, snapshot: RepositorySnapshot, cmd: CheckoutCommand) -> TransitionResult:
        if snapshot.merge_state is not None:
            return _reject(snapshot, cmd, Outcome.MERGE_IN_PROGRESS)
        branch = snapshot.branches.get(cmd.branch_name)
        if branch is None:
            return _reject(snapshot, cmd, Outcome.BRANCH_NOT_FOUND, cmd.branch_name)
        commit = snapshot.commits.get(branch.commit_id)
        if commit is None:
            return _reject(snapshot, cmd, Outcome.COMMIT_NOT_FOUND, branch.commit_id)

        nxt = snapshot.model_copy(update={
            "head": BranchHead(name=branch.name),
            "working_directory": commit.content,
            "staging_area": None,
        })
        logger.debug("Checked out '%s' at %s", branch.name, commit.id)
        return _done(snapshot, nxt, cmd, Outcome.CHECKED_OUT, commit.id)

    def _merge(self, snapshot: RepositorySnapshot, cmd: MergeCommand) -> TransitionResult:
        target_name = snapshot.current_branch
        if target_name is None:
            return _reject(snapshot, cmd, Outcome.DETACHED_HEAD)
        if snapshot.merge_state is not None:
            return _reject(snapshot, cmd, Outcome.MERGE_IN_PROGRESS)
        source_name = cmd.source_branch_name
        if source_name == target_name:
            return _reject(snapshot, cmd, Outcome.SELF_MERGE, source_name)
        source = snapshot.branches.get(source_name)
        if source is None:
            return _reject(snapshot, cmd, Outcome.BRANCH_NOT_FOUND, source_name)
        target = snapshot.branches.get(target_name)
        if target is None:
            return _reject(snapshot, cmd, Outcome.BRANCH_NOT_FOUND, target_name)

        source_id, target_id = source.commit_id, target.commit_id
        base_id = most_recent_common_ancestor(snapshot, source_id, target_id)
        if base_id is None:
            logger.info("No common ancestor between '%s' and '%s'", source_name, target_name)
            return _reject(snapshot, cmd, Outcome.NO_COMMON_ANCESTOR, source_name)
        if base_id == source_id:
            return _reject(snapshot, cmd, Outcome.UP_TO_DATE, source_name)

        source_commit = snapshot.commits[source_id]
        if base_id == target_id:
            branches = {**snapshot.branches, target_name: Branch(name=target_name, commit_id=source_id)}
            nxt = snapshot.model_copy(update={
                "branches": branches,
                "working_directory": source_commit.content,
                "staging_area": None,
            })
            logger.info("Fast-forwarded '%s' to %s", target_name, source_id)
            return _done(snapshot, nxt, cmd, Outcome.FAST_FORWARD, source_id)

        result = three_way_merge(
            snapshot.commits[base_id].content,
            snapshot.commits[target_id].content,
            source_commit.content,
            source_name,
            context_lines=self.config.merge_context_lines,
        )

        if isinstance(result, ConflictedMerge):
            nxt = snapshot.model_copy(update={
                "working_directory": result.text,
                "staging_area": None,
                "merge_state": MergeState(source_branch=source_name),
            })
            logger.info(
                "Merge of '%s' into '%s' stopped on conflicts (base %s)",
                source_name, target_name, base_id,
            )
            return _done(snapshot, nxt, cmd, Outcome.CONFLICT)

        commit = self._new_commit(
            snapshot,
            _merge_parents(target_id, source_id),
            f"Merge branch '{source_name}' into '{target_name}'",
            self.config.system_author,
            result.text,
        )
        nxt = _with_commit(
            snapshot,
            commit,
            target_name,
            working_directory=commit.content,
            staging_area=None,
        )
        logger.info("Merged '%s' into '%s' as %s (base %s)", source_name, target_name, commit.id, base_id)
        return _done(snapshot, nxt, cmd, Outcome.MERGED, commit.id)

    def _revert(self, snapshot: RepositorySnapshot, cmd: RevertCommand) -> TransitionResult:
        branch_name = snapshot.current_branch
        if branch_name is None:
            return _reject(snapshot, cmd, Outcome.DETACHED_HEAD)
        if snapshot.merge_state is not None:
            return _reject(snapshot, cmd, Outcome.MERGE_IN_PROGRESS)
        reverted = snapshot.commits.get(cmd.commit_id)
        if reverted is None:
            return _reject(snapshot, cmd, Outcome.COMMIT_NOT_FOUND, cmd.commit_id)
        if reverted.is_root:
            return _reject(snapshot, cmd, Outcome.ROOT_COMMIT, cmd.commit_id)
        parent = snapshot.commits.get(reverted.parents[0])
        if parent is None:
            return _reject(snapshot, cmd, Outcome.COMMIT_NOT_FOUND, reverted.parents[0])
        branch = snapshot.branches.get(branch_name)
        if branch is None:
            return _reject(snapshot, cmd, Outcome.BRANCH_NOT_FOUND, branch_name)

        commit = self._new_commit(
            snapshot,
            (branch.commit_id,),
            f'Revert "{reverted.message}"',
            self.config.system_author,
            parent.content,
        )
        nxt = _with_commit(
            snapshot,
            commit,
            branch_name,
            working_directory=commit.content,
            staging_area=None,
        )
        logger.debug("Reverted %s as %s on '%s'", reverted.id, commit.id, branch_name)
        return _done(snapshot, nxt, cmd, Outcome.REVERTED, commit.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_commit(
        self,
        snapshot: RepositorySnapshot,
        parents: tuple[str, ...],
        message: str,
        author: str,
        content: str,
    ) -> Commit:
        """Build a commit with a fresh id.

        Parents must already be in the store (no forward references).
        """
        for parent in parents:
            if parent not in snapshot.commits:
                raise CommitNotFoundError(parent)
        return Commit(
            id=new_commit_id(self._id_factory, snapshot.commits),
            parents=parents,
            message=message,
            author=author,
            timestamp=self._clock(),
            content=content,
        )


def _merge_parents(first: str, second: str) -> tuple[str, ...]:
    if first == second:
        return (first,)
    return tuple(sorted((first, second)))


def _with_commit(
    snapshot: RepositorySnapshot,
    commit: Commit,
    branch_name: str,
    **updates: object,
) -> RepositorySnapshot:
    """Insert a commit, advance ``branch_name`` to it, and apply ``updates``."""
    return snapshot.model_copy(update={
        "commits": {**snapshot.commits, commit.id: commit},
        "branches": {**snapshot.branches, branch_name: Branch(name=branch_name, commit_id=commit.id)},
        "commit_order": (*snapshot.commit_order, commit.id),
        **updates,
    })


def _done(
    previous: RepositorySnapshot,
    snapshot: RepositorySnapshot,
    command: object,
    outcome: Outcome,
    commit_id: str | None = None,
) -> TransitionResult:
    return TransitionResult(
        snapshot=snapshot,
        outcome=outcome,
        previous=previous,
        command=command,
        commit_id=commit_id,
    )


def _reject(
    snapshot: RepositorySnapshot,
    command: object,
    outcome: Outcome,
    detail: str | None = None,
) -> TransitionResult:
    kind = getattr(command, "kind", None) or type(command).__name__
    logger.debug("Rejected %s: %s%s", kind, outcome.value, f" ({detail})" if detail else "")
    return TransitionResult(
        snapshot=snapshot,
        outcome=outcome,
        previous=snapshot,
        command=command,
        detail=detail,
    )


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

_default_engine: TransitionEngine | None = None


def _engine() -> TransitionEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = TransitionEngine()
    return _default_engine


def initial_snapshot() -> RepositorySnapshot:
    """A fresh repository built with the default configuration."""
    return _engine().initial_snapshot()


def apply(snapshot: RepositorySnapshot, command: object) -> RepositorySnapshot:
    """Apply a command with the default engine."""
    return _engine().apply(snapshot, command)


def dispatch(snapshot: RepositorySnapshot, command: object) -> TransitionResult:
    """Apply a command with the default engine and report the outcome."""
    return _engine().dispatch(snapshot, command)
