"""Repository facade -- the stateful entry point for GitFlow.

Holds the current snapshot, dispatches commands through a TransitionEngine,
and offers one method per command plus read-only views.  The snapshots
themselves stay immutable; only the facade's pointer to the current one
moves.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from gitflow.engine.invariants import assert_invariants
from gitflow.engine.transition import TransitionEngine
from gitflow.models.commands import (
    CheckoutCommand,
    CommitCommand,
    CreateBranchCommand,
    EditWorkingDirectoryCommand,
    InitCommand,
    MergeCommand,
    RevertCommand,
    StageCommand,
)
from gitflow.models.config import EngineConfig
from gitflow.operations import history as _history
from gitflow.operations.branch import branches_at
from gitflow.operations.diff import working_diff
from gitflow.operations.timeline import build_timeline

if TYPE_CHECKING:
    from gitflow.engine.ids import Clock, IdFactory
    from gitflow.models.branch import BranchInfo
    from gitflow.models.commit import Commit
    from gitflow.models.refs import Head
    from gitflow.models.snapshot import RepositorySnapshot
    from gitflow.models.transition import TransitionResult
    from gitflow.operations.diff import TextDiff
    from gitflow.operations.history import RepoState, StatusInfo
    from gitflow.operations.timeline import Timeline

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "You"
DEFAULT_HISTORY_LIMIT = 100


class Repository:
    """An in-memory repository with a single virtual file.

    Create one via :meth:`Repository.open` (fresh repository) or
    :meth:`Repository.from_snapshot` (restore / testing).

    Example::

        repo = Repository.open()
        repo.edit("hello\\n")
        repo.stage()
        repo.commit("say hello")
        repo.branch("feature")

    Every command method returns the :class:`TransitionResult`.  Rejected
    commands leave the repository untouched; with ``strict=True`` they raise
    the matching :class:`~gitflow.exceptions.GitFlowError` instead.
    """

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def __init__(
        self,
        *,
        engine: TransitionEngine,
        snapshot: RepositorySnapshot,
        strict: bool = False,
        verify: bool = False,
        author: str = DEFAULT_AUTHOR,
        history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._engine = engine
        self._snapshot = snapshot
        self._strict = strict
        self._verify = verify
        self.author = author
        # Oldest results drop off once the limit is hit (None keeps everything)
        self.history: deque[TransitionResult] = deque(maxlen=history_limit)

    @classmethod
    def open(
        cls,
        *,
        config: EngineConfig | None = None,
        id_factory: IdFactory | None = None,
        clock: Clock | None = None,
        strict: bool = False,
        verify: bool = False,
        author: str = DEFAULT_AUTHOR,
        history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    ) -> Repository:
        """Create a fresh repository holding only the root commit.

        Args:
            config: Engine configuration.  Defaults created if *None*.
            id_factory: Commit id source.  Random short hex by default.
            clock: Timestamp source.  UTC wall clock by default.
            strict: Raise on rejected commands instead of returning them.
            verify: Re-check repository invariants after every command.
            author: Default author for commits.
            history_limit: How many recent results ``history`` keeps.
        """
        engine = TransitionEngine(config, id_factory=id_factory, clock=clock)
        repo = cls(
            engine=engine,
            snapshot=engine.initial_snapshot(),
            strict=strict,
            verify=verify,
            author=author,
            history_limit=history_limit,
        )
        if verify:
            assert_invariants(repo._snapshot)
        return repo

    @classmethod
    def from_snapshot(
        cls,
        snapshot: RepositorySnapshot,
        *,
        engine: TransitionEngine | None = None,
        strict: bool = False,
        verify: bool = False,
        author: str = DEFAULT_AUTHOR,
        history_limit: int | None = DEFAULT_HISTORY_LIMIT,
    ) -> Repository:
        """Wrap an existing snapshot (e.g. one loaded with ``from_json``)."""
        if verify:
            assert_invariants(snapshot)
        return cls(
            engine=engine or TransitionEngine(),
            snapshot=snapshot,
            strict=strict,
            verify=verify,
            author=author,
            history_limit=history_limit,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> RepositorySnapshot:
        return self._snapshot

    @property
    def config(self) -> EngineConfig:
        return self._engine.config

    @property
    def engine(self) -> TransitionEngine:
        return self._engine

    @property
    def head(self) -> str | None:
        """Commit id HEAD resolves to."""
        return self._snapshot.resolve_head()

    @property
    def head_ref(self) -> Head:
        return self._snapshot.head

    @property
    def current_branch(self) -> str | None:
        return self._snapshot.current_branch

    @property
    def is_detached(self) -> bool:
        return self._snapshot.is_detached

    @property
    def is_merging(self) -> bool:
        return self._snapshot.is_merging

    @property
    def state(self) -> RepoState:
        return _history.repo_state(self._snapshot)

    @property
    def working_directory(self) -> str:
        return self._snapshot.working_directory

    @property
    def staging_area(self) -> str | None:
        return self._snapshot.staging_area

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def verify(self) -> bool:
        return self._verify

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, command: object) -> TransitionResult:
        """Apply ``command`` (model or dict) to the current snapshot.

        Raises:
            GitFlowError: In strict mode, when the command is rejected.
            InvariantViolationError: In verify mode, when the next
                snapshot breaks a repository invariant.
        """
        result = self._engine.dispatch(self._snapshot, command)
        if self._verify and result.changed:
            assert_invariants(result.snapshot)
        self._snapshot = result.snapshot
        self.history.append(result)
        if result.rejected:
            logger.debug("%s", result)
            if self._strict:
                result.raise_if_rejected()
        return result

    def run(self, commands: list[object]) -> list[TransitionResult]:
        """Dispatch commands in order and return every result."""
        return [self.dispatch(command) for command in commands]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def init(self) -> TransitionResult:
        """Discard everything and start over from a fresh root commit."""
        return self.dispatch(InitCommand())

    def edit(self, text: str) -> TransitionResult:
        return self.dispatch(EditWorkingDirectoryCommand(text=text))

    def stage(self) -> TransitionResult:
        return self.dispatch(StageCommand())

    def commit(self, message: str, author: str | None = None) -> TransitionResult:
        """Commit the staged snapshot on the current branch.

        Completes a pending merge when one is in progress.
        """
        return self.dispatch(CommitCommand(message=message, author=author or self.author))

    def branch(self, name: str, source: str | None = None) -> TransitionResult:
        """Create branch ``name`` at ``source`` (default: HEAD).  Does not switch."""
        return self.dispatch(CreateBranchCommand(name=name, from_commit_id=source))

    def checkout(self, name: str) -> TransitionResult:
        return self.dispatch(CheckoutCommand(branch_name=name))

    def merge(self, source: str) -> TransitionResult:
        """Merge branch ``source`` into the current branch."""
        return self.dispatch(MergeCommand(source_branch_name=source))

    def revert(self, commit_id: str) -> TransitionResult:
        return self.dispatch(RevertCommand(commit_id=commit_id))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_commit(self, commit_id: str) -> Commit | None:
        return self._snapshot.get_commit(commit_id)

    def log(self, limit: int | None = None) -> list[Commit]:
        """First-parent history from HEAD, newest first."""
        return _history.log(self._snapshot, limit=limit)

    def branches_at(self, commit_id: str) -> list[str]:
        """Branches whose tip is ``commit_id``, default branch first."""
        return branches_at(self._snapshot, commit_id, self.config.default_branch)

    def status(self) -> StatusInfo:
        return _history.compute_status(self._snapshot)

    def list_branches(self, *, verbose: bool = False) -> list[BranchInfo]:
        return _history.list_branches(
            self._snapshot,
            default_branch=self.config.default_branch,
            verbose=verbose,
        )

    def diff(self, *, staged: bool = False) -> TextDiff:
        """Diff the working directory against HEAD (or the staging area)."""
        return working_diff(self._snapshot, against="staged" if staged else "head")

    def timeline(self) -> Timeline:
        return build_timeline(self._snapshot, self.config.default_branch)

    def check(self) -> list[str]:
        """Invariant violations of the current snapshot (empty when sound)."""
        from gitflow.engine.invariants import check_invariants

        return check_invariants(self._snapshot)

    # ------------------------------------------------------------------
    # Repr
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        where = self.current_branch or "detached"
        return f"Repository(head='{self.head}', branch='{where}', commits={len(self._snapshot.commits)})"
