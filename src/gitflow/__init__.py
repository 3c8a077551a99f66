"""GitFlow: an in-memory, single-file version control state engine.

Commands go in, immutable repository snapshots come out.  The engine
covers staging, commits, branches, three-way merges with conflict
resolution, and reverts.
"""

from gitflow._version import __version__

# Core entry points
from gitflow.repository import Repository
from gitflow.engine import (
    SequentialIdFactory,
    TickingClock,
    TransitionEngine,
    apply,
    check_invariants,
    dispatch,
    initial_snapshot,
)

# Configuration
from gitflow.models.config import EngineConfig

# Snapshot and command models
from gitflow.models import (
    Branch,
    BranchHead,
    BranchInfo,
    CheckoutCommand,
    CleanMerge,
    Commit,
    CommitCommand,
    ConflictedMerge,
    CreateBranchCommand,
    DetachedHead,
    EditWorkingDirectoryCommand,
    InitCommand,
    MergeCommand,
    MergeState,
    Outcome,
    RepositorySnapshot,
    RevertCommand,
    StageCommand,
    TransitionResult,
    parse_command,
    parse_commands,
)

# Operations
from gitflow.operations.history import RepoState, StatusInfo
from gitflow.operations.merge import three_way_merge
from gitflow.operations.timeline import Timeline, TimelineNode

# Exceptions
from gitflow.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    CommandValidationError,
    CommitNotFoundError,
    DetachedHeadError,
    GitFlowError,
    InvalidBranchNameError,
    InvariantViolationError,
    MergeError,
    MergeInProgressError,
    NoCommonAncestorError,
    NothingStagedError,
    NothingToMergeError,
    NothingToStageError,
    RootCommitError,
    SelfMergeError,
    UnknownCommandError,
)

__all__ = [
    "__version__",
    # Core
    "Repository",
    "TransitionEngine",
    "SequentialIdFactory",
    "TickingClock",
    "apply",
    "check_invariants",
    "dispatch",
    "initial_snapshot",
    # Config
    "EngineConfig",
    # Models
    "Branch",
    "BranchHead",
    "BranchInfo",
    "CheckoutCommand",
    "CleanMerge",
    "Commit",
    "CommitCommand",
    "ConflictedMerge",
    "CreateBranchCommand",
    "DetachedHead",
    "EditWorkingDirectoryCommand",
    "InitCommand",
    "MergeCommand",
    "MergeState",
    "Outcome",
    "RepositorySnapshot",
    "RevertCommand",
    "StageCommand",
    "TransitionResult",
    "parse_command",
    "parse_commands",
    # Operations
    "RepoState",
    "StatusInfo",
    "Timeline",
    "TimelineNode",
    "three_way_merge",
    # Exceptions
    "BranchExistsError",
    "BranchNotFoundError",
    "CommandValidationError",
    "CommitNotFoundError",
    "DetachedHeadError",
    "GitFlowError",
    "InvalidBranchNameError",
    "InvariantViolationError",
    "MergeError",
    "MergeInProgressError",
    "NoCommonAncestorError",
    "NothingStagedError",
    "NothingToMergeError",
    "NothingToStageError",
    "RootCommitError",
    "SelfMergeError",
    "UnknownCommandError",
]
