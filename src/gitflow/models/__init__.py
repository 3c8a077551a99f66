"""Domain models for GitFlow."""

from gitflow.models.branch import Branch, BranchInfo
from gitflow.models.commands import (
    CheckoutCommand,
    CommandPayload,
    CommitCommand,
    CreateBranchCommand,
    EditWorkingDirectoryCommand,
    InitCommand,
    MergeCommand,
    RevertCommand,
    StageCommand,
    parse_command,
    parse_commands,
)
from gitflow.models.commit import Commit
from gitflow.models.config import EngineConfig
from gitflow.models.merge import CleanMerge, ConflictedMerge, MergeOutcome, MergeState
from gitflow.models.refs import BranchHead, DetachedHead, Head
from gitflow.models.snapshot import RepositorySnapshot
from gitflow.models.transition import Outcome, TransitionResult

__all__ = [
    "Branch",
    "BranchHead",
    "BranchInfo",
    "CheckoutCommand",
    "CleanMerge",
    "CommandPayload",
    "Commit",
    "CommitCommand",
    "ConflictedMerge",
    "CreateBranchCommand",
    "DetachedHead",
    "EditWorkingDirectoryCommand",
    "EngineConfig",
    "Head",
    "InitCommand",
    "MergeCommand",
    "MergeOutcome",
    "MergeState",
    "Outcome",
    "RepositorySnapshot",
    "RevertCommand",
    "StageCommand",
    "TransitionResult",
    "parse_command",
    "parse_commands",
]
