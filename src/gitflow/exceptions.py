"""GitFlow exception hierarchy.

All GitFlow-specific exceptions inherit from GitFlowError.

The transition engine itself never raises for rejected commands -- it returns
the unchanged snapshot.  These exceptions surface through
``TransitionResult.raise_if_rejected()``, the strict-mode ``Repository``
facade, command parsing, and the invariant checker.
"""


class GitFlowError(Exception):
    """Base exception for all GitFlow errors."""


class CommitNotFoundError(GitFlowError):
    """Raised when a commit id lookup fails."""

    def __init__(self, commit_id: str) -> None:
        self.commit_id = commit_id
        super().__init__(f"Commit not found: {commit_id}")


class BranchNotFoundError(GitFlowError):
    """Raised when a branch lookup fails."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"Branch not found: {branch_name}")


class BranchExistsError(GitFlowError):
    """Raised when trying to create a branch that already exists."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"Branch already exists: {branch_name}")


class InvalidBranchNameError(GitFlowError):
    """Raised when a branch name violates naming rules."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid branch name '{name}': {reason}")


class DetachedHeadError(GitFlowError):
    """Raised when a branch-only command runs while HEAD is detached."""

    def __init__(self) -> None:
        super().__init__(
            "HEAD is detached. "
            "Use 'checkout main' to return to a branch."
        )


class MergeInProgressError(GitFlowError):
    """Raised when a command is blocked by an unresolved merge."""

    def __init__(self, source_branch: str | None = None) -> None:
        self.source_branch = source_branch
        msg = "A merge is in progress"
        if source_branch:
            msg += f" (merging '{source_branch}')"
        msg += ". Resolve the conflicts, then stage and commit."
        super().__init__(msg)


class NothingToStageError(GitFlowError):
    """Raised when the working directory matches HEAD."""

    def __init__(self) -> None:
        super().__init__("Nothing to stage: working directory matches HEAD")


class NothingStagedError(GitFlowError):
    """Raised when committing with an empty staging area."""

    def __init__(self) -> None:
        super().__init__("Nothing to commit: stage your changes first")


class RootCommitError(GitFlowError):
    """Raised when reverting a commit without parents."""

    def __init__(self, commit_id: str) -> None:
        self.commit_id = commit_id
        super().__init__(f"Cannot revert root commit: {commit_id}")


class MergeError(GitFlowError):
    """Base exception for all merge errors."""


class SelfMergeError(MergeError):
    """Raised when merging a branch into itself."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"Cannot merge branch '{branch_name}' into itself")


class NothingToMergeError(MergeError):
    """Raised when the source branch is already merged (up-to-date)."""

    def __init__(self, source_branch: str) -> None:
        self.source_branch = source_branch
        super().__init__(f"Branch '{source_branch}' is already up-to-date")


class NoCommonAncestorError(MergeError):
    """Raised when two branch heads share no history."""

    def __init__(self, source_branch: str, target_branch: str | None = None) -> None:
        self.source_branch = source_branch
        self.target_branch = target_branch
        target = f" and '{target_branch}'" if target_branch else ""
        super().__init__(
            f"Branches '{source_branch}'{target} have no common ancestor"
        )


class CommandValidationError(GitFlowError):
    """Raised when a command payload fails validation.

    Named CommandValidationError (not ValidationError) to avoid
    collision with pydantic.ValidationError.
    """


class UnknownCommandError(GitFlowError):
    """Raised when a command kind is not recognised."""

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown command: {kind!r}")


class InvariantViolationError(GitFlowError):
    """Raised when a snapshot breaks a repository invariant."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        joined = "; ".join(violations[:5])
        more = f" (+{len(violations) - 5} more)" if len(violations) > 5 else ""
        super().__init__(f"Repository invariants violated: {joined}{more}")
