"""Command vocabulary for GitFlow.

Defines the eight commands the transition engine understands as Pydantic
models with a discriminated union (CommandPayload).  Commands are plain
immutable values; the engine decides whether they apply.
"""

from __future__ import annotations

import json
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from gitflow.exceptions import CommandValidationError

_COMMAND_CONFIG = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ---------------------------------------------------------------------------
# Command models
# ---------------------------------------------------------------------------


class InitCommand(BaseModel):
    """Replace the repository with a fresh one."""

    model_config = _COMMAND_CONFIG

    kind: Literal["init"] = "init"


class EditWorkingDirectoryCommand(BaseModel):
    """Overwrite the working directory buffer."""

    model_config = _COMMAND_CONFIG

    kind: Literal["edit_working_directory"] = "edit_working_directory"
    text: str


class StageCommand(BaseModel):
    """Copy the working directory into the staging area."""

    model_config = _COMMAND_CONFIG

    kind: Literal["stage"] = "stage"


class CommitCommand(BaseModel):
    """Record the staged snapshot on the current branch."""

    model_config = _COMMAND_CONFIG

    kind: Literal["commit"] = "commit"
    message: str
    author: str


class CreateBranchCommand(BaseModel):
    """Create a branch.  ``from_commit_id`` defaults to the resolved HEAD."""

    model_config = _COMMAND_CONFIG

    kind: Literal["create_branch"] = "create_branch"
    name: str
    from_commit_id: Optional[str] = None


class CheckoutCommand(BaseModel):
    """Attach HEAD to a branch and load its content."""

    model_config = _COMMAND_CONFIG

    kind: Literal["checkout"] = "checkout"
    branch_name: str


class MergeCommand(BaseModel):
    """Merge a branch into the current branch."""

    model_config = _COMMAND_CONFIG

    kind: Literal["merge"] = "merge"
    source_branch_name: str


class RevertCommand(BaseModel):
    """Restore the first-parent content of a commit as a new commit."""

    model_config = _COMMAND_CONFIG

    kind: Literal["revert"] = "revert"
    commit_id: str


# ---------------------------------------------------------------------------
# Discriminated union
# ---------------------------------------------------------------------------

CommandPayload = Annotated[
    Union[
        InitCommand,
        EditWorkingDirectoryCommand,
        StageCommand,
        CommitCommand,
        CreateBranchCommand,
        CheckoutCommand,
        MergeCommand,
        RevertCommand,
    ],
    Field(discriminator="kind"),
]

_command_adapter = TypeAdapter(CommandPayload)

COMMAND_KINDS: frozenset[str] = frozenset({
    "init",
    "edit_working_directory",
    "stage",
    "commit",
    "create_branch",
    "checkout",
    "merge",
    "revert",
})


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_command(data: dict) -> BaseModel:
    """Validate a command dict against the command union.

    Field names may use snake_case or camelCase.

    Raises:
        CommandValidationError: If the kind is unknown or fields are invalid.
    """
    if not isinstance(data, dict):
        raise CommandValidationError(
            f"Command must be an object, got {type(data).__name__}"
        )
    try:
        return _command_adapter.validate_python(data)
    except ValidationError as e:
        raise CommandValidationError(
            f"Invalid command {data.get('kind')!r}: {e}"
        ) from e


def parse_commands(text: str) -> list[BaseModel]:
    """Parse a command script.

    Accepts either a JSON array of command objects or JSON lines (one
    object per line; blank lines and ``#`` comments are skipped).
    """
    stripped = text.strip()
    if not stripped:
        return []

    if stripped.startswith("["):
        try:
            items = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise CommandValidationError(f"Malformed command script: {e}") from e
        return [parse_command(item) for item in items]

    commands: list[BaseModel] = []
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            item = json.loads(line)
        except json.JSONDecodeError as e:
            raise CommandValidationError(
                f"Malformed command on line {lineno}: {e}"
            ) from e
        commands.append(parse_command(item))
    return commands
