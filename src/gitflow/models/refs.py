"""HEAD reference models for GitFlow.

HEAD is a tagged value: attached to a branch, or detached at a commit.
Only the branch form is produced by the commands in scope; the detached
form exists so snapshots built by hand can express it.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class BranchHead(BaseModel):
    """HEAD attached to a branch."""

    model_config = {"frozen": True}

    kind: Literal["branch"] = "branch"
    name: str

    def __str__(self) -> str:
        return f"refs/heads/{self.name}"


class DetachedHead(BaseModel):
    """HEAD detached at a commit."""

    model_config = {"frozen": True}

    kind: Literal["commit"] = "commit"
    id: str

    def __str__(self) -> str:
        return self.id


Head = Annotated[
    Union[BranchHead, DetachedHead],
    Field(discriminator="kind"),
]
