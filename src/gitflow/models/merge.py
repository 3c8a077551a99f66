"""Merge domain models for GitFlow.

MergeState marks a repository that is waiting for a conflict resolution.
MergeOutcome is what the three-way merge engine returns: a clean text or a
conflict-marked text.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

CONFLICT_START = "<<<<<<< HEAD"
CONFLICT_SEPARATOR = "======="
CONFLICT_END = ">>>>>>>"


class MergeState(BaseModel):
    """Present on a snapshot iff a merge stopped on conflicts."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    source_branch: str


class CleanMerge(BaseModel):
    """Both sides reconciled to the same text."""

    model_config = {"frozen": True}

    status: Literal["clean"] = "clean"
    text: str

    @property
    def has_conflicts(self) -> bool:
        return False


class ConflictedMerge(BaseModel):
    """The sides disagree; ``text`` carries one whole-file conflict block."""

    model_config = {"frozen": True}

    status: Literal["conflicted"] = "conflicted"
    text: str
    target_text: str
    source_text: str
    source_branch: str

    @property
    def has_conflicts(self) -> bool:
        return True


MergeOutcome = Annotated[
    Union[CleanMerge, ConflictedMerge],
    Field(discriminator="status"),
]
