"""Commit domain model for GitFlow.

A Commit is an immutable whole-file snapshot with zero, one, or two parents.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class Commit(BaseModel):
    """Immutable commit record.

    ``parents`` holds 0 ids for the root commit, 1 for ordinary commits,
    and 2 for merge commits.  Merge parents are stored sorted so the order
    does not depend on which side initiated the merge.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    id: str
    parents: tuple[str, ...] = ()
    message: str
    author: str
    timestamp: datetime
    content: str

    @field_validator("parents")
    @classmethod
    def _check_parent_count(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(v) > 2:
            raise ValueError(f"a commit has at most 2 parents, got {len(v)}")
        if len(v) == 2 and v[0] == v[1]:
            raise ValueError("merge parents must be distinct")
        return v

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_merge(self) -> bool:
        return len(self.parents) == 2

    @property
    def first_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    def __str__(self) -> str:
        msg = self.message
        if len(msg) > 60:
            msg = msg[:57] + "..."
        return f"{self.id} {msg}"

    def __repr__(self) -> str:
        msg = self.message
        if len(msg) > 60:
            msg = msg[:57] + "..."
        return f"Commit({self.id} parents={list(self.parents)} {msg!r})"

    def pprint(self) -> None:
        """Pretty-print this commit using rich formatting."""
        from gitflow.formatting import pprint_commit

        pprint_commit(self)
