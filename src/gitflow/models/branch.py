"""Branch domain models for GitFlow.

Branch is the registry entry stored in a snapshot.
BranchInfo is the view returned when listing branches.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class Branch(BaseModel):
    """A named pointer into the commit store."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    name: str
    commit_id: str


class BranchInfo(BaseModel):
    """Branch information for listings.

    Returned by Repository.list_branches().
    """

    name: str
    commit_id: str
    is_current: bool = False
    commit_count: Optional[int] = None  # first-parent chain length
    message: Optional[str] = None  # tip commit message
