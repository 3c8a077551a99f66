"""Repository snapshot model for GitFlow.

RepositorySnapshot is the immutable aggregate the transition engine consumes
and produces: commit store, branch registry, HEAD, working state, creation
order, and the pending-merge marker.  Every command yields a new snapshot;
unchanged mappings and tuples are shared between consecutive snapshots.  The
commit store and branch registry are exposed as read-only
:class:`types.MappingProxyType` views, so writing through one snapshot raises
``TypeError`` instead of changing its predecessors.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

from pydantic import BaseModel, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from gitflow.models.branch import Branch
from gitflow.models.commit import Commit
from gitflow.models.merge import CONFLICT_START, MergeState
from gitflow.models.refs import BranchHead, DetachedHead, Head

_MAPPING_FIELDS = ("commits", "branches")


class RepositorySnapshot(BaseModel):
    """Immutable repository state.

    Serializes with camelCase aliases (``stagingArea``, ``workingDirectory``,
    ``commitOrder``, ``mergeState``) so the rendering side can rely on the
    same field names whichever language consumes it.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    commits: dict[str, Commit]
    branches: dict[str, Branch]
    head: Head
    staging_area: Optional[str] = None
    working_directory: str
    commit_order: tuple[str, ...]
    merge_state: Optional[MergeState] = None

    @field_validator("commits", "branches", mode="after")
    @classmethod
    def _read_only(cls, value: dict) -> Mapping:
        return MappingProxyType(value)

    @field_serializer("commits", "branches", mode="wrap")
    def _plain_dict(self, value: Mapping, handler: Any) -> Any:
        return handler(dict(value))

    def model_copy(
        self,
        *,
        update: Mapping[str, Any] | None = None,
        deep: bool = False,
    ) -> RepositorySnapshot:
        """Copy with ``update`` applied, keeping the mapping fields read-only.

        Every field holds immutable values, so ``deep`` is accepted but a
        shallow copy is always made.
        """
        if update:
            update = {
                key: MappingProxyType(dict(value)) if key in _MAPPING_FIELDS else value
                for key, value in update.items()
            }
        return super().model_copy(update=update)

    def __deepcopy__(self, memo: dict[int, Any] | None = None) -> RepositorySnapshot:
        return self

    # ------------------------------------------------------------------
    # HEAD resolution
    # ------------------------------------------------------------------

    def resolve_head(self) -> str | None:
        """Resolve HEAD to a commit id, or None if it dangles."""
        if isinstance(self.head, BranchHead):
            branch = self.branches.get(self.head.name)
            return branch.commit_id if branch is not None else None
        if self.head.id in self.commits:
            return self.head.id
        return None

    @property
    def head_commit(self) -> Commit | None:
        commit_id = self.resolve_head()
        if commit_id is None:
            return None
        return self.commits.get(commit_id)

    @property
    def current_branch(self) -> str | None:
        """Name of the checked-out branch, None when detached."""
        if isinstance(self.head, BranchHead):
            return self.head.name
        return None

    @property
    def is_detached(self) -> bool:
        return isinstance(self.head, DetachedHead)

    @property
    def is_merging(self) -> bool:
        return self.merge_state is not None

    @property
    def has_conflict_markers(self) -> bool:
        """Whether the working directory still carries conflict markers."""
        return CONFLICT_START in self.working_directory

    def get_commit(self, commit_id: str) -> Commit | None:
        return self.commits.get(commit_id)

    def get_branch(self, name: str) -> Branch | None:
        return self.branches.get(name)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self, *, indent: int | None = 2) -> str:
        """Dump the snapshot with the camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, data: str) -> RepositorySnapshot:
        return cls.model_validate_json(data)

    def __repr__(self) -> str:
        head = self.current_branch or f"detached@{self.resolve_head()}"
        flags = []
        if self.staging_area is not None:
            flags.append("staged")
        if self.merge_state is not None:
            flags.append(f"merging={self.merge_state.source_branch}")
        extra = f" {' '.join(flags)}" if flags else ""
        return (
            f"RepositorySnapshot(head={head} commits={len(self.commits)} "
            f"branches={len(self.branches)}{extra})"
        )
