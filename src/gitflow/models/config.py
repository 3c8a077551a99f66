"""Configuration models for GitFlow.

EngineConfig holds the constants the transition engine bakes into new
repositories (root commit, system author, default branch) and the knobs of
the merge engine.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_INITIAL_CONTENT = (
    "// Welcome to GitFlow!\n"
    "// This is your workspace. Type something here and stage your changes.\n"
)


class EngineConfig(BaseModel):
    """Per-repository engine configuration."""

    model_config = {"frozen": True}

    default_branch: str = "main"
    root_commit_id: str = "a1b2c3d"
    root_message: str = "Initial commit"
    system_author: str = "GitFlow"
    initial_content: str = DEFAULT_INITIAL_CONTENT
    commit_id_length: int = Field(default=7, ge=4, le=32)
    merge_context_lines: int = Field(default=1, ge=0)
    validate_branch_names: bool = False
