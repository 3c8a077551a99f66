"""Shared test fixtures for GitFlow.

Every fixture uses deterministic commit ids (``c0001``, ``c0002``, ...) and a
ticking clock so snapshots are reproducible across runs.
"""

from __future__ import annotations

import pytest

from gitflow import EngineConfig, Repository, SequentialIdFactory, TickingClock, TransitionEngine

ROOT_ID = "a1b2c3d"


def make_engine(**config) -> TransitionEngine:
    """Create a TransitionEngine with deterministic ids and timestamps."""
    return TransitionEngine(
        EngineConfig(**config),
        id_factory=SequentialIdFactory(),
        clock=TickingClock(),
    )


def make_repo(*, strict: bool = False, verify: bool = True, **config) -> Repository:
    """Create a fresh in-memory Repository for testing."""
    return Repository.open(
        config=EngineConfig(**config),
        id_factory=SequentialIdFactory(),
        clock=TickingClock(),
        strict=strict,
        verify=verify,
    )


def commit_text(repo: Repository, text: str, message: str = "update") -> str:
    """Edit, stage and commit ``text``; return the new commit id."""
    repo.edit(text)
    repo.stage()
    result = repo.commit(message)
    assert result.commit_id is not None, result
    return result.commit_id


def diverge(repo: Repository, base: str, ours: str, theirs: str, branch: str = "feature") -> dict[str, str]:
    """Build main and ``branch`` diverging from a common ``base`` commit.

    Leaves HEAD on main.  Returns the ids keyed ``base``, ``main``, ``branch``.
    """
    base_id = commit_text(repo, base, "base")
    repo.branch(branch)
    main_id = commit_text(repo, ours, "ours")
    repo.checkout(branch)
    branch_id = commit_text(repo, theirs, "theirs")
    repo.checkout("main")
    return {"base": base_id, "main": main_id, "branch": branch_id}


@pytest.fixture
def engine() -> TransitionEngine:
    return make_engine()


@pytest.fixture
def snap(engine: TransitionEngine):
    """Initial snapshot from the deterministic engine."""
    return engine.initial_snapshot()


@pytest.fixture
def repo() -> Repository:
    """Lenient repository with invariant verification on."""
    return make_repo()


@pytest.fixture
def strict_repo() -> Repository:
    """Repository that raises on rejected commands."""
    return make_repo(strict=True)


@pytest.fixture
def conflicted_repo() -> Repository:
    """Repository on main with a pending, conflicting merge of 'feature'."""
    r = make_repo()
    diverge(r, "a\nb\nc", "a\nX\nc", "a\nY\nc")
    result = r.merge("feature")
    assert result.outcome.value == "conflict"
    return r
