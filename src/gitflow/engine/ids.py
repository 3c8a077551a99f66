"""Commit id and timestamp sources for GitFlow.

Ids only need to be unique within one repository, so a short random hex
string is enough; ``new_commit_id`` retries on the rare collision.  The
sequential factory and fixed clocks make tests and scripted runs
reproducible.
"""

from __future__ import annotations

import itertools
import uuid
from collections.abc import Container
from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable

_MAX_ATTEMPTS = 64


@runtime_checkable
class IdFactory(Protocol):
    """Protocol for pluggable commit id generation."""

    def __call__(self) -> str:
        """Return a candidate commit id."""
        ...


@runtime_checkable
class Clock(Protocol):
    """Protocol for pluggable commit timestamps."""

    def __call__(self) -> datetime:
        """Return the current time (timezone-aware)."""
        ...


class RandomIdFactory:
    """Short random hex ids (``uuid4().hex`` prefix)."""

    def __init__(self, length: int = 7) -> None:
        self.length = length

    def __call__(self) -> str:
        return uuid.uuid4().hex[:self.length]

    def __repr__(self) -> str:
        return f"RandomIdFactory(length={self.length})"


class SequentialIdFactory:
    """Deterministic ids: ``c0001``, ``c0002``, ..."""

    def __init__(self, prefix: str = "c", width: int = 4, start: int = 1) -> None:
        self.prefix = prefix
        self.width = width
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter):0{self.width}d}"

    def __repr__(self) -> str:
        return f"SequentialIdFactory(prefix={self.prefix!r})"


def new_commit_id(factory: IdFactory, existing: Container[str]) -> str:
    """Draw ids from ``factory`` until one is not in ``existing``.

    Raises:
        RuntimeError: If the factory keeps producing taken ids.
    """
    for _ in range(_MAX_ATTEMPTS):
        candidate = factory()
        if candidate not in existing:
            return candidate
    raise RuntimeError(
        f"Could not generate a unique commit id after {_MAX_ATTEMPTS} attempts "
        f"(factory={factory!r})"
    )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TickingClock:
    """Deterministic clock advancing by ``step`` on every call."""

    def __init__(
        self,
        start: datetime | None = None,
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self._current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        now = self._current
        self._current = now + self.step
        return now
