"""Repository state engine: transitions, id sources, invariant checks."""

from gitflow.engine.ids import (
    Clock,
    IdFactory,
    RandomIdFactory,
    SequentialIdFactory,
    TickingClock,
    new_commit_id,
    utc_now,
)
from gitflow.engine.invariants import assert_invariants, check_invariants
from gitflow.engine.transition import (
    TransitionEngine,
    apply,
    dispatch,
    initial_snapshot,
)

__all__ = [
    "Clock",
    "IdFactory",
    "RandomIdFactory",
    "SequentialIdFactory",
    "TickingClock",
    "TransitionEngine",
    "apply",
    "assert_invariants",
    "check_invariants",
    "dispatch",
    "initial_snapshot",
    "new_commit_id",
    "utc_now",
]
