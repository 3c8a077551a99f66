"""Property tests: random command sequences keep every repository invariant."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from gitflow.engine.invariants import check_invariants
from gitflow.models.commands import InitCommand, MergeCommand, StageCommand
from gitflow.operations.dag import find_cycle
from tests.conftest import make_engine
from tests.strategies import command_sequence, file_text


class TestCommandSequences:
    @given(commands=command_sequence)
    @settings(max_examples=200, deadline=None)
    def test_invariants_hold_after_every_step(self, commands):
        engine = make_engine()
        snap = engine.initial_snapshot()
        for command in commands:
            snap = engine.apply(snap, command)
            assert check_invariants(snap) == []

    @given(commands=command_sequence)
    @settings(max_examples=100, deadline=None)
    def test_rejected_commands_return_same_snapshot(self, commands):
        engine = make_engine()
        snap = engine.initial_snapshot()
        for command in commands:
            result = engine.dispatch(snap, command)
            if result.rejected:
                assert result.snapshot is snap
            snap = result.snapshot

    @given(commands=command_sequence)
    @settings(max_examples=100, deadline=None)
    def test_history_is_append_only(self, commands):
        engine = make_engine()
        snap = engine.initial_snapshot()
        for command in commands:
            nxt = engine.apply(snap, command)
            if not isinstance(command, InitCommand):
                assert nxt.commit_order[:len(snap.commit_order)] == snap.commit_order
                for cid, commit in snap.commits.items():
                    assert nxt.commits[cid] == commit
            snap = nxt

    @given(commands=command_sequence)
    @settings(max_examples=100, deadline=None)
    def test_merge_state_implies_attached_head(self, commands):
        engine = make_engine()
        snap = engine.initial_snapshot()
        for command in commands:
            snap = engine.apply(snap, command)
            if snap.merge_state is not None:
                assert snap.current_branch is not None
                assert snap.merge_state.source_branch in snap.branches

    @given(commands=command_sequence)
    @settings(max_examples=100, deadline=None)
    def test_stage_is_idempotent(self, commands):
        engine = make_engine()
        snap = engine.initial_snapshot()
        for command in commands:
            snap = engine.apply(snap, command)
        once = engine.apply(snap, StageCommand())
        twice = engine.apply(once, StageCommand())
        assert twice.staging_area == once.staging_area
        assert twice.commits == once.commits
        assert twice.branches == once.branches


class TestMergeProperties:
    @given(base=file_text, ours=file_text, theirs=file_text)
    @settings(max_examples=150, deadline=None)
    def test_merge_outcome_is_sound(self, base, ours, theirs):
        from gitflow.models.commands import (
            CheckoutCommand,
            CommitCommand,
            CreateBranchCommand,
            EditWorkingDirectoryCommand,
        )

        engine = make_engine(initial_content="<root>")

        def commit(snap, text):
            for cmd in (
                EditWorkingDirectoryCommand(text=text),
                StageCommand(),
                CommitCommand(message="m", author="u"),
            ):
                snap = engine.apply(snap, cmd)
            return snap

        snap = commit(engine.initial_snapshot(), base)
        snap = engine.apply(snap, CreateBranchCommand(name="feature"))
        snap = commit(snap, ours)
        snap = engine.apply(snap, CheckoutCommand(branch_name="feature"))
        snap = commit(snap, theirs)
        snap = engine.apply(snap, CheckoutCommand(branch_name="main"))

        result = engine.dispatch(snap, MergeCommand(source_branch_name="feature"))
        after = result.snapshot
        assert check_invariants(after) == []
        assert find_cycle(after.commits) is None
        if after.merge_state is not None:
            assert after.working_directory.startswith("<<<<<<< HEAD")
            assert after.branches == snap.branches
        elif result.commit_id is not None:
            assert after.branches["main"].commit_id == result.commit_id

    @given(text=st.text(max_size=30))
    @settings(max_examples=50, deadline=None)
    def test_identical_sides_never_conflict(self, text):
        from gitflow.operations.merge import three_way_merge

        assert three_way_merge("base", text, text, "f").text == text
