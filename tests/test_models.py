"""Tests for domain models: commands, commits, config, outcomes, id sources, invariants."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from gitflow.engine.ids import SequentialIdFactory, TickingClock, new_commit_id
from gitflow.engine.invariants import assert_invariants, check_invariants
from gitflow.exceptions import CommandValidationError, InvariantViolationError
from gitflow.models import (
    CheckoutCommand,
    Commit,
    CommitCommand,
    CreateBranchCommand,
    EditWorkingDirectoryCommand,
    EngineConfig,
    InitCommand,
    MergeState,
    Outcome,
    StageCommand,
    parse_command,
    parse_commands,
)
from gitflow.models.branch import Branch
from gitflow.models.refs import BranchHead, DetachedHead
from gitflow.models.transition import REJECTED_OUTCOMES
from tests.conftest import ROOT_ID

_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestParseCommand:
    def test_each_kind(self):
        assert isinstance(parse_command({"kind": "init"}), InitCommand)
        assert isinstance(parse_command({"kind": "stage"}), StageCommand)
        assert parse_command({"kind": "checkout", "branch_name": "f"}) == CheckoutCommand(branch_name="f")

    def test_camel_case_keys(self):
        cmd = parse_command({"kind": "checkout", "branchName": "dev"})
        assert cmd.branch_name == "dev"

    def test_optional_from_commit(self):
        cmd = parse_command({"kind": "create_branch", "name": "f"})
        assert cmd == CreateBranchCommand(name="f", from_commit_id=None)

    def test_unknown_kind(self):
        with pytest.raises(CommandValidationError):
            parse_command({"kind": "rebase"})

    def test_missing_field(self):
        with pytest.raises(CommandValidationError, match="commit"):
            parse_command({"kind": "commit", "message": "m"})

    def test_not_a_dict(self):
        with pytest.raises(CommandValidationError):
            parse_command(["stage"])

    def test_commands_are_frozen(self):
        cmd = EditWorkingDirectoryCommand(text="x")
        with pytest.raises(ValidationError):
            cmd.text = "y"


class TestParseCommands:
    def test_json_array(self):
        cmds = parse_commands('[{"kind": "stage"}, {"kind": "init"}]')
        assert cmds == [StageCommand(), InitCommand()]

    def test_json_lines_with_comments(self):
        text = """
        # set things up
        {"kind": "edit_working_directory", "text": "v2"}

        {"kind": "commit", "message": "m", "author": "u"}
        """
        cmds = parse_commands(text)
        assert cmds == [
            EditWorkingDirectoryCommand(text="v2"),
            CommitCommand(message="m", author="u"),
        ]

    def test_empty_script(self):
        assert parse_commands("  \n ") == []

    def test_malformed_line_reports_line_number(self):
        with pytest.raises(CommandValidationError, match="line 2"):
            parse_commands('{"kind": "stage"}\n{not json}')

    def test_malformed_array(self):
        with pytest.raises(CommandValidationError):
            parse_commands("[{")


# ---------------------------------------------------------------------------
# Commit / config
# ---------------------------------------------------------------------------

class TestCommit:
    def test_properties(self):
        root = Commit(id="r", message="m", author="a", timestamp=_TS, content="")
        merge = Commit(id="m", parents=("a", "b"), message="m", author="a", timestamp=_TS, content="")
        assert root.is_root and not root.is_merge
        assert root.first_parent is None
        assert merge.is_merge
        assert merge.first_parent == "a"

    def test_at_most_two_parents(self):
        with pytest.raises(ValidationError, match="at most 2"):
            Commit(id="x", parents=("a", "b", "c"), message="m", author="a", timestamp=_TS, content="")

    def test_distinct_merge_parents(self):
        with pytest.raises(ValidationError, match="distinct"):
            Commit(id="x", parents=("a", "a"), message="m", author="a", timestamp=_TS, content="")

    def test_str_truncates(self):
        commit = Commit(id="x", message="y" * 80, author="a", timestamp=_TS, content="")
        assert str(commit).endswith("...")


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.default_branch == "main"
        assert cfg.root_commit_id == ROOT_ID
        assert cfg.merge_context_lines == 1
        assert cfg.validate_branch_names is False

    def test_id_length_bounds(self):
        with pytest.raises(ValidationError):
            EngineConfig(commit_id_length=2)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            EngineConfig().default_branch = "trunk"


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class TestOutcome:
    def test_rejected_flags(self):
        assert Outcome.UP_TO_DATE.rejected
        assert not Outcome.FAST_FORWARD.rejected
        assert not Outcome.CONFLICT.rejected

    def test_every_rejection_maps_to_exception(self, engine, snap):
        from gitflow.models.transition import TransitionResult

        for outcome in REJECTED_OUTCOMES:
            result = TransitionResult(snapshot=snap, outcome=outcome, previous=snap, detail="x")
            assert result.to_exception() is not None, outcome

    def test_applied_outcome_has_no_exception(self, engine, snap):
        result = engine.dispatch(snap, EditWorkingDirectoryCommand(text="x"))
        assert result.to_exception() is None
        assert result.raise_if_rejected() is result
        assert result.changed


# ---------------------------------------------------------------------------
# Ids and clocks
# ---------------------------------------------------------------------------

class TestIds:
    def test_sequential(self):
        factory = SequentialIdFactory()
        assert [factory(), factory()] == ["c0001", "c0002"]

    def test_new_commit_id_skips_taken(self):
        factory = SequentialIdFactory()
        assert new_commit_id(factory, {"c0001", "c0002"}) == "c0003"

    def test_new_commit_id_gives_up(self):
        with pytest.raises(RuntimeError):
            new_commit_id(lambda: "same", {"same"})

    def test_ticking_clock(self):
        clock = TickingClock(step=timedelta(minutes=1))
        first, second = clock(), clock()
        assert second - first == timedelta(minutes=1)
        assert first.tzinfo is not None


# ---------------------------------------------------------------------------
# Invariant checker
# ---------------------------------------------------------------------------

class TestInvariants:
    def test_fresh_snapshot_is_sound(self, snap):
        assert check_invariants(snap) == []

    def test_missing_parent(self, snap):
        bad = Commit(id="x", parents=("ghost",), message="m", author="a", timestamp=_TS, content="")
        broken = snap.model_copy(update={
            "commits": {**snap.commits, "x": bad},
            "commit_order": (*snap.commit_order, "x"),
        })
        assert any("missing parent" in v for v in check_invariants(broken))

    def test_order_mismatch(self, snap):
        broken = snap.model_copy(update={"commit_order": (ROOT_ID, ROOT_ID)})
        violations = check_invariants(broken)
        assert any("duplicate" in v for v in violations)

    def test_branch_to_missing_commit(self, snap):
        broken = snap.model_copy(update={
            "branches": {**snap.branches, "f": Branch(name="f", commit_id="nope")},
        })
        assert any("missing commit" in v for v in check_invariants(broken))

    def test_head_on_missing_branch(self, snap):
        broken = snap.model_copy(update={"head": BranchHead(name="gone")})
        assert any("missing branch" in v for v in check_invariants(broken))

    def test_merge_state_with_detached_head(self, snap):
        broken = snap.model_copy(update={
            "head": DetachedHead(id=ROOT_ID),
            "merge_state": MergeState(source_branch="main"),
        })
        assert any("detached" in v for v in check_invariants(broken))

    def test_assert_raises(self, snap):
        broken = snap.model_copy(update={"commit_order": ()})
        with pytest.raises(InvariantViolationError) as exc_info:
            assert_invariants(broken)
        assert exc_info.value.violations


# ---------------------------------------------------------------------------
# Snapshot immutability
# ---------------------------------------------------------------------------

class TestSnapshotImmutability:
    def test_branches_are_read_only(self, engine, snap):
        after = engine.apply(snap, EditWorkingDirectoryCommand(text="v2"))
        with pytest.raises(TypeError):
            after.branches["x"] = after.branches["main"]
        assert list(snap.branches) == ["main"]
        assert list(after.branches) == ["main"]

    def test_commits_are_read_only(self, snap):
        with pytest.raises(TypeError):
            del snap.commits[ROOT_ID]
        assert ROOT_ID in snap.commits

    def test_copies_stay_read_only(self, snap):
        copied = snap.model_copy(update={
            "branches": {**snap.branches, "f": Branch(name="f", commit_id=ROOT_ID)},
        })
        with pytest.raises(TypeError):
            copied.branches["g"] = copied.branches["f"]
        assert "f" not in snap.branches

    def test_update_dict_is_not_aliased(self, snap):
        branches = dict(snap.branches)
        copied = snap.model_copy(update={"branches": branches})
        branches["x"] = branches["main"]
        assert "x" not in copied.branches

    def test_new_commit_does_not_touch_previous_snapshot(self, engine, snap):
        snap2 = engine.apply(snap, EditWorkingDirectoryCommand(text="v2"))
        snap2 = engine.apply(snap2, StageCommand())
        after = engine.apply(snap2, CommitCommand(message="m", author="u"))
        assert len(after.commits) == 2
        assert len(snap2.commits) == 1
        assert snap2.branches["main"].commit_id == ROOT_ID

    def test_json_round_trip_keeps_read_only_views(self, snap):
        from gitflow.models.snapshot import RepositorySnapshot

        restored = RepositorySnapshot.from_json(snap.to_json())
        assert restored == snap
        assert '"commitId"' in snap.to_json()
        with pytest.raises(TypeError):
            restored.commits["x"] = restored.commits[ROOT_ID]
