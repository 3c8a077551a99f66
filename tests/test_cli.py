"""CLI tests for GitFlow -- the run and shell commands via Click's CliRunner.

Every invocation passes --sequential-ids so commit ids are predictable
(c0001, c0002, ...).
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from gitflow.cli import cli

SCRIPT = "\n".join([
    '{"kind": "edit_working_directory", "text": "a\\nb\\nc"}',
    '{"kind": "stage"}',
    '{"kind": "commit", "message": "base", "author": "alice"}',
    '{"kind": "create_branch", "name": "feature"}',
    '{"kind": "checkout", "branchName": "feature"}',
    '{"kind": "edit_working_directory", "text": "a\\nB\\nc"}',
    '{"kind": "stage"}',
    '{"kind": "commit", "message": "capital b", "author": "bob"}',
    '{"kind": "checkout", "branch_name": "main"}',
    '{"kind": "merge", "source_branch_name": "feature"}',
])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


def _invoke(runner: CliRunner, *args: str, **kwargs):
    return runner.invoke(cli, ["--sequential-ids", *args], **kwargs)


# ---------------------------------------------------------------------------
# gitflow run
# ---------------------------------------------------------------------------

class TestRun:
    def test_run_script_file(self, runner: CliRunner):
        with runner.isolated_filesystem():
            with open("script.jsonl", "w") as f:
                f.write(SCRIPT)
            result = _invoke(runner, "run", "script.jsonl")
            assert result.exit_code == 0, result.output
            assert "commit committed c0001" in result.output
            assert "merge fast_forward c0002" in result.output
            assert "On branch main" in result.output
            assert "capital b" in result.output

    def test_run_from_stdin(self, runner: CliRunner):
        result = _invoke(runner, "run", "-", input=SCRIPT)
        assert result.exit_code == 0, result.output
        assert "fast_forward" in result.output

    def test_run_json_array(self, runner: CliRunner):
        script = json.dumps([
            {"kind": "edit_working_directory", "text": "v2"},
            {"kind": "stage"},
        ])
        result = _invoke(runner, "run", "-", input=script)
        assert result.exit_code == 0, result.output
        assert "stage staged" in result.output

    def test_run_json_dumps_snapshot(self, runner: CliRunner):
        result = _invoke(runner, "run", "--json", "-", input=SCRIPT)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["workingDirectory"] == "a\nB\nc"
        assert data["commitOrder"] == ["a1b2c3d", "c0001", "c0002"]
        assert data["head"] == {"kind": "branch", "name": "main"}

    def test_rejections_reported_in_lenient_mode(self, runner: CliRunner):
        result = _invoke(runner, "run", "-", input='{"kind": "stage"}')
        assert result.exit_code == 0
        assert "rejected" in result.output
        assert "nothing_to_stage" in result.output

    def test_strict_mode_fails_on_rejection(self, runner: CliRunner):
        result = _invoke(runner, "--strict", "run", "-", input='{"kind": "stage"}')
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Nothing to stage" in result.output

    def test_malformed_script(self, runner: CliRunner):
        result = _invoke(runner, "run", "-", input='{"kind": "rebase"}')
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_author_from_environment(self, runner: CliRunner):
        result = runner.invoke(
            cli,
            ["--sequential-ids", "shell"],
            input="edit v2\nstage\ncommit hello\nlog\nquit\n",
            env={"GITFLOW_AUTHOR": "carol"},
        )
        assert result.exit_code == 0, result.output
        assert "carol" in result.output

    def test_verify_and_verbose_flags(self, runner: CliRunner):
        result = _invoke(runner, "--verify", "--verbose", "run", "-", input=SCRIPT)
        assert result.exit_code == 0, result.output


# ---------------------------------------------------------------------------
# gitflow shell
# ---------------------------------------------------------------------------

class TestShell:
    def test_commit_flow(self, runner: CliRunner):
        result = _invoke(
            runner, "shell",
            input="edit hello\nstage\ncommit first change\nstatus\nlog\nquit\n",
        )
        assert result.exit_code == 0, result.output
        assert "commit committed c0001" in result.output
        assert "first change (main)" in result.output
        assert "On branch main" in result.output

    def test_eof_ends_session(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="status\n")
        assert result.exit_code == 0, result.output

    def test_unknown_command(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="rebase main\nquit\n")
        assert result.exit_code == 0
        assert "Error:" in result.output
        assert "unknown command" in result.output

    def test_missing_argument(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="checkout\nquit\n")
        assert "usage: checkout NAME" in result.output

    def test_rejection_is_reported(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="stage\nquit\n")
        assert "rejected" in result.output

    def test_strict_shell_reports_error_and_continues(self, runner: CliRunner):
        result = _invoke(runner, "--strict", "shell", input="stage\nstatus\nquit\n")
        assert result.exit_code == 0
        assert "Error:" in result.output
        assert "On branch main" in result.output

    def test_conflict_and_resolve(self, runner: CliRunner):
        lines = [
            r"edit a\nb\nc", "stage", "commit base",
            "branch feature",
            r"edit a\nX\nc", "stage", "commit ours",
            "checkout feature",
            r"edit a\nY\nc", "stage", "commit theirs",
            "checkout main",
            "merge feature",
            "show",
            "checkout feature",
            "resolve theirs",
            "stage",
            "commit merged",
            "graph",
            "quit",
        ]
        result = _invoke(runner, "shell", input="\n".join(lines) + "\n")
        assert result.exit_code == 0, result.output
        assert "CONFLICT" in result.output
        assert "<<<<<<< HEAD" in result.output
        assert "merge_in_progress" in result.output
        assert "commit merge_completed c0004" in result.output
        assert "(main)" in result.output

    def test_resolve_without_merge(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="resolve ours\nquit\n")
        assert "no merge in progress" in result.output

    def test_edit_with_editor(self, runner: CliRunner, monkeypatch):
        import click

        monkeypatch.setattr(click, "edit", lambda text: "from editor\n")
        result = _invoke(runner, "shell", input="edit\nshow\nquit\n")
        assert result.exit_code == 0, result.output
        assert "from editor" in result.output

    def test_editor_closed_without_saving(self, runner: CliRunner, monkeypatch):
        import click

        monkeypatch.setattr(click, "edit", lambda text: None)
        result = _invoke(runner, "shell", input="edit\nquit\n")
        assert "Editor closed without saving" in result.output

    def test_branches_and_diff(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="branch dev\nbranches\nedit changed\ndiff\nquit\n")
        assert result.exit_code == 0, result.output
        assert "* main" in result.output
        assert "dev" in result.output
        assert "+changed" in result.output

    def test_help(self, runner: CliRunner):
        result = _invoke(runner, "shell", input="help\nquit\n")
        assert "resolve ours|theirs|edit" in result.output
