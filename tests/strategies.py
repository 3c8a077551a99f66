"""Hypothesis strategies for GitFlow commands.

Texts, branch names and commit ids are drawn from small pools so random
sequences regularly hit the interesting cases: clean merges, conflicts,
fast-forwards, duplicate branches and references to missing commits.
"""

from hypothesis import strategies as st

from gitflow.models.commands import (
    CheckoutCommand,
    CommitCommand,
    CreateBranchCommand,
    EditWorkingDirectoryCommand,
    InitCommand,
    MergeCommand,
    RevertCommand,
    StageCommand,
)

# Short multi-line texts over a tiny vocabulary
file_text = st.lists(
    st.sampled_from(["a", "b", "c", "X", "Y", ""]),
    min_size=0,
    max_size=5,
).map("\n".join)

branch_name = st.sampled_from(["main", "feature", "dev", "fix/1", "bad name", ""])

# Sequential ids are c0001, c0002, ...; "a1b2c3d" is the root, "zzzzzzz" never exists
commit_id = st.sampled_from(["a1b2c3d", "c0001", "c0002", "c0003", "c0004", "c0005", "zzzzzzz"])

edit_command = st.builds(EditWorkingDirectoryCommand, text=file_text)

commit_command = st.builds(
    CommitCommand,
    message=st.sampled_from(["m1", "m2", "fix"]),
    author=st.just("tester"),
)

create_branch_command = st.builds(
    CreateBranchCommand,
    name=branch_name,
    from_commit_id=st.one_of(st.none(), commit_id),
)

any_command = st.one_of(
    edit_command,
    edit_command,
    st.just(StageCommand()),
    st.just(StageCommand()),
    commit_command,
    commit_command,
    create_branch_command,
    st.builds(CheckoutCommand, branch_name=branch_name),
    st.builds(MergeCommand, source_branch_name=branch_name),
    st.builds(RevertCommand, commit_id=commit_id),
    st.just(InitCommand()),
)

command_sequence = st.lists(any_command, min_size=1, max_size=40)
