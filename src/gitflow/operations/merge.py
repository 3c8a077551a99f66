"""Three-way merge engine for GitFlow.

Merges two versions of the virtual file against their common ancestor by
cross-applying patches: the ancestor->target patch is applied to the source
text and the ancestor->source patch is applied to the target text.  When
both applications succeed and agree, the agreed text is the merge.  Anything
else is reported as one whole-file conflict block; hunk-level conflict
regions are not attempted.

Texts are split on ``"\\n"`` and re-joined with ``"\\n"``, so a trailing
newline is an empty final line and survives a round trip unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from difflib import SequenceMatcher

from gitflow.models.merge import (
    CONFLICT_END,
    CONFLICT_SEPARATOR,
    CONFLICT_START,
    CleanMerge,
    ConflictedMerge,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Patches
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Hunk:
    """A single replacement of old lines by new lines.

    Attributes:
        old_start: Index of the first old line in the text the patch was
            made from.
        old_lines: Lines the hunk expects to find (context plus removed).
        new_lines: Lines the hunk writes in their place.
    """

    old_start: int
    old_lines: tuple[str, ...]
    new_lines: tuple[str, ...]


@dataclass(frozen=True)
class Patch:
    """Ordered, non-overlapping hunks transforming one text into another."""

    hunks: tuple[Hunk, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.hunks

    def __len__(self) -> int:
        return len(self.hunks)


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def make_patch(old: str, new: str, context_lines: int = 1) -> Patch:
    """Compute a line-oriented patch from ``old`` to ``new``.

    Args:
        old: Original text.
        new: Modified text.
        context_lines: Unchanged lines kept around each change.  Context
            lines must match when the patch is applied elsewhere.
    """
    a = split_lines(old)
    b = split_lines(new)
    matcher = SequenceMatcher(a=a, b=b, autojunk=False)
    hunks: list[Hunk] = []
    for group in matcher.get_grouped_opcodes(context_lines):
        i1, j1 = group[0][1], group[0][3]
        i2, j2 = group[-1][2], group[-1][4]
        hunks.append(
            Hunk(old_start=i1, old_lines=tuple(a[i1:i2]), new_lines=tuple(b[j1:j2]))
        )
    return Patch(hunks=tuple(hunks))


def _matches(lines: list[str], expected: tuple[str, ...], at: int) -> bool:
    return tuple(lines[at:at + len(expected)]) == expected


def _locate(
    lines: list[str],
    expected: tuple[str, ...],
    preferred: int,
    lower: int,
) -> int | None:
    """Find where a hunk applies, searching outward from ``preferred``.

    Positions before ``lower`` are already consumed by earlier hunks.
    """
    upper = len(lines) - len(expected)
    if upper < lower:
        return None
    preferred = min(max(preferred, lower), upper)
    if not expected:
        return preferred

    distance = 0
    while True:
        forward = preferred + distance
        backward = preferred - distance
        if forward > upper and backward < lower:
            return None
        if forward <= upper and _matches(lines, expected, forward):
            return forward
        if distance and backward >= lower and _matches(lines, expected, backward):
            return backward
        distance += 1


def apply_patch(patch: Patch, text: str) -> str | None:
    """Apply a patch to ``text``.

    Returns:
        The patched text, or None if any hunk fails to apply cleanly.
    """
    if patch.is_empty:
        return text

    lines = split_lines(text)
    out: list[str] = []
    pos = 0
    offset = 0
    for hunk in patch.hunks:
        at = _locate(lines, hunk.old_lines, hunk.old_start + offset, pos)
        if at is None:
            return None
        out.extend(lines[pos:at])
        out.extend(hunk.new_lines)
        pos = at + len(hunk.old_lines)
        offset = at - hunk.old_start
    out.extend(lines[pos:])
    return join_lines(out)


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def conflict_block(target: str, source: str, source_branch: str) -> str:
    """Wrap both whole texts in git-style conflict markers.

    The block ends with a newline when both sides do.
    """
    trailing = target.endswith("\n") and source.endswith("\n")
    ours = target[:-1] if target.endswith("\n") else target
    theirs = source[:-1] if source.endswith("\n") else source
    block = "\n".join([
        CONFLICT_START,
        ours,
        CONFLICT_SEPARATOR,
        theirs,
        f"{CONFLICT_END} {source_branch}",
    ])
    return block + "\n" if trailing else block


def three_way_merge(
    base: str,
    target: str,
    source: str,
    source_branch: str,
    *,
    context_lines: int = 1,
) -> CleanMerge | ConflictedMerge:
    """Merge ``source`` into ``target`` using ``base`` as the common ancestor.

    Args:
        base: Content of the common ancestor.
        target: Content on the receiving branch (HEAD).
        source: Content on the branch being merged in.
        source_branch: Name used in the closing conflict marker.
        context_lines: Context carried by each hunk.

    Returns:
        CleanMerge with the merged text, or ConflictedMerge whose text is
        a single conflict block containing both whole files.
    """
    if target == source or source == base:
        return CleanMerge(text=target)
    if target == base:
        return CleanMerge(text=source)

    target_patch = make_patch(base, target, context_lines)
    source_patch = make_patch(base, source, context_lines)

    source_then_target = apply_patch(target_patch, source)
    target_then_source = apply_patch(source_patch, target)

    if (
        source_then_target is not None
        and target_then_source is not None
        and source_then_target == target_then_source
    ):
        logger.debug(
            "Clean merge of '%s': %d target hunk(s), %d source hunk(s)",
            source_branch, len(target_patch), len(source_patch),
        )
        return CleanMerge(text=source_then_target)

    if source_then_target is None or target_then_source is None:
        logger.debug("Merge of '%s': a patch did not apply", source_branch)
    else:
        logger.debug("Merge of '%s': reconciled texts disagree", source_branch)

    return ConflictedMerge(
        text=conflict_block(target, source, source_branch),
        target_text=target,
        source_text=source,
        source_branch=source_branch,
    )
