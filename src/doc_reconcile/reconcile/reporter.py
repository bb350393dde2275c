"""Merge report formatting functions.

Provides human-readable and machine-readable output for merge outcomes,
for audit logs and for showing an editor what an agent edit overrode:

- ``format_unified_diff`` -- unified diff between two texts.
- ``format_merge_report`` -- audit summary of a ``MergeResult``.
- ``format_conflict_diff`` -- unified diff for one conflict region.
- ``merge_result_to_json`` -- structured dict for JSON output.
"""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ConflictRegion, MergeResult

# Lines of each side shown per conflict in the audit report
_PREVIEW_LINES = 20


# ------------------------------------------------------------------
# Unified diff
# ------------------------------------------------------------------


def format_unified_diff(
    old_content: str,
    new_content: str,
    label_old: str = "old",
    label_new: str = "new",
) -> str:
    """Generate a unified diff between two strings.

    Args:
        old_content: The original content.
        new_content: The modified content.
        label_old: Label for the old side in the diff header.
        label_new: Label for the new side in the diff header.

    Returns:
        A unified diff string.  Empty string if the contents are identical.
    """
    old_lines = old_content.splitlines(True)
    new_lines = new_content.splitlines(True)

    diff_lines = difflib.unified_diff(
        old_lines,
        new_lines,
        fromfile=label_old,
        tofile=label_new,
    )

    return "".join(diff_lines)


# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def _preview(lines: list[str], indent: str = "    ") -> list[str]:
    if not lines or lines == [""]:
        return [f"{indent}(empty)"]
    shown = [f"{indent}{line}" for line in lines[:_PREVIEW_LINES]]
    if len(lines) > _PREVIEW_LINES:
        shown.append(
            f"{indent}... ({len(lines) - _PREVIEW_LINES} more lines)"
        )
    return shown


def _line_range(conflict: ConflictRegion) -> str:
    # 1-based, inclusive, the way editors number lines
    if conflict.base_end <= conflict.base_start:
        return f"insertion before base line {conflict.base_start + 1}"
    if conflict.base_end - conflict.base_start == 1:
        return f"base line {conflict.base_start + 1}"
    return f"base lines {conflict.base_start + 1}-{conflict.base_end}"


def format_merge_report(
    result: MergeResult, section: str | None = None
) -> str:
    """Format a merge outcome as human-readable text.

    Each conflict shows the base line range, the editor's text that was
    overridden and the agent's text that was kept.

    Args:
        result: The merge outcome.
        section: Optional section name for the header.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = "Merge report"
    if section:
        header += f" for '{section}'"
    lines.append(header)

    if not result.has_conflict:
        lines.append("Clean merge: no conflicting changes.")
        return "\n".join(lines)

    conflicts = result.conflicts or []
    noun = "conflict" if len(conflicts) == 1 else "conflicts"
    lines.append(
        f"{len(conflicts)} {noun} resolved in favour of the incoming edit."
    )
    lines.append("")

    for number, conflict in enumerate(conflicts, start=1):
        lines.append(f"Conflict {number} ({_line_range(conflict)}):")
        lines.append("  Current (overridden):")
        lines.extend(_preview(conflict.current))
        lines.append("  Incoming (kept):")
        lines.extend(_preview(conflict.incoming))
        lines.append("")

    return "\n".join(lines).rstrip()


def format_conflict_diff(conflict: ConflictRegion) -> str:
    """Format a single conflict region as a unified diff.

    Args:
        conflict: The conflict region.

    Returns:
        Diff from current's lines to incoming's lines, or a note when
        both sides hold the same lines.
    """
    # One entry per line so an empty side and a single blank line differ
    diff_text = "".join(
        difflib.unified_diff(
            [line + "\n" for line in conflict.current],
            [line + "\n" for line in conflict.incoming],
            fromfile="current",
            tofile="incoming",
        )
    )
    if not diff_text:
        return "(no textual differences)"
    return diff_text.rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def merge_result_to_json(result: MergeResult) -> dict:
    """Convert a merge outcome to a structured dict for JSON serialisation.

    Args:
        result: The merge outcome.

    Returns:
        Dict with the merged text, conflict flag, count and per-conflict
        details.
    """
    conflicts = result.conflicts or []
    return {
        "merged": result.merged,
        "has_conflict": result.has_conflict,
        "conflict_count": len(conflicts),
        "conflicts": [c.model_dump(mode="json") for c in conflicts],
    }
