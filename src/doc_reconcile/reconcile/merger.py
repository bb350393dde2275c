"""Three-way merge of a document section.

Uses the ``merge3`` library (the algorithm used by Bazaar/Breezy) to align
base against current and base against incoming, then walks the base
line-index space and tags every span as a ``MergeRegion``.

Key design choices:

* Lines are split with ``str.split("\\n")`` and joined with ``"\\n"``.  An
  empty string is a single empty line, and a trailing newline is an empty
  last line, so split/join round-trips exactly.
* No whitespace normalisation: a whitespace-only edit is a real change.
* On conflict **incoming wins**.  Incoming is the agent's explicit,
  reviewed edit and current is the editor's possibly stale buffer; the
  overridden text is still reported in ``MergeResult.conflicts``.
* ``merge_section_content`` never writes conflict markers into the merged
  text.  ``render_conflict_markers`` produces a marked-up view for review.
"""

from __future__ import annotations

import difflib
import functools
import logging

from merge3 import Merge3

from ..validators import require_text
from .models import MergeRegion, MergeResult, RegionKind

logger = logging.getLogger(__name__)

# difflib's popularity heuristic drops frequent lines (blank lines in long
# Markdown sections) from the alignment; keep every line matchable.
_SEQUENCE_MATCHER = functools.partial(
    difflib.SequenceMatcher, autojunk=False
)


def split_lines(text: str) -> list[str]:
    """Split *text* into lines; ``join_lines`` is its exact inverse."""
    return text.split("\n")


def join_lines(lines: list[str]) -> str:
    """Join lines produced by ``split_lines``."""
    return "\n".join(lines)


def _classify(
    base: list[str], current: list[str], incoming: list[str]
) -> RegionKind:
    current_changed = current != base
    incoming_changed = incoming != base
    if current_changed and incoming_changed:
        if current == incoming:
            return RegionKind.CONVERGED
        return RegionKind.CONFLICT
    if current_changed:
        return RegionKind.CURRENT_ONLY
    if incoming_changed:
        return RegionKind.INCOMING_ONLY
    return RegionKind.STABLE


def _walk_regions(
    base: list[str], current: list[str], incoming: list[str]
) -> list[MergeRegion]:
    m3 = Merge3(
        base, current, incoming, sequence_matcher=_SEQUENCE_MATCHER
    )

    regions: list[MergeRegion] = []
    # base[0:iz], current[0:ic], incoming[0:ii] have been consumed
    iz = ic = ii = 0

    # Each sync region is a run of lines identical in all three texts; the
    # last one is an empty sentinel at the end of every sequence.
    for zmatch, zend, cmatch, cend, imatch, iend in m3.find_sync_regions():
        if zmatch > iz or cmatch > ic or imatch > ii:
            base_chunk = base[iz:zmatch]
            current_chunk = current[ic:cmatch]
            incoming_chunk = incoming[ii:imatch]
            regions.append(
                MergeRegion(
                    kind=_classify(
                        base_chunk, current_chunk, incoming_chunk
                    ),
                    base_start=iz,
                    base_end=zmatch,
                    base=base_chunk,
                    current=current_chunk,
                    incoming=incoming_chunk,
                )
            )

        if zend > zmatch:
            stable = base[zmatch:zend]
            regions.append(
                MergeRegion(
                    kind=RegionKind.STABLE,
                    base_start=zmatch,
                    base_end=zend,
                    base=stable,
                    current=stable,
                    incoming=stable,
                )
            )

        iz, ic, ii = zend, cend, iend

    return regions


def merge_regions(
    base: str, current: str, incoming: str
) -> list[MergeRegion]:
    """Classify every span of *base* for a three-way merge.

    Args:
        base: The common ancestor.
        current: The human editor's version.
        incoming: The agent's version.

    Returns:
        Regions in base order.  Concatenating every region's ``resolved``
        lines yields the merged text.

    Raises:
        TypeError: If any argument is not a string.
    """
    require_text("base", base)
    require_text("current", current)
    require_text("incoming", incoming)

    return _walk_regions(
        split_lines(base), split_lines(current), split_lines(incoming)
    )


def merge_section_content(
    base: str, current: str, incoming: str
) -> MergeResult:
    """Merge concurrent edits of a section made by an editor and an agent.

    Args:
        base: The last content both sides started from.
        current: The human editor's in-progress version.
        incoming: The agent's proposed version.

    Returns:
        A ``MergeResult``.  Every input produces a result: conflicting
        spans take incoming's lines and are listed in ``conflicts``.

    Raises:
        TypeError: If any argument is not a string.
    """
    require_text("base", base)
    require_text("current", current)
    require_text("incoming", incoming)

    if current == base:
        return MergeResult(merged=incoming)
    if incoming == base:
        return MergeResult(merged=current)
    if current == incoming:
        return MergeResult(merged=current)

    regions = _walk_regions(
        split_lines(base), split_lines(current), split_lines(incoming)
    )

    merged_lines: list[str] = []
    conflicts = []
    for region in regions:
        merged_lines.extend(region.resolved)
        if region.kind == RegionKind.CONFLICT:
            conflicts.append(region.to_conflict())

    logger.debug(
        "Three-way merge: %d regions, %d conflicts",
        len(regions),
        len(conflicts),
    )

    if conflicts:
        return MergeResult(
            merged=join_lines(merged_lines),
            has_conflict=True,
            conflicts=conflicts,
        )
    return MergeResult(merged=join_lines(merged_lines))


def render_conflict_markers(
    base: str,
    current: str,
    incoming: str,
    current_label: str = "CURRENT",
    incoming_label: str = "INCOMING",
) -> str:
    """Render a three-way merge with Git-style conflict markers.

    Non-conflicting regions appear as they do in the merged text; each
    conflict is shown as::

        <<<<<<< CURRENT
        ...current lines...
        =======
        ...incoming lines...
        >>>>>>> INCOMING

    Args:
        base: The common ancestor.
        current: The human editor's version.
        incoming: The agent's version.
        current_label: Label after the opening marker.
        incoming_label: Label after the closing marker.

    Returns:
        The marked-up text, for human review only.
    """
    lines: list[str] = []
    for region in merge_regions(base, current, incoming):
        if region.kind == RegionKind.CONFLICT:
            lines.append(f"<<<<<<< {current_label}")
            lines.extend(region.current)
            lines.append("=======")
            lines.extend(region.incoming)
            lines.append(f">>>>>>> {incoming_label}")
        else:
            lines.extend(region.resolved)
    return join_lines(lines)
