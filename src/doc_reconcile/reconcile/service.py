"""Draft reconciliation workflows built on the patch and merge engines.

The engines are pure; this module is the thin layer a document-editing
service wraps around them:

1. Read the editor's current draft from a ``DraftStore``.
2. Three-way merge the agent's edit into it.
3. Write the merged text back (only when it changed).
4. Record revisions for undo/redo.
5. Return the single-hunk patch to broadcast to connected editors.

``replay_patch`` is the receiving side: a stored or transmitted patch is
re-applied only after ``validate_diff`` confirms it still fits.

Errors raised by the store propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel

from .merger import merge_section_content
from .models import DiffResult, MergeResult
from .patch import generate_diff, validate_diff
from .revisions import RevisionManager

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class DraftStore(Protocol):
    """Content store the reconciliation workflows read from and write to."""

    def read(self, draft_id: int) -> str:
        """Return the current content of *draft_id*."""
        ...  # pragma: no cover

    def write(self, draft_id: int, content: str) -> None:
        """Replace the content of *draft_id*."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Outcome model
# ---------------------------------------------------------------------------


class ReconcileOutcome(BaseModel):
    """Result of merging an agent edit into a stored draft.

    Attributes:
        draft_id: The reconciled draft.
        result: The three-way merge result.
        patch: Diff from the stored content to the merged content.
        written: Whether the store was updated.
    """

    draft_id: int
    result: MergeResult
    patch: DiffResult
    written: bool

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------------


def reconcile_draft(
    store: DraftStore,
    draft_id: int,
    base: str,
    incoming: str,
    *,
    revisions: RevisionManager | None = None,
    user_id: int | None = None,
) -> ReconcileOutcome:
    """Merge an agent edit into the editor's stored draft.

    Args:
        store: Draft content store.
        draft_id: Draft to reconcile.
        base: Content both the editor and the agent started from.
        incoming: The agent's proposed content.
        revisions: Optional revision history to record the merge in.
        user_id: Author recorded on new revisions.

    Returns:
        A ``ReconcileOutcome``; ``patch`` is empty when nothing changed.
    """
    current = store.read(draft_id)
    result = merge_section_content(base, current, incoming)

    if result.has_conflict:
        logger.warning(
            "Merge conflict in draft %s: %d region(s) resolved in favour "
            "of the incoming edit",
            draft_id,
            len(result.conflicts or []),
        )
    else:
        logger.debug("Clean merge for draft %s", draft_id)

    patch = generate_diff(current, result.merged)
    if patch.is_empty:
        return ReconcileOutcome(
            draft_id=draft_id, result=result, patch=patch, written=False
        )

    store.write(draft_id, result.merged)

    if revisions is not None:
        if revisions.get_revision_count(draft_id) == 0:
            revisions.add_revision(
                draft_id, current, user_id, "Initial content"
            )
        description = (
            "Agent edit merged with conflicts"
            if result.has_conflict
            else "Agent edit merged"
        )
        revisions.add_revision(
            draft_id, result.merged, user_id, description
        )

    logger.info(
        "Draft %s updated (%s)", draft_id, patch.diffs[0].operation
    )
    return ReconcileOutcome(
        draft_id=draft_id, result=result, patch=patch, written=True
    )


def replay_patch(
    store: DraftStore, draft_id: int, patch: DiffResult
) -> bool:
    """Apply a stored patch to a draft if it still fits.

    The patch is applied only when it turns the draft's current content
    into ``patch.new_content``; otherwise the draft is left untouched.

    Args:
        store: Draft content store.
        draft_id: Draft to patch.
        patch: A previously generated or transmitted diff.

    Returns:
        ``True`` if the patch was applied, ``False`` if it is stale.
    """
    current = store.read(draft_id)
    if not validate_diff(current, patch.new_content, patch.diffs):
        logger.warning(
            "Stale patch for draft %s skipped (%d operation(s))",
            draft_id,
            len(patch.diffs),
        )
        return False

    # validate_diff established apply_diff(current, diffs) == new_content
    if patch.diffs:
        store.write(draft_id, patch.new_content)
    return True
