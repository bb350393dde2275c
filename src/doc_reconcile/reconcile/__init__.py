"""Document reconciliation core.

Public API for representing edits as positional patches and for
three-way merging concurrent edits of a document section made by a human
editor ("current") and an agent ("incoming") against a shared "base".

Modules:

- ``models``    -- ``DiffOperation`` variants, ``DiffResult``,
  ``RegionKind``, ``MergeRegion``, ``ConflictRegion``, ``MergeResult``.
- ``patch``     -- Patch Engine: ``generate_diff``, ``apply_diff``,
  ``validate_diff``.
- ``merger``    -- Three-Way Merge Engine via the ``merge3`` library.
- ``reporter``  -- Audit text, unified diffs and JSON output.
- ``revisions`` -- ``RevisionManager``: bounded per-draft undo/redo.
- ``service``   -- ``reconcile_draft`` and ``replay_patch`` over a
  ``DraftStore``.

Diff lists apply **sequentially**: each operation's position refers to
the content produced by the operations before it, not to the original.

Usage example
-------------
::

    from doc_reconcile.reconcile import (
        apply_diff,
        generate_diff,
        merge_section_content,
    )

    result = merge_section_content(base, current, incoming)
    if result.has_conflict:
        for conflict in result.conflicts:
            print(conflict.base_start, conflict.current, conflict.incoming)

    patch = generate_diff(current, result.merged)
    assert apply_diff(current, patch.diffs) == result.merged
"""

from .merger import (
    merge_regions,
    merge_section_content,
    render_conflict_markers,
)
from .models import (
    ConflictRegion,
    DeleteOperation,
    DiffOperation,
    DiffResult,
    InsertOperation,
    MergeRegion,
    MergeResult,
    RegionKind,
    ReplaceOperation,
    dump_diffs,
    parse_diffs,
)
from .patch import (
    PatchApplicationError,
    apply_diff,
    generate_diff,
    validate_diff,
)
from .reporter import (
    format_conflict_diff,
    format_merge_report,
    format_unified_diff,
    merge_result_to_json,
)
from .revisions import Revision, RevisionManager
from .service import (
    DraftStore,
    ReconcileOutcome,
    reconcile_draft,
    replay_patch,
)

__all__ = [
    "ConflictRegion",
    "DeleteOperation",
    "DiffOperation",
    "DiffResult",
    "DraftStore",
    "InsertOperation",
    "MergeRegion",
    "MergeResult",
    "PatchApplicationError",
    "ReconcileOutcome",
    "RegionKind",
    "ReplaceOperation",
    "Revision",
    "RevisionManager",
    "apply_diff",
    "dump_diffs",
    "format_conflict_diff",
    "format_merge_report",
    "format_unified_diff",
    "generate_diff",
    "merge_regions",
    "merge_result_to_json",
    "merge_section_content",
    "parse_diffs",
    "reconcile_draft",
    "render_conflict_markers",
    "replay_patch",
    "validate_diff",
]
