"""Positional patch generation, application and validation.

A patch is a list of ``DiffOperation`` models.  Key design choices:

* ``generate_diff`` emits a **single hunk**: the common prefix and suffix
  are stripped and the differing middle becomes one ``insert``, ``delete``
  or ``replace``.  It represents one contiguous edit compactly; it does not
  minimise edit distance across scattered changes.
* ``apply_diff`` applies operations **sequentially**.  Each position is
  relative to the content produced by the previous operation in the list,
  so a list can describe a chain of edits ("replace region A, then delete
  what is now region B").
* Out-of-range operations raise ``PatchApplicationError``; content is
  never clamped or truncated to make a stale patch fit.
"""

from __future__ import annotations

import logging

from ..validators import require_text
from .models import (
    DeleteOperation,
    DiffOperation,
    DiffResult,
    InsertOperation,
    ReplaceOperation,
)

logger = logging.getLogger(__name__)


class PatchApplicationError(ValueError):
    """A diff operation does not fit the content it is applied to.

    Attributes:
        index: Position of the failing operation in the diff list.
        operation: The failing operation.
        content_length: Length of the content at that step.
    """

    def __init__(
        self, index: int, operation: DiffOperation, content_length: int
    ) -> None:
        self.index = index
        self.operation = operation
        self.content_length = content_length
        span = f"position {operation.position}"
        if not isinstance(operation, InsertOperation):
            span += f", length {operation.length}"
        super().__init__(
            f"Diff operation #{index} ({operation.operation} at {span}) "
            f"is out of range for content of length {content_length}"
        )


def _common_prefix_length(a: str, b: str) -> int:
    limit = min(len(a), len(b))
    i = 0
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def _common_suffix_length(a: str, b: str, prefix: int) -> int:
    # Bounded so prefix and suffix never overlap.
    limit = min(len(a), len(b)) - prefix
    i = 0
    while i < limit and a[len(a) - 1 - i] == b[len(b) - 1 - i]:
        i += 1
    return i


def generate_diff(old_content: str, new_content: str) -> DiffResult:
    """Compute a single-hunk diff between two strings.

    Args:
        old_content: The original content.
        new_content: The modified content.

    Returns:
        A ``DiffResult`` whose ``diffs`` is empty when the strings are
        identical and otherwise holds exactly one operation positioned at
        the end of the common prefix.

    Raises:
        TypeError: If either argument is not a string.
    """
    require_text("old_content", old_content)
    require_text("new_content", new_content)

    if old_content == new_content:
        return DiffResult(
            old_content=old_content, new_content=new_content, diffs=[]
        )

    prefix = _common_prefix_length(old_content, new_content)
    suffix = _common_suffix_length(old_content, new_content, prefix)

    old_middle = old_content[prefix : len(old_content) - suffix]
    new_middle = new_content[prefix : len(new_content) - suffix]

    operation: DiffOperation
    if not old_middle:
        operation = InsertOperation(position=prefix, text=new_middle)
    elif not new_middle:
        operation = DeleteOperation(
            position=prefix, length=len(old_middle)
        )
    else:
        operation = ReplaceOperation(
            position=prefix, length=len(old_middle), text=new_middle
        )

    logger.debug(
        "Generated %s diff (prefix=%d, suffix=%d)",
        operation.operation,
        prefix,
        suffix,
    )
    return DiffResult(
        old_content=old_content,
        new_content=new_content,
        diffs=[operation],
    )


def apply_diff(content: str, diffs: list[DiffOperation]) -> str:
    """Apply a diff list to *content*, one operation after another.

    Args:
        content: The content to patch.
        diffs: Operations to apply in list order.  Each operation's
            position refers to the result of the operations before it.

    Returns:
        The patched content.

    Raises:
        TypeError: If *content* is not a string or a list item is not a
            diff operation.
        PatchApplicationError: If an operation's position or length falls
            outside the content at that step.
    """
    require_text("content", content)

    result = content
    for index, op in enumerate(diffs):
        if isinstance(op, InsertOperation):
            if op.position > len(result):
                raise PatchApplicationError(index, op, len(result))
            result = result[: op.position] + op.text + result[op.position :]
        elif isinstance(op, (DeleteOperation, ReplaceOperation)):
            end = op.position + op.length
            if end > len(result):
                raise PatchApplicationError(index, op, len(result))
            text = op.text if isinstance(op, ReplaceOperation) else ""
            result = result[: op.position] + text + result[end:]
        else:
            raise TypeError(
                f"diffs[{index}] must be a diff operation, "
                f"got {type(op).__name__}"
            )
    return result


def validate_diff(
    old_content: str, new_content: str, diffs: list[DiffOperation]
) -> bool:
    """Check that *diffs* turns *old_content* into *new_content*.

    A diff list that no longer fits the content (out-of-range position or
    length) is reported as invalid rather than raised: ``False`` is the
    normal signal for a stale patch.

    Args:
        old_content: Content the diffs should be applied to.
        new_content: Expected result.
        diffs: The diff list to check.

    Returns:
        ``True`` iff ``apply_diff(old_content, diffs) == new_content``.
    """
    require_text("new_content", new_content)
    try:
        return apply_diff(old_content, diffs) == new_content
    except PatchApplicationError as exc:
        logger.debug("Diff does not apply: %s", exc)
        return False
