"""Pydantic models for the document reconciliation core.

Defines the data contracts shared by the patch and merge engines:

- ``InsertOperation``, ``DeleteOperation``, ``ReplaceOperation``: the three
  positional edit kinds, combined in the ``DiffOperation`` union.
- ``DiffResult``: outcome of diff generation.
- ``RegionKind``, ``MergeRegion``: tagged spans of a three-way merge.
- ``ConflictRegion``: a span where both sides diverged incompatibly.
- ``MergeResult``: outcome of a three-way merge.

Diff lists are applied **sequentially**: every operation's ``position`` is
measured against the content produced by the operations before it in the
same list, never against the original text.  Callers building multi-step
lists by hand must account for the shifts of earlier operations.

All models are frozen (immutable).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, model_validator


class InsertOperation(BaseModel):
    """Insert ``text`` at ``position``."""

    operation: Literal["insert"] = "insert"
    position: int = Field(ge=0)
    text: str

    model_config = {"frozen": True}


class DeleteOperation(BaseModel):
    """Remove ``length`` characters starting at ``position``."""

    operation: Literal["delete"] = "delete"
    position: int = Field(ge=0)
    length: int = Field(ge=0)

    model_config = {"frozen": True}


class ReplaceOperation(BaseModel):
    """Remove ``length`` characters at ``position`` and insert ``text``."""

    operation: Literal["replace"] = "replace"
    position: int = Field(ge=0)
    length: int = Field(ge=0)
    text: str

    model_config = {"frozen": True}


DiffOperation = Annotated[
    Union[InsertOperation, DeleteOperation, ReplaceOperation],
    Field(discriminator="operation"),
]

_DIFF_LIST_ADAPTER: TypeAdapter[list[DiffOperation]] = TypeAdapter(
    list[DiffOperation]
)


class DiffResult(BaseModel):
    """Result of comparing two strings.

    Attributes:
        old_content: The original content.
        new_content: The modified content.
        diffs: Operations turning *old_content* into *new_content*.
            Empty iff both contents are identical.
    """

    old_content: str
    new_content: str
    diffs: list[DiffOperation] = []

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to apply."""
        return not self.diffs


class RegionKind(str, Enum):
    """Classification of a span of base lines during a three-way merge."""

    STABLE = "stable"
    CURRENT_ONLY = "current_only"
    INCOMING_ONLY = "incoming_only"
    CONVERGED = "converged"
    CONFLICT = "conflict"


class ConflictRegion(BaseModel):
    """A span where current and incoming both changed base differently.

    Attributes:
        base_start: First base line index of the span.
        base_end: Base line index just past the span.
        base: Base lines of the span.
        current: Current's replacement lines (overridden in the merge).
        incoming: Incoming's replacement lines (kept in the merge).
    """

    base_start: int
    base_end: int
    base: list[str]
    current: list[str]
    incoming: list[str]

    model_config = {"frozen": True}


class MergeRegion(BaseModel):
    """One classified span of the base line-index space.

    ``base``, ``current`` and ``incoming`` hold each side's lines for the
    span; which of them reaches the merged output depends on ``kind``.
    """

    kind: RegionKind
    base_start: int
    base_end: int
    base: list[str] = []
    current: list[str] = []
    incoming: list[str] = []

    model_config = {"frozen": True}

    @property
    def resolved(self) -> list[str]:
        """Lines this region contributes to the merged text."""
        if self.kind == RegionKind.STABLE:
            return self.base
        if self.kind == RegionKind.CURRENT_ONLY:
            return self.current
        # incoming_only, converged (incoming == current) and conflict
        return self.incoming

    def to_conflict(self) -> ConflictRegion:
        """Build the conflict report entry for this region."""
        return ConflictRegion(
            base_start=self.base_start,
            base_end=self.base_end,
            base=self.base,
            current=self.current,
            incoming=self.incoming,
        )


class MergeResult(BaseModel):
    """Outcome of a three-way merge.

    Attributes:
        merged: The merged text.  Conflicts are already resolved in
            favour of incoming.
        has_conflict: Whether any conflict region was found.
        conflicts: The conflicting regions; present and non-empty iff
            *has_conflict* is true.
    """

    merged: str
    has_conflict: bool = False
    conflicts: list[ConflictRegion] | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_conflicts(self) -> MergeResult:
        if self.has_conflict and not self.conflicts:
            raise ValueError(
                "conflicts must be non-empty when has_conflict is true"
            )
        if not self.has_conflict and self.conflicts is not None:
            raise ValueError(
                "conflicts must be omitted when has_conflict is false"
            )
        return self


def parse_diffs(data: str | bytes | list[Any]) -> list[DiffOperation]:
    """Validate a transmitted diff list into operation models.

    Args:
        data: A JSON document (``str``/``bytes``) or an already decoded
            list of operation dicts.

    Returns:
        The operations, in list order.

    Raises:
        pydantic.ValidationError: If any entry is malformed.
    """
    if isinstance(data, (str, bytes)):
        return _DIFF_LIST_ADAPTER.validate_json(data)
    return _DIFF_LIST_ADAPTER.validate_python(data)


def dump_diffs(diffs: list[DiffOperation]) -> list[dict]:
    """Convert operations to JSON-ready dicts (the wire format)."""
    return _DIFF_LIST_ADAPTER.dump_python(diffs, mode="json")
