"""In-memory revision history for drafts.

Keeps a bounded, per-draft list of content snapshots with an undo/redo
cursor, the way an editing service tracks manual edits and merged agent
edits between saves.

Key design choices:

* **Linear history** -- adding a revision after an undo discards the
  redo tail, like a text editor.
* **Bounded** -- once a draft holds ``max_revisions`` snapshots the
  oldest are dropped.
* **Process-local** -- nothing is persisted; a restart starts empty.
  One lock guards every draft so the manager can be shared between
  request threads.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..config import Settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Revision(BaseModel):
    """A content snapshot.

    Attributes:
        content: Full draft content at this revision.
        user_id: Who produced it, when known.
        description: Short reason (e.g. ``"Manual edit"``).
        timestamp: When the revision was recorded (UTC).
    """

    content: str
    user_id: int | None = None
    description: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}


class RevisionManager:
    """Track revisions per draft with undo/redo.

    Args:
        max_revisions: Maximum snapshots kept per draft.
    """

    def __init__(self, max_revisions: int = 50) -> None:
        if max_revisions < 1:
            raise ValueError(
                f"max_revisions must be at least 1, got {max_revisions}"
            )
        self.max_revisions = max_revisions
        self._history: dict[int, list[Revision]] = {}
        self._cursor: dict[int, int] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> RevisionManager:
        """Build a manager bounded by ``settings.max_revisions``."""
        return cls(max_revisions=settings.max_revisions)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def add_revision(
        self,
        draft_id: int,
        content: str,
        user_id: int | None = None,
        description: str = "",
    ) -> Revision:
        """Record *content* as the newest revision of *draft_id*.

        Any revisions after the current cursor (undone edits) are
        discarded first.
        """
        revision = Revision(
            content=content, user_id=user_id, description=description
        )
        with self._lock:
            history = self._history.setdefault(draft_id, [])
            cursor = self._cursor.get(draft_id, -1)
            del history[cursor + 1 :]
            history.append(revision)
            overflow = len(history) - self.max_revisions
            if overflow > 0:
                del history[:overflow]
            self._cursor[draft_id] = len(history) - 1
        return revision

    def clear(self, draft_id: int) -> None:
        """Forget all revisions of *draft_id*.  No-op if none exist."""
        with self._lock:
            self._history.pop(draft_id, None)
            self._cursor.pop(draft_id, None)

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def can_undo(self, draft_id: int) -> bool:
        with self._lock:
            return self._cursor.get(draft_id, -1) > 0

    def can_redo(self, draft_id: int) -> bool:
        with self._lock:
            history = self._history.get(draft_id, [])
            return self._cursor.get(draft_id, -1) < len(history) - 1

    def undo(self, draft_id: int) -> str | None:
        """Step back one revision.

        Returns:
            Content of the revision now current, or ``None`` if there is
            nothing to undo.
        """
        with self._lock:
            cursor = self._cursor.get(draft_id, -1)
            if cursor <= 0:
                return None
            self._cursor[draft_id] = cursor - 1
            return self._history[draft_id][cursor - 1].content

    def redo(self, draft_id: int) -> str | None:
        """Step forward one revision.

        Returns:
            Content of the revision now current, or ``None`` if there is
            nothing to redo.
        """
        with self._lock:
            history = self._history.get(draft_id, [])
            cursor = self._cursor.get(draft_id, -1)
            if cursor >= len(history) - 1:
                return None
            self._cursor[draft_id] = cursor + 1
            return history[cursor + 1].content

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_revision_count(self, draft_id: int) -> int:
        with self._lock:
            return len(self._history.get(draft_id, []))

    def get_current_index(self, draft_id: int) -> int:
        """Index of the current revision, ``-1`` when there is none."""
        with self._lock:
            return self._cursor.get(draft_id, -1)

    def get_revision_at(self, draft_id: int, index: int) -> Revision | None:
        """Return the revision at *index*, or ``None`` if out of range."""
        with self._lock:
            history = self._history.get(draft_id, [])
            if 0 <= index < len(history):
                return history[index]
            return None

    def get_revision_info(self, draft_id: int) -> list[dict]:
        """Revision metadata (no content), oldest first.

        Each entry has ``index``, ``user_id``, ``description``,
        ``timestamp`` (ISO 8601) and ``is_current``.
        """
        with self._lock:
            history = self._history.get(draft_id, [])
            cursor = self._cursor.get(draft_id, -1)
            return [
                {
                    "index": i,
                    "user_id": r.user_id,
                    "description": r.description,
                    "timestamp": r.timestamp.isoformat(),
                    "is_current": i == cursor,
                }
                for i, r in enumerate(history)
            ]
