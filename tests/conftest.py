"""Shared pytest fixtures for doc-reconcile tests."""

import pytest

_ENV_VARS = (
    "DOC_RECONCILE_CONFIG",
    "DOC_RECONCILE_MAX_REVISIONS",
    "DOC_RECONCILE_CURRENT_LABEL",
    "DOC_RECONCILE_INCOMING_LABEL",
    "DOC_RECONCILE_DEBUG",
    "LOG_LEVEL",
    "LOG_FILE",
)


class FakeDraftStore:
    """Dict-backed draft store recording every write."""

    def __init__(self, drafts: dict[int, str] | None = None) -> None:
        self.drafts = dict(drafts or {})
        self.writes: list[tuple[int, str]] = []

    def read(self, draft_id: int) -> str:
        return self.drafts[draft_id]

    def write(self, draft_id: int, content: str) -> None:
        self.writes.append((draft_id, content))
        self.drafts[draft_id] = content


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and config files.

    Clears doc-reconcile env vars and points CWD and HOME at an empty
    temporary directory.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def draft_store():
    """Factory fixture building a FakeDraftStore."""

    def _create(drafts: dict[int, str] | None = None) -> FakeDraftStore:
        return FakeDraftStore(drafts)

    return _create


@pytest.fixture
def five_line_base():
    """Section base used by the non-overlapping merge scenarios."""
    return "Line 1\nLine 2\nLine 3\nLine 4\nLine 5"
