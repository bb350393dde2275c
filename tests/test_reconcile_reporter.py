"""Tests for reconcile/reporter.py: merge report formatting."""

from doc_reconcile.reconcile.merger import merge_section_content
from doc_reconcile.reconcile.models import ConflictRegion, MergeResult
from doc_reconcile.reconcile.reporter import (
    format_conflict_diff,
    format_merge_report,
    format_unified_diff,
    merge_result_to_json,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _conflicting_result() -> MergeResult:
    return merge_section_content(
        "Line 1\nLine 2\nLine 3",
        "Line 1 modified by user A\nLine 2\nLine 3",
        "Line 1 modified by user B\nLine 2\nLine 3",
    )


# ---------------------------------------------------------------------------
# format_unified_diff
# ---------------------------------------------------------------------------


class TestFormatUnifiedDiff:
    """Tests for format_unified_diff()."""

    def test_basic_diff(self):
        diff = format_unified_diff("line1\nline2\n", "line1\nchanged\n")

        assert "---" in diff
        assert "+++" in diff
        assert "-line2" in diff
        assert "+changed" in diff

    def test_no_changes(self):
        assert format_unified_diff("same\n", "same\n") == ""

    def test_custom_labels(self):
        diff = format_unified_diff(
            "old\n", "new\n", label_old="draft.md", label_new="agent.md"
        )

        assert "draft.md" in diff
        assert "agent.md" in diff


# ---------------------------------------------------------------------------
# format_merge_report
# ---------------------------------------------------------------------------


class TestFormatMergeReport:
    """Tests for format_merge_report()."""

    def test_clean_merge(self):
        report = format_merge_report(MergeResult(merged="x"))

        assert report.startswith("Merge report")
        assert "Clean merge" in report

    def test_section_name_in_header(self):
        report = format_merge_report(MergeResult(merged="x"), section="Intro")

        assert "Merge report for 'Intro'" in report

    def test_conflict_shows_both_sides(self):
        report = format_merge_report(_conflicting_result())

        assert "1 conflict resolved in favour of the incoming edit." in report
        assert "Conflict 1 (base line 1):" in report
        assert "Current (overridden):" in report
        assert "    Line 1 modified by user A" in report
        assert "Incoming (kept):" in report
        assert "    Line 1 modified by user B" in report

    def test_plural_and_line_ranges(self):
        result = MergeResult(
            merged="x",
            has_conflict=True,
            conflicts=[
                ConflictRegion(
                    base_start=0, base_end=3, base=["a", "b", "c"],
                    current=["x"], incoming=["y"],
                ),
                ConflictRegion(
                    base_start=5, base_end=5, base=[],
                    current=["p"], incoming=["q"],
                ),
            ],
        )

        report = format_merge_report(result)

        assert "2 conflicts" in report
        assert "base lines 1-3" in report
        assert "insertion before base line 6" in report

    def test_empty_side_marked(self):
        result = MergeResult(
            merged="",
            has_conflict=True,
            conflicts=[
                ConflictRegion(
                    base_start=0, base_end=1, base=["a"],
                    current=["b"], incoming=[""],
                )
            ],
        )

        assert "(empty)" in format_merge_report(result)

    def test_long_sides_truncated(self):
        long_side = [f"line {i}" for i in range(25)]
        result = MergeResult(
            merged="x",
            has_conflict=True,
            conflicts=[
                ConflictRegion(
                    base_start=0, base_end=1, base=["a"],
                    current=long_side, incoming=["y"],
                )
            ],
        )

        report = format_merge_report(result)

        assert "line 19" in report
        assert "line 20" not in report
        assert "... (5 more lines)" in report


# ---------------------------------------------------------------------------
# format_conflict_diff
# ---------------------------------------------------------------------------


class TestFormatConflictDiff:
    """Tests for format_conflict_diff()."""

    def test_diff_from_current_to_incoming(self):
        conflict = _conflicting_result().conflicts[0]

        diff = format_conflict_diff(conflict)

        assert "--- current" in diff
        assert "+++ incoming" in diff
        assert "-Line 1 modified by user A" in diff
        assert "+Line 1 modified by user B" in diff

    def test_empty_side_against_blank_line(self):
        """Deleting a span differs from replacing it with one blank line."""
        conflict = ConflictRegion(
            base_start=1, base_end=2, base=["old"], current=[], incoming=[""]
        )

        diff = format_conflict_diff(conflict)

        assert diff != "(no textual differences)"
        assert "@@ -0,0 +1 @@" in diff
        assert diff.splitlines()[-1] == "+"

    def test_identical_sides(self):
        conflict = ConflictRegion(
            base_start=0, base_end=1, base=["a"], current=["b"], incoming=["b"]
        )

        assert format_conflict_diff(conflict) == "(no textual differences)"


# ---------------------------------------------------------------------------
# merge_result_to_json
# ---------------------------------------------------------------------------


class TestMergeResultToJson:
    """Tests for merge_result_to_json()."""

    def test_clean_result(self):
        data = merge_result_to_json(MergeResult(merged="text"))

        assert data == {
            "merged": "text",
            "has_conflict": False,
            "conflict_count": 0,
            "conflicts": [],
        }

    def test_conflicting_result(self):
        data = merge_result_to_json(_conflicting_result())

        assert data["has_conflict"] is True
        assert data["conflict_count"] == 1
        assert data["conflicts"][0] == {
            "base_start": 0,
            "base_end": 1,
            "base": ["Line 1"],
            "current": ["Line 1 modified by user A"],
            "incoming": ["Line 1 modified by user B"],
        }
