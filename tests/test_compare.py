"""Tests for compare module."""

from lint_track.compare import (
    compare_files,
    compare_snapshots,
    format_change,
    format_comparison_report,
)
from lint_track.models import FileChange


class TestCompareSnapshots:
    """Tests for compare_snapshots function."""

    def test_differences(self, make_snapshot):
        """Positive diff means fewer issues."""
        diffs = compare_snapshots(make_snapshot('a', 80, 20), make_snapshot('b', 40, 25, 3))

        assert diffs['total'] == (100, 68, 32)
        assert diffs['errors'] == (80, 40, 40)
        assert diffs['warnings'] == (20, 25, -5)
        assert diffs['formatting'] == (0, 3, -3)


class TestCompareFiles:
    """Tests for compare_files function."""

    PREVIOUS = {'worstFiles': [
        {'file': 'a.ts', 'total': 10, 'errors': 8, 'warnings': 2},
        {'file': 'b.ts', 'total': 3, 'errors': 3, 'warnings': 0},
        {'file': 'gone.ts', 'total': 6, 'errors': 0, 'warnings': 6},
    ]}
    CURRENT = {'worstFiles': [
        {'file': 'a.ts', 'total': 9, 'errors': 7, 'warnings': 2},
        {'file': 'b.ts', 'total': 5, 'errors': 3, 'warnings': 2},
        {'file': 'new.ts', 'total': 4, 'errors': 4, 'warnings': 0},
    ]}

    def test_ranked_by_size_of_change(self):
        changes = compare_files(self.PREVIOUS, self.CURRENT)

        assert [(c.file, c.total_change) for c in changes] == [
            ('gone.ts', 6),
            ('new.ts', -4),
            ('b.ts', -2),
            ('a.ts', 1),
        ]

    def test_missing_side_counts_as_zero(self):
        changes = {c.file: c for c in compare_files(self.PREVIOUS, self.CURRENT)}

        assert changes['gone.ts'].current_errors == 0
        assert changes['gone.ts'].current_warnings == 0
        assert changes['new.ts'].previous_errors == 0

    def test_limit(self):
        assert len(compare_files(self.PREVIOUS, self.CURRENT, limit=2)) == 2

    def test_no_previous(self):
        changes = compare_files(None, self.CURRENT)
        assert all(c.total_change < 0 for c in changes)

    def test_both_missing(self):
        assert compare_files(None, None) == []


class TestFormatChange:
    """Tests for format_change function."""

    def test_down(self):
        assert format_change(40, 100, 60) == '100 -> 60 (down 40, -40.0%)'

    def test_up(self):
        assert format_change(-5, 20, 25) == '20 -> 25 (up 5, +25.0%)'

    def test_no_change(self):
        assert format_change(0, 7, 7) == '7 -> 7 (no change)'

    def test_from_zero(self):
        """Percentages from zero use a base of one."""
        assert format_change(-3, 0, 3) == '0 -> 3 (up 3, +300.0%)'


class TestFormatComparisonReport:
    """Tests for format_comparison_report function."""

    def test_overview(self, make_snapshot):
        report = format_comparison_report(make_snapshot('2024-01-01', 80, 20), make_snapshot('2024-01-08', 40, 20))

        assert "Version Comparison" in report
        assert "Previous scan: 2024-01-01" in report
        assert "Total issues: 100 -> 60 (down 40, -40.0%)" in report
        assert "Warnings: 20 -> 20 (no change)" in report
        assert "Formatting" not in report

    def test_formatting_shown_when_present(self, make_snapshot):
        report = format_comparison_report(make_snapshot('a', 1, 0, 2), make_snapshot('b', 1, 0, 0))
        assert "Formatting: 2 -> 0 (down 2, -100.0%)" in report

    def test_missing_timestamp(self, make_snapshot):
        report = format_comparison_report(make_snapshot('', 1, 0), make_snapshot('b', 1, 0))
        assert "Previous scan: unknown" in report

    def test_file_changes(self, make_snapshot):
        changes = [
            FileChange('fixed.ts', 3, 0, 1, 0),
            FileChange('worse.ts', 0, 1, 2, 1),
            FileChange('same.ts', 1, 1, 1, 1),
        ]
        report = format_comparison_report(make_snapshot('a', 5, 0), make_snapshot('b', 5, 0), changes)

        assert "File-Level Changes" in report
        assert "v fixed.ts" in report
        assert "^ worse.ts" in report
        assert "= same.ts" in report
        assert "  Previous: 3 errors, 0 warnings" in report
