"""Comparison between the two most recent lint runs."""

from typing import Optional

from .models import FileChange, Snapshot
from .trend import percent_change


# Number of files shown in the file-level section
DEFAULT_FILE_LIMIT = 5


def compare_snapshots(previous: Snapshot, current: Snapshot) -> dict:
    """
    Per-category differences between two snapshots.

    Returns dict mapping 'total', 'errors', 'warnings', 'formatting' to
    (previous, current, diff) tuples, where a positive diff means fewer issues.
    """
    pairs = {
        'total': (previous.total_issues, current.total_issues),
        'errors': (previous.error_count, current.error_count),
        'warnings': (previous.warning_count, current.warning_count),
        'formatting': (previous.formatting_count, current.formatting_count),
    }
    return {key: (prev, curr, prev - curr) for key, (prev, curr) in pairs.items()}


def compare_files(
    previous_data: Optional[dict],
    current_data: Optional[dict],
    limit: int = DEFAULT_FILE_LIMIT,
) -> list[FileChange]:
    """
    Match files across two JSON snapshots and rank them by size of change.

    A file missing from one side counts as having zero issues there.
    """
    changes: dict[str, FileChange] = {}

    for entry in (previous_data or {}).get('worstFiles') or []:
        changes[entry['file']] = FileChange(
            file=entry['file'],
            previous_errors=entry.get('errors', 0),
            previous_warnings=entry.get('warnings', 0),
            current_errors=0,
            current_warnings=0,
        )

    for entry in (current_data or {}).get('worstFiles') or []:
        change = changes.get(entry['file'])
        if change is None:
            change = changes[entry['file']] = FileChange(
                file=entry['file'],
                previous_errors=0,
                previous_warnings=0,
                current_errors=0,
                current_warnings=0,
            )
        change.current_errors = entry.get('errors', 0)
        change.current_warnings = entry.get('warnings', 0)

    ranked = sorted(changes.values(), key=lambda c: abs(c.total_change), reverse=True)
    return ranked[:limit]


def format_change(diff: int, previous: int, current: int) -> str:
    """Describe one category change, e.g. '100 -> 60 (down 40, -40.0%)'."""
    percent = abs(percent_change(diff, previous))
    if diff > 0:
        return f"{previous} -> {current} (down {diff}, -{percent:.1f}%)"
    if diff < 0:
        return f"{previous} -> {current} (up {-diff}, +{percent:.1f}%)"
    return f"{previous} -> {current} (no change)"


def format_comparison_report(
    previous: Snapshot,
    current: Snapshot,
    file_changes: Optional[list[FileChange]] = None,
) -> str:
    """Format a version comparison as a human-readable report."""
    lines = []

    lines.append("Version Comparison")
    lines.append("=" * 50)
    lines.append(f"Previous scan: {previous.timestamp or 'unknown'}")
    lines.append(f"Current scan:  {current.timestamp or 'unknown'}")
    lines.append("")

    diffs = compare_snapshots(previous, current)
    lines.append("Changes Overview")
    lines.append("-" * 40)
    lines.append(f"Total issues: {format_change(diffs['total'][2], diffs['total'][0], diffs['total'][1])}")
    lines.append(f"Errors: {format_change(diffs['errors'][2], diffs['errors'][0], diffs['errors'][1])}")
    lines.append(f"Warnings: {format_change(diffs['warnings'][2], diffs['warnings'][0], diffs['warnings'][1])}")
    if previous.formatting_count or current.formatting_count:
        prev_fmt, curr_fmt, fmt_diff = diffs['formatting']
        lines.append(f"Formatting: {format_change(fmt_diff, prev_fmt, curr_fmt)}")

    if file_changes:
        lines.append("")
        lines.append("File-Level Changes")
        lines.append("-" * 40)
        for change in file_changes:
            symbol = 'v' if change.total_change > 0 else '^' if change.total_change < 0 else '='
            lines.append(f"{symbol} {change.file}")
            lines.append(f"  Previous: {change.previous_errors} errors, {change.previous_warnings} warnings")
            lines.append(f"  Current:  {change.current_errors} errors, {change.current_warnings} warnings")

    return '\n'.join(lines)
