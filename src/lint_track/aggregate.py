"""Roll up one lint run into per-rule, per-file and per-directory counts."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional
import os
import posixpath

from .models import (
    UNKNOWN_RULE,
    DirectoryStat,
    FileResult,
    FileStat,
    RuleStat,
    RunStats,
    Snapshot,
)


DEFAULT_TOP_RULES = 10
FORMATTING_RULE_PREFIX = 'prettier'


def relative_file_path(file_path: str, root: Optional[Path] = None) -> str:
    """
    Normalise a reported file path for display and grouping.

    Absolute paths inside ``root`` become relative to it. Separators are
    always forward slashes.
    """
    path = file_path
    if root is not None and os.path.isabs(path):
        try:
            path = os.path.relpath(path, root)
        except ValueError:
            # different drive on Windows
            pass
        if path.startswith('..'):
            path = file_path
    return path.replace('\\', '/')


def directory_of(file_path: str) -> str:
    """Parent directory of a normalised path; empty string for the root."""
    return posixpath.dirname(file_path)


def _sort_by_total(items: list, key: str) -> list:
    # sorted() is stable, so ties keep first-seen order
    return sorted(items, key=lambda item: getattr(item, key), reverse=True)


def aggregate_results(
    results: Iterable[FileResult],
    formatting_count: Optional[int] = None,
    root: Optional[Path] = None,
    timestamp: Optional[str] = None,
) -> RunStats:
    """
    Aggregate a lint run.

    Args:
        results: One FileResult per linted file
        formatting_count: Files needing reformat, or None if formatting
            was not checked
        root: Directory that file paths are reported relative to
        timestamp: Snapshot timestamp (defaults to now, UTC, ISO 8601)

    Returns:
        RunStats with sorted rule, file and directory breakdowns
    """
    rules: dict[str, RuleStat] = {}
    files: dict[str, FileStat] = {}
    directories: dict[str, DirectoryStat] = {}
    total_files = 0
    errors = 0
    warnings = 0

    for result in results:
        total_files += 1
        if not result.messages:
            continue

        file_errors = 0
        file_warnings = 0

        for msg in result.messages:
            if msg.is_error:
                file_errors += 1
            elif msg.is_warning:
                file_warnings += 1
            else:
                continue

            rule_id = msg.rule_id or UNKNOWN_RULE
            rule = rules.get(rule_id)
            if rule is None:
                rule = rules[rule_id] = RuleStat(rule_id=rule_id)
            rule.count += 1
            if msg.is_error:
                rule.error_count += 1
            else:
                rule.warning_count += 1

        if file_errors + file_warnings == 0:
            continue

        errors += file_errors
        warnings += file_warnings

        path = relative_file_path(result.file_path, root)
        file_stat = files.get(path)
        if file_stat is None:
            file_stat = files[path] = FileStat(file_path=path)
        file_stat.error_count += file_errors
        file_stat.warning_count += file_warnings
        file_stat.total_count += file_errors + file_warnings

        directory = directory_of(path)
        dir_stat = directories.get(directory)
        if dir_stat is None:
            dir_stat = directories[directory] = DirectoryStat(directory=directory)
        dir_stat.error_count += file_errors
        dir_stat.warning_count += file_warnings
        dir_stat.total_count += file_errors + file_warnings

    formatting = formatting_count or 0
    if timestamp is None:
        timestamp = datetime.now(timezone.utc).isoformat(timespec='seconds')

    return RunStats(
        snapshot=Snapshot(
            timestamp=timestamp,
            total_issues=errors + warnings + formatting,
            error_count=errors,
            warning_count=warnings,
            formatting_count=formatting,
        ),
        total_files=total_files,
        files_with_issues=len(files),
        rule_stats=_sort_by_total(list(rules.values()), 'count'),
        file_stats=_sort_by_total(list(files.values()), 'total_count'),
        directory_stats=_sort_by_total(list(directories.values()), 'total_count'),
        formatting_checked=formatting_count is not None,
    )


def is_formatting_rule(rule_id: str) -> bool:
    return rule_id == FORMATTING_RULE_PREFIX or rule_id.startswith(FORMATTING_RULE_PREFIX + '/')


def suggest_fix(rule_stats: list[RuleStat]) -> Optional[RuleStat]:
    """Most frequent rule that has a real rule id, or None."""
    for rule in rule_stats:
        if rule.rule_id != UNKNOWN_RULE:
            return rule
    return None


def fix_command(rule_id: str, globs: str = '.') -> str:
    """Advisory shell command for fixing one rule."""
    if is_formatting_rule(rule_id):
        return f"npx prettier --write {globs}"
    return f'npx eslint --fix {globs} --rule "{rule_id}: error"'


def format_problems_line(snapshot: Snapshot, include_formatting: bool) -> str:
    """The structured line the log parser reads back."""
    line = (
        f"{snapshot.total_issues} problems "
        f"({snapshot.error_count} errors, {snapshot.warning_count} warnings"
    )
    if include_formatting:
        line += f", {snapshot.formatting_count} formatting"
    return line + ")"


def format_log_entry(
    stats: RunStats,
    details: bool = True,
    top_rules: int = DEFAULT_TOP_RULES,
    fix_globs: str = '.',
) -> str:
    """
    Compose the text appended to the progress log for one run.

    The header and problems lines carry the data; the optional details
    block is for humans and is ignored when the log is parsed.
    """
    lines = [
        f"===== {stats.snapshot.timestamp} =====",
        format_problems_line(stats.snapshot, stats.formatting_checked),
    ]

    if details and stats.rule_stats and top_rules > 0:
        lines.append("")
        lines.append("Top issues by rule:")
        for rule in stats.rule_stats[:top_rules]:
            lines.append(
                f"- {rule.rule_id}: {rule.count} occurrences "
                f"({rule.error_count} errors, {rule.warning_count} warnings)"
            )

        suggested = suggest_fix(stats.rule_stats)
        if suggested is not None:
            lines.append("")
            lines.append(f'Suggestion: Focus on fixing "{suggested.rule_id}" issues ({suggested.count} occurrences)')
            lines.append(f"Try running: {fix_command(suggested.rule_id, fix_globs)}")

    return '\n'.join(lines) + '\n\n'


def stats_to_json(stats: RunStats) -> dict:
    """Serialise a run to the JSON snapshot layout read by chart/compare/html."""
    return {
        'timestamp': stats.snapshot.timestamp,
        'stats': {
            'totalFiles': stats.total_files,
            'filesWithIssues': stats.files_with_issues,
            'errors': stats.snapshot.error_count,
            'warnings': stats.snapshot.warning_count,
            'formatting': stats.snapshot.formatting_count,
        },
        'worstFiles': [
            {
                'file': f.file_path,
                'total': f.total_count,
                'errors': f.error_count,
                'warnings': f.warning_count,
            }
            for f in stats.file_stats
        ],
        'issuesByDirectory': [
            {
                'directory': d.directory,
                'errors': d.error_count,
                'warnings': d.warning_count,
                'total': d.total_count,
            }
            for d in stats.directory_stats
        ],
        'ruleStats': [
            {
                'rule': r.rule_id,
                'count': r.count,
                'errors': r.error_count,
                'warnings': r.warning_count,
            }
            for r in stats.rule_stats
        ],
    }
