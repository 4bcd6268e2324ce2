"""Progress log and lint output parsers."""

from pathlib import Path
from typing import Iterable, Iterator, Optional
from datetime import datetime, timezone
import json
import re

from .errors import LintOutputError
from .models import FileResult, IssueMessage, Snapshot


DATE_LINE_RE = re.compile(r'^===== (.+) =====$')
PROBLEMS_LINE_RE = re.compile(
    r'^(\d+) problems? \((\d+) errors?, (\d+) warnings?(?:, (\d+) formatting)?\)$'
)


def iter_snapshots(lines: Iterable[str]) -> Iterator[Snapshot]:
    """
    Yield a Snapshot for every problems line, in log order.

    Each problems line takes its timestamp from the closest preceding
    date header (empty string if there is none). Anything else in the log
    (rule listings, suggestions, blank lines, hand edits) is skipped.
    """
    current_date = ''
    for line in lines:
        line = line.rstrip('\r\n')

        date_match = DATE_LINE_RE.match(line)
        if date_match:
            current_date = date_match.group(1)
            continue

        problems_match = PROBLEMS_LINE_RE.match(line)
        if problems_match:
            total, errors, warnings, formatting = problems_match.groups()
            yield Snapshot(
                timestamp=current_date,
                total_issues=int(total),
                error_count=int(errors),
                warning_count=int(warnings),
                formatting_count=int(formatting) if formatting else 0,
            )


def parse_log(text: str) -> list[Snapshot]:
    """Parse the full text of a progress log."""
    return list(iter_snapshots(text.splitlines()))


def read_snapshots(path: Path) -> list[Snapshot]:
    """
    Read and parse a progress log file. Missing file gives an empty list.

    Undecodable bytes are replaced, so a hand-edited log never fails to read.
    """
    if not path.exists():
        return []
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return list(iter_snapshots(f))


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse a log header string into an aware datetime.

    Accepts ISO 8601 with or without a trailing Z, and bare dates (taken as
    UTC midnight). Returns None for anything else.
    """
    value = value.strip()
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_message(raw: dict, file_path: str) -> IssueMessage:
    severity = raw.get('severity', 0)
    line = raw.get('line', 0)
    return IssueMessage(
        rule_id=raw.get('ruleId') or None,
        severity=severity if isinstance(severity, int) else 0,
        line=line if isinstance(line, int) else 0,
        file=file_path,
        message=str(raw.get('message', '')),
    )


def parse_lint_output(text: str) -> list[FileResult]:
    """
    Decode the lint tool's JSON report into FileResult objects.

    Expects a JSON array with one object per file, each holding
    ``filePath`` and ``messages``. Raises LintOutputError otherwise.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LintOutputError(f"Lint output is not valid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(data, list):
        raise LintOutputError("Lint output is not a JSON array")

    results = []
    for entry in data:
        if not isinstance(entry, dict) or 'filePath' not in entry:
            raise LintOutputError("Lint output entry is missing 'filePath'")

        file_path = str(entry['filePath'])
        messages = entry.get('messages') or []
        if not isinstance(messages, list):
            messages = []

        results.append(FileResult(
            file_path=file_path,
            messages=[_parse_message(m, file_path) for m in messages if isinstance(m, dict)],
        ))

    return results
