"""Persistent state: the append-only progress log and the JSON snapshot pair.

Only one lint-track process is expected to touch a report directory at a
time. There is no file locking, so two concurrent ``track`` runs can
interleave log entries or clobber the current/previous pair.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .models import Snapshot
from .parser import read_snapshots


logger = logging.getLogger(__name__)

LOG_FILENAME = 'lint.log'
CURRENT_FILENAME = 'lint-results.json'
PREVIOUS_FILENAME = 'previous.json'
HTML_FILENAME = 'lint-report.html'


def _load_json(path: Path) -> Optional[dict]:
    """Load a JSON object from path; None if missing or unreadable."""
    if not path.exists():
        return None
    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


class SnapshotStore:
    """Files kept in a report directory."""

    def __init__(self, report_dir: Path):
        self.report_dir = Path(report_dir)

    @property
    def log_path(self) -> Path:
        return self.report_dir / LOG_FILENAME

    @property
    def current_path(self) -> Path:
        return self.report_dir / CURRENT_FILENAME

    @property
    def previous_path(self) -> Path:
        return self.report_dir / PREVIOUS_FILENAME

    @property
    def html_path(self) -> Path:
        return self.report_dir / HTML_FILENAME

    def has_log(self) -> bool:
        return self.log_path.exists() and self.log_path.stat().st_size > 0

    def append_entry(self, text: str) -> None:
        """Append one formatted entry to the log. Existing lines are never rewritten."""
        self.report_dir.mkdir(parents=True, exist_ok=True)
        with self.log_path.open('a', encoding='utf-8') as f:
            f.write(text)
        logger.debug("Appended %d bytes to %s", len(text), self.log_path)

    def read_snapshots(self) -> list[Snapshot]:
        """Parse the log from disk. Nothing is cached between calls."""
        return read_snapshots(self.log_path)

    def write_current(self, data: dict) -> None:
        """
        Store ``data`` as the current snapshot, keeping the old one as previous.

        The new content is written to a temporary file first, so a failure
        while writing leaves both existing files untouched.
        """
        self.report_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.current_path.with_suffix('.json.tmp')
        with tmp_path.open('w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

        if self.current_path.exists():
            os.replace(self.current_path, self.previous_path)
        os.replace(tmp_path, self.current_path)
        logger.debug("Wrote %s", self.current_path)

    def load_current(self) -> Optional[dict]:
        return _load_json(self.current_path)

    def load_previous(self) -> Optional[dict]:
        return _load_json(self.previous_path)
