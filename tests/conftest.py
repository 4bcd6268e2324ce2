"""Pytest fixtures for lint-track tests."""

import pytest
from pathlib import Path
import tempfile
import shutil

from lint_track.models import FileResult, IssueMessage, Snapshot


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / 'fixtures'


@pytest.fixture
def sample_log_path(fixtures_dir) -> Path:
    """Two-entry log: 100 issues on 2024-01-01, 60 on 2024-01-08."""
    return fixtures_dir / 'lint.log'


@pytest.fixture
def mixed_log_path(fixtures_dir) -> Path:
    """Log with hand edits, a missing header and unparseable dates."""
    return fixtures_dir / 'mixed.log'


@pytest.fixture
def eslint_output_path(fixtures_dir) -> Path:
    """ESLint JSON report covering four files."""
    return fixtures_dir / 'eslint-output.json'


@pytest.fixture
def eslint_output(eslint_output_path) -> str:
    return eslint_output_path.read_text()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir)


@pytest.fixture
def temp_report_dir(temp_dir, sample_log_path):
    """Report directory holding a copy of the sample log."""
    report_dir = temp_dir / 'reports'
    report_dir.mkdir()
    shutil.copy(sample_log_path, report_dir / 'lint.log')
    return report_dir


@pytest.fixture
def make_snapshot():
    """Factory for snapshots whose total matches their parts."""
    def _make(timestamp, errors, warnings, formatting=0):
        return Snapshot(
            timestamp=timestamp,
            total_issues=errors + warnings + formatting,
            error_count=errors,
            warning_count=warnings,
            formatting_count=formatting,
        )
    return _make


@pytest.fixture
def make_result():
    """Factory for a FileResult from (rule_id, severity) pairs."""
    def _make(path, *issues):
        return FileResult(
            file_path=path,
            messages=[
                IssueMessage(rule_id=rule, severity=severity, line=i + 1, file=path, message='msg')
                for i, (rule, severity) in enumerate(issues)
            ],
        )
    return _make
