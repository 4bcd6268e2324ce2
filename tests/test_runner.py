"""Tests for runner module."""

import io
import logging
import subprocess

import pytest
from rich.console import Console
from rich.status import Status

from lint_track import runner
from lint_track.config import Config
from lint_track.errors import ExternalToolMissing, ExternalToolTimeout
from lint_track.runner import (
    collect_lint_results,
    count_formatting_issues,
    lint_argv,
    progress_status,
    run_rule_fix,
    run_tool,
)


class FakeRun:
    """Stand-in for subprocess.run that records calls."""

    def __init__(self, stdout='', stderr='', returncode=1, raises=None):
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.raises = raises
        self.calls = []

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def config():
    return Config(patterns=['src/**/*.ts'], timeout_ms=2500)


class TestRunTool:
    """Tests for run_tool."""

    def test_passes_timeout_in_seconds(self, monkeypatch):
        fake = FakeRun(stdout='ok')
        monkeypatch.setattr(runner.subprocess, 'run', fake)

        result = run_tool(['eslint'], 2500, show_progress=False)

        assert result.stdout == 'ok'
        assert fake.calls[0][1]['timeout'] == 2.5
        assert fake.calls[0][1]['check'] is False

    def test_nonzero_exit_is_not_an_error(self, monkeypatch):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(returncode=1))
        assert run_tool(['eslint'], 1000, show_progress=False).returncode == 1

    def test_missing_tool(self, monkeypatch):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(raises=FileNotFoundError()))

        with pytest.raises(ExternalToolMissing) as exc_info:
            run_tool(['npx', 'eslint'], 1000, show_progress=False)
        assert str(exc_info.value) == 'Required tool not found: npx'
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_timeout(self, monkeypatch):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(raises=subprocess.TimeoutExpired('npx', 1)))

        with pytest.raises(ExternalToolTimeout) as exc_info:
            run_tool(['npx', 'eslint', 'src'], 1500, show_progress=False)
        assert str(exc_info.value) == 'npx eslint timed out after 1.5 seconds'
        assert isinstance(exc_info.value.__cause__, subprocess.TimeoutExpired)


class TestCollectLintResults:
    """Tests for collect_lint_results."""

    def test_argv(self, monkeypatch, config, eslint_output):
        fake = FakeRun(stdout=eslint_output)
        monkeypatch.setattr(runner.subprocess, 'run', fake)

        collect_lint_results(config, show_progress=False)

        assert fake.calls[0][0] == [
            'npx', 'eslint', 'src/**/*.ts', '--format', 'json', '--max-warnings=9999',
        ]

    def test_parses_output(self, monkeypatch, config, eslint_output):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(stdout=eslint_output))

        results = collect_lint_results(config, show_progress=False)

        assert len(results) == 4

    def test_bad_output_degrades_to_empty(self, monkeypatch, config, caplog):
        """Unparseable output is a warning and a clean run."""
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(stdout='Oops!', stderr='config error'))

        with caplog.at_level(logging.WARNING, logger='lint_track'):
            results = collect_lint_results(config, show_progress=False)

        assert results == []
        assert 'Could not parse lint output' in caplog.text

    def test_missing_tool_propagates(self, monkeypatch, config):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(raises=FileNotFoundError()))

        with pytest.raises(ExternalToolMissing):
            collect_lint_results(config, show_progress=False)


class TestCountFormattingIssues:
    """Tests for count_formatting_issues."""

    def test_counts_listed_files(self, monkeypatch, config):
        stdout = "Checking formatting...\nsrc/a.ts\nsrc/b.ts\n"
        fake = FakeRun(stdout=stdout)
        monkeypatch.setattr(runner.subprocess, 'run', fake)

        assert count_formatting_issues(config, show_progress=False) == 2
        assert fake.calls[0][0] == ['npx', 'prettier', '--check', 'src/**/*.ts']

    def test_clean(self, monkeypatch, config):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(stdout="Checking formatting...\n", returncode=0))
        assert count_formatting_issues(config, show_progress=False) == 0

    def test_no_output(self, monkeypatch, config):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(stdout=''))
        assert count_formatting_issues(config, show_progress=False) == 0

    def test_missing_formatter_is_zero(self, monkeypatch, config, caplog):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(raises=FileNotFoundError()))

        with caplog.at_level(logging.WARNING, logger='lint_track'):
            assert count_formatting_issues(config, show_progress=False) == 0
        assert 'Could not run formatting check' in caplog.text

    def test_timeout_propagates(self, monkeypatch, config):
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(raises=subprocess.TimeoutExpired('npx', 1)))

        with pytest.raises(ExternalToolTimeout):
            count_formatting_issues(config, show_progress=False)


class TestRuleFix:
    """Tests for lint_argv and run_rule_fix."""

    def test_lint_argv_extra(self, config):
        assert lint_argv(config, ['--fix'])[-1] == '--fix'

    def test_fix_argv(self, monkeypatch, config):
        fake = FakeRun(returncode=0)
        monkeypatch.setattr(runner.subprocess, 'run', fake)

        run_rule_fix(config, 'semi', show_progress=False)

        assert fake.calls[0][0] == ['npx', 'eslint', 'src/**/*.ts', '--fix', '--rule', '{"semi": "error"}']


class TestProgressStatus:
    """Tests for progress_status."""

    def test_disabled_without_terminal(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        with progress_status('Working', console=console) as status:
            assert status is None
        assert console.file.getvalue() == ''

    def test_disabled_explicitly(self):
        console = Console(file=io.StringIO(), force_terminal=True)
        with progress_status('Working', enabled=False, console=console) as status:
            assert status is None

    def test_shows_status_on_terminal(self):
        console = Console(file=io.StringIO(), force_terminal=True)
        with progress_status('Working', console=console) as status:
            assert isinstance(status, Status)

    def test_stops_on_error(self):
        """The spinner is stopped when the wrapped call raises."""
        events = []

        class RecordingStatus:
            def __enter__(self):
                events.append('start')
                return self

            def __exit__(self, exc_type, exc, tb):
                events.append('stop')
                return False

        class TerminalConsole:
            is_terminal = True

            def status(self, label):
                events.append(label)
                return RecordingStatus()

        with pytest.raises(RuntimeError):
            with progress_status('Working', console=TerminalConsole()):
                raise RuntimeError('boom')

        assert events == ['[cyan]Working...', 'start', 'stop']

    def test_run_tool_without_terminal(self, monkeypatch):
        """run_tool runs fine when progress is on but stderr is not a terminal."""
        monkeypatch.setattr(runner.subprocess, 'run', FakeRun(stdout='ok'))
        assert run_tool(['eslint'], 1000, show_progress=True).stdout == 'ok'
