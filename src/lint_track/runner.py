"""Running the external lint and format tools."""

import logging
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from rich.console import Console
from rich.status import Status

from .config import Config
from .errors import ExternalToolMissing, ExternalToolTimeout, LintOutputError
from .models import FileResult
from .parser import parse_lint_output


logger = logging.getLogger(__name__)

# prettier --check prints one "Checking formatting..." line before the file list
FORMAT_HEADER_LINES = 1


@contextmanager
def progress_status(
    label: str,
    enabled: bool = True,
    console: Optional[Console] = None,
) -> Iterator[Optional[Status]]:
    """
    Show a spinner on stderr while a blocking call runs.

    Yields the rich Status, or None when progress is disabled or stderr
    is not a terminal. The spinner is stopped on exit, including on errors.
    """
    console = console or Console(stderr=True)
    if not enabled or not console.is_terminal:
        yield None
        return
    with console.status(f"[cyan]{label}...") as status:
        yield status


def run_tool(
    command: list[str],
    timeout_ms: int,
    cwd: Optional[Path] = None,
    label: str = 'Running',
    show_progress: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run an external tool and wait for it.

    A non-zero exit status is not an error here: lint tools exit 1 when
    they find problems. The caller decides what the output means.

    Raises:
        ExternalToolMissing: if the executable is not on PATH
        ExternalToolTimeout: if the run takes longer than ``timeout_ms``
    """
    logger.debug("Running %s", ' '.join(command))
    with progress_status(label, enabled=show_progress):
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout_ms / 1000,
                check=False,
            )
        except FileNotFoundError as e:
            raise ExternalToolMissing(command[0]) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolTimeout(' '.join(command[:2]), timeout_ms) from e

    logger.debug("%s exited with %d", command[0], result.returncode)
    return result


def lint_argv(config: Config, extra: Optional[list[str]] = None) -> list[str]:
    return [*config.lint_command, *config.patterns, '--format', 'json', *(extra or [])]


def collect_lint_results(
    config: Config,
    cwd: Optional[Path] = None,
    show_progress: bool = True,
) -> list[FileResult]:
    """
    Run the lint tool and parse its JSON report.

    Output that can't be parsed is logged as a warning and treated as a
    clean run, so the rest of the tracking still happens.
    """
    result = run_tool(
        lint_argv(config, ['--max-warnings=9999']),
        config.timeout_ms,
        cwd=cwd,
        label='Running lint check',
        show_progress=show_progress,
    )
    try:
        return parse_lint_output(result.stdout)
    except LintOutputError as e:
        logger.warning("Could not parse lint output, proceeding with zero lint issues: %s", e)
        if result.stderr.strip():
            logger.debug("Lint stderr: %s", result.stderr.strip())
        return []


def count_formatting_issues(
    config: Config,
    cwd: Optional[Path] = None,
    show_progress: bool = True,
) -> int:
    """
    Count files the formatter would rewrite.

    A missing formatter is logged and counted as zero. Timeouts propagate.
    """
    command = [*config.format_command, '--check', *config.patterns]
    try:
        result = run_tool(
            command,
            config.timeout_ms,
            cwd=cwd,
            label='Running formatting check',
            show_progress=show_progress,
        )
    except ExternalToolMissing as e:
        logger.warning("Could not run formatting check, proceeding with zero formatting issues: %s", e)
        return 0

    line_count = len(result.stdout.splitlines())
    return max(0, line_count - FORMAT_HEADER_LINES)


def run_rule_fix(
    config: Config,
    rule_id: str,
    cwd: Optional[Path] = None,
    show_progress: bool = True,
) -> subprocess.CompletedProcess:
    """Run the lint tool's autofix restricted to one rule."""
    command = [*config.lint_command, *config.patterns, '--fix', '--rule', f'{{"{rule_id}": "error"}}']
    return run_tool(command, config.timeout_ms, cwd=cwd, label=f'Fixing {rule_id}', show_progress=show_progress)
