"""Exceptions raised by lint-track."""


class LintTrackError(Exception):
    """Base class for errors that end a command with a message."""


class ExternalToolMissing(LintTrackError):
    """The lint or format executable could not be started."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Required tool not found: {command}")


class ExternalToolTimeout(LintTrackError):
    """A lint or format run exceeded the configured timeout."""

    def __init__(self, command: str, timeout_ms: int):
        self.command = command
        self.timeout_ms = timeout_ms
        super().__init__(f"{command} timed out after {timeout_ms / 1000:g} seconds")


class LintOutputError(LintTrackError, ValueError):
    """Lint tool output is not the expected JSON array."""
