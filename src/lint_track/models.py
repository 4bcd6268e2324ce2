"""Data models for lint-track."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


ERROR_SEVERITY = 2
WARNING_SEVERITY = 1

# Rule key used when a message carries no rule id (parse errors and the like)
UNKNOWN_RULE = 'unknown'


@dataclass
class IssueMessage:
    """A single finding reported by the lint tool."""
    rule_id: Optional[str]
    severity: int
    line: int = 0
    file: str = ''
    message: str = ''

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR_SEVERITY

    @property
    def is_warning(self) -> bool:
        return self.severity == WARNING_SEVERITY


@dataclass
class FileResult:
    """All findings for one linted file."""
    file_path: str
    messages: list[IssueMessage] = field(default_factory=list)


@dataclass
class Snapshot:
    """Issue counts recorded by one lint run."""
    timestamp: str
    total_issues: int
    error_count: int
    warning_count: int
    formatting_count: int = 0


@dataclass
class RuleStat:
    """Issue counts for one rule across a run."""
    rule_id: str
    count: int = 0
    error_count: int = 0
    warning_count: int = 0


@dataclass
class FileStat:
    """Issue counts for one file."""
    file_path: str
    error_count: int = 0
    warning_count: int = 0
    total_count: int = 0


@dataclass
class DirectoryStat:
    """Issue counts for all files sharing a parent directory."""
    directory: str
    error_count: int = 0
    warning_count: int = 0
    total_count: int = 0


@dataclass
class RunStats:
    """Everything the aggregator derives from one lint run."""
    snapshot: Snapshot
    total_files: int
    files_with_issues: int
    rule_stats: list[RuleStat] = field(default_factory=list)
    file_stats: list[FileStat] = field(default_factory=list)
    directory_stats: list[DirectoryStat] = field(default_factory=list)
    formatting_checked: bool = False


@dataclass
class PeriodProgress:
    """Progress between two consecutive snapshots."""
    start: str
    end: str
    issues_fixed: int
    days_between: Optional[float]
    daily_rate: Optional[float]


@dataclass
class Projection:
    """Linear estimate of issue counts some days ahead."""
    days_ahead: int
    total: int
    errors: int
    warnings: int


@dataclass
class TrendReport:
    """Comparison of the first and last snapshot of a log."""
    first: Snapshot
    last: Snapshot
    snapshot_count: int
    insufficient_data: bool = False
    absolute_reduction: Optional[int] = None
    percent_reduction: Optional[float] = None
    days_elapsed: Optional[float] = None
    fix_rate_per_day: Optional[float] = None
    projected_days_to_zero: Optional[int] = None
    completion_date: Optional[date] = None
    error_reduction: Optional[int] = None
    error_percent_reduction: Optional[float] = None
    warning_reduction: Optional[int] = None
    warning_percent_reduction: Optional[float] = None
    formatting_reduction: Optional[int] = None
    formatting_percent_reduction: Optional[float] = None
    periods: list[PeriodProgress] = field(default_factory=list)
    projections: list[Projection] = field(default_factory=list)


@dataclass
class FileChange:
    """Change in one file's issue counts between two runs."""
    file: str
    previous_errors: int
    previous_warnings: int
    current_errors: int
    current_warnings: int

    @property
    def total_change(self) -> int:
        """Positive when issues went down."""
        return (self.previous_errors + self.previous_warnings) - (
            self.current_errors + self.current_warnings
        )
