"""Trend statistics over the snapshot history."""

from datetime import date, timedelta
from typing import Optional, Sequence
import math

from .models import PeriodProgress, Projection, Snapshot, TrendReport
from .parser import parse_timestamp


PROJECTION_DAYS = (7, 14, 30)
SECONDS_PER_DAY = 24 * 60 * 60
MIN_PERIOD_SNAPSHOTS = 3


def days_between(start: str, end: str) -> Optional[float]:
    """Elapsed days between two log timestamps, or None if either is unparseable."""
    start_dt = parse_timestamp(start)
    end_dt = parse_timestamp(end)
    if start_dt is None or end_dt is None:
        return None
    return (end_dt - start_dt).total_seconds() / SECONDS_PER_DAY


def percent_change(delta: int, base: int) -> float:
    """Percentage of ``delta`` relative to ``base``, with base floored at 1."""
    return delta / max(1, base) * 100


def _period_progress(snapshots: Sequence[Snapshot]) -> list[PeriodProgress]:
    periods = []
    for prev, curr in zip(snapshots, snapshots[1:]):
        fixed = prev.total_issues - curr.total_issues
        elapsed = days_between(prev.timestamp, curr.timestamp)
        if elapsed is None:
            periods.append(PeriodProgress(prev.timestamp, curr.timestamp, fixed, None, None))
            continue
        days = max(1.0, elapsed)
        periods.append(PeriodProgress(prev.timestamp, curr.timestamp, fixed, days, fixed / days))
    return periods


def project_future(
    first: Snapshot,
    last: Snapshot,
    days_elapsed: float,
    horizons: Sequence[int] = PROJECTION_DAYS,
) -> list[Projection]:
    """
    Project totals forward using the first-to-last rate.

    Each count is extrapolated on its own straight line and clamped at zero.
    """
    days = max(1.0, days_elapsed)
    total_rate = (first.total_issues - last.total_issues) / days
    error_rate = (first.error_count - last.error_count) / days
    warning_rate = (first.warning_count - last.warning_count) / days

    return [
        Projection(
            days_ahead=ahead,
            total=max(0, round(last.total_issues - total_rate * ahead)),
            errors=max(0, round(last.error_count - error_rate * ahead)),
            warnings=max(0, round(last.warning_count - warning_rate * ahead)),
        )
        for ahead in horizons
    ]


def analyze_trend(snapshots: Sequence[Snapshot], today: Optional[date] = None) -> TrendReport:
    """
    Compare the first and last snapshot of the history.

    Snapshots are used in log order; they are never re-sorted by time.
    With a single snapshot the report only carries the current status and
    is flagged ``insufficient_data``.

    Raises:
        ValueError: if ``snapshots`` is empty
    """
    if not snapshots:
        raise ValueError("At least one snapshot is required for trend analysis")

    first = snapshots[0]
    last = snapshots[-1]

    if len(snapshots) < 2:
        return TrendReport(first=first, last=last, snapshot_count=1, insufficient_data=True)

    reduction = first.total_issues - last.total_issues
    report = TrendReport(
        first=first,
        last=last,
        snapshot_count=len(snapshots),
        absolute_reduction=reduction,
        percent_reduction=(reduction / first.total_issues * 100) if first.total_issues else None,
        error_reduction=first.error_count - last.error_count,
        warning_reduction=first.warning_count - last.warning_count,
        formatting_reduction=first.formatting_count - last.formatting_count,
    )
    report.error_percent_reduction = percent_change(report.error_reduction, first.error_count)
    report.warning_percent_reduction = percent_change(report.warning_reduction, first.warning_count)
    report.formatting_percent_reduction = percent_change(report.formatting_reduction, first.formatting_count)

    if len(snapshots) >= MIN_PERIOD_SNAPSHOTS:
        report.periods = _period_progress(snapshots)

    elapsed = days_between(first.timestamp, last.timestamp)
    if elapsed is None:
        return report

    report.days_elapsed = elapsed
    report.fix_rate_per_day = reduction / max(1.0, elapsed)
    report.projections = project_future(first, last, elapsed)

    if report.fix_rate_per_day > 0:
        report.projected_days_to_zero = math.ceil(last.total_issues / report.fix_rate_per_day)
        report.completion_date = (today or date.today()) + timedelta(days=report.projected_days_to_zero)

    return report


def trend_direction(report: TrendReport) -> str:
    """'decreased', 'increased' or 'unchanged' for the total issue count."""
    if not report.absolute_reduction:
        return 'unchanged'
    return 'decreased' if report.absolute_reduction > 0 else 'increased'


def _fmt_pct(value: Optional[float]) -> str:
    return 'n/a' if value is None else f"{value:.1f}%"


def format_trend_report(report: TrendReport) -> str:
    """Format a trend report as plain text."""
    lines = []

    lines.append("Trend Analysis")
    lines.append("=" * 50)

    if report.insufficient_data:
        lines.append(f"Current issues: {report.last.total_issues} "
                     f"({report.last.error_count} errors, {report.last.warning_count} warnings, "
                     f"{report.last.formatting_count} formatting)")
        lines.append("Not enough data for trend analysis (need at least two runs).")
        return '\n'.join(lines)

    lines.append(f"Snapshots: {report.snapshot_count}")
    lines.append(f"Starting issues: {report.first.total_issues}")
    lines.append(f"Current issues: {report.last.total_issues}")

    direction = trend_direction(report)
    if direction == 'decreased':
        lines.append(f"Issues fixed: {report.absolute_reduction} ({_fmt_pct(report.percent_reduction)})")
    elif direction == 'increased':
        lines.append(f"Issues increased: {-report.absolute_reduction} "
                     f"({_fmt_pct(None if report.percent_reduction is None else -report.percent_reduction)})")
    else:
        lines.append("Issues unchanged")

    if report.days_elapsed is None:
        lines.append("Elapsed time: unknown (unparseable dates)")
    else:
        lines.append(f"Elapsed time: {report.days_elapsed:.1f} days")
        lines.append(f"Average fix rate: {report.fix_rate_per_day:.1f} issues per day")

    if report.projected_days_to_zero is not None:
        lines.append(f"Estimated completion: {report.projected_days_to_zero} days "
                     f"(around {report.completion_date.isoformat()})")
    elif direction != 'decreased':
        lines.append("No completion estimate while issues are not decreasing.")

    lines.append("")
    lines.append(f"Error reduction: {report.error_reduction} ({_fmt_pct(report.error_percent_reduction)})")
    lines.append(f"Warning reduction: {report.warning_reduction} ({_fmt_pct(report.warning_percent_reduction)})")
    if report.first.formatting_count or report.last.formatting_count:
        lines.append(f"Formatting reduction: {report.formatting_reduction} "
                     f"({_fmt_pct(report.formatting_percent_reduction)})")

    if report.projections:
        lines.append("")
        lines.append("Projected Trend")
        lines.append("-" * 40)
        lines.append("Days from now | Total | Errors | Warnings")
        for p in report.projections:
            lines.append(f"{p.days_ahead:>13} | {p.total:>5} | {p.errors:>6} | {p.warnings:>8}")

    if report.periods:
        lines.append("")
        lines.append("Progress Over Time")
        lines.append("-" * 40)
        for period in report.periods:
            span = f"{period.start[:10]} -> {period.end[:10]}"
            if period.daily_rate is None:
                lines.append(f"  {span}: {period.issues_fixed} fixed (dates unknown)")
            else:
                lines.append(f"  {span}: {period.daily_rate:.2f} issues/day")

    return '\n'.join(lines)


def _snapshot_to_json(snapshot: Snapshot) -> dict:
    return {
        'timestamp': snapshot.timestamp,
        'total': snapshot.total_issues,
        'errors': snapshot.error_count,
        'warnings': snapshot.warning_count,
        'formatting': snapshot.formatting_count,
    }


def trend_to_json(report: TrendReport) -> dict:
    """Serialise a trend report for ``chart --format json`` and the HTML page."""
    return {
        'snapshotCount': report.snapshot_count,
        'insufficientData': report.insufficient_data,
        'first': _snapshot_to_json(report.first),
        'last': _snapshot_to_json(report.last),
        'direction': None if report.insufficient_data else trend_direction(report),
        'absoluteReduction': report.absolute_reduction,
        'percentReduction': report.percent_reduction,
        'daysElapsed': report.days_elapsed,
        'fixRatePerDay': report.fix_rate_per_day,
        'projectedDaysToZero': report.projected_days_to_zero,
        'completionDate': report.completion_date.isoformat() if report.completion_date else None,
        'errorReduction': report.error_reduction,
        'warningReduction': report.warning_reduction,
        'formattingReduction': report.formatting_reduction,
        'periods': [
            {
                'start': p.start,
                'end': p.end,
                'issuesFixed': p.issues_fixed,
                'daysBetween': p.days_between,
                'dailyRate': p.daily_rate,
            }
            for p in report.periods
        ],
        'projections': [
            {'days': p.days_ahead, 'total': p.total, 'errors': p.errors, 'warnings': p.warnings}
            for p in report.projections
        ],
    }


def improvement_suggestions(snapshots: Sequence[Snapshot], current: Optional[dict]) -> list[str]:
    """
    Advisory follow-ups based on the history and the latest JSON snapshot.

    Returns an empty list when there is nothing to suggest.
    """
    if not current or not snapshots:
        return []

    worst_files = current.get('worstFiles') or []
    directories = current.get('issuesByDirectory') or []
    if not worst_files:
        return []

    suggestions = [
        f"Focus on fixing errors in {worst_files[0]['file']} ({worst_files[0].get('errors', 0)} errors)",
        "Set aside time to address warnings systematically",
    ]

    if len(snapshots) >= 2:
        first = snapshots[0]
        last = snapshots[-1]
        if (last.total_issues - first.total_issues) / max(1, first.total_issues) > -0.1:
            suggestions.append("Consider integrating linting into your CI/CD pipeline")

    suggestions.append("Review rule configurations for frequently violated rules")

    if len(directories) > 3:
        worst_dir = max(directories, key=lambda d: d.get('total', 0))
        suggestions.append(f"Consider refactoring code in {worst_dir['directory'] or '.'}")

    return suggestions
