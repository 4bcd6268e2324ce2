"""Static HTML report."""

from datetime import datetime
from html import escape
from typing import Optional, Sequence

from .models import Snapshot, TrendReport
from .trend import trend_direction


STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; margin: 2rem; color: #2c3e50; }
h1 { margin-bottom: 0.2rem; }
.generated { color: #7f8c8d; margin-top: 0; }
.cards { display: flex; gap: 1rem; flex-wrap: wrap; }
.card { border: 1px solid #ddd; border-radius: 6px; padding: 1rem 1.5rem; min-width: 8rem; }
.card .value { font-size: 2rem; font-weight: bold; }
.error { color: #e74c3c; }
.warning { color: #f39c12; }
.info { color: #3498db; }
.success { color: #2ecc71; }
table { border-collapse: collapse; margin: 1rem 0; }
th, td { border-bottom: 1px solid #eee; padding: 0.3rem 0.8rem; text-align: left; }
td.num { text-align: right; }
.bar { background: #3498db; height: 0.8rem; }
"""


def _card(label: str, value, css_class: str = '') -> str:
    return (f'<div class="card"><div>{escape(label)}</div>'
            f'<div class="value {css_class}">{escape(str(value))}</div></div>')


def _table(headers: list[str], rows: list[list], numeric_from: int = 1) -> str:
    head = ''.join(f'<th>{escape(h)}</th>' for h in headers)
    body = []
    for row in rows:
        cells = []
        for i, cell in enumerate(row):
            css = ' class="num"' if i >= numeric_from else ''
            cells.append(f'<td{css}>{cell}</td>')
        body.append(f"<tr>{''.join(cells)}</tr>")
    return f"<table><thead><tr>{head}</tr></thead><tbody>{''.join(body)}</tbody></table>"


def _bar(value: int, max_value: int, width_px: int = 200) -> str:
    width = int(value / max_value * width_px) if max_value > 0 else 0
    return f'<div class="bar" style="width: {width}px"></div>'


def _trend_section(trend: Optional[TrendReport]) -> list[str]:
    parts = ['<h2>Trend</h2>']
    if trend is None or trend.insufficient_data:
        parts.append('<p>Not enough data for trend analysis yet.</p>')
        return parts

    direction = trend_direction(trend)
    if direction == 'decreased':
        pct = 'n/a' if trend.percent_reduction is None else f"{trend.percent_reduction:.1f}%"
        parts.append(f'<p class="success">Issues fixed: {trend.absolute_reduction} ({pct})</p>')
    elif direction == 'increased':
        parts.append(f'<p class="error">Issues increased by {-trend.absolute_reduction}</p>')
    else:
        parts.append('<p>Issues unchanged.</p>')

    if trend.fix_rate_per_day is not None:
        parts.append(f'<p>Average fix rate: {trend.fix_rate_per_day:.1f} issues per day</p>')
    if trend.projected_days_to_zero is not None:
        parts.append(f'<p>Estimated completion: {trend.projected_days_to_zero} days '
                     f'(around {trend.completion_date.isoformat()})</p>')

    if trend.projections:
        parts.append(_table(
            ['Days from now', 'Total', 'Errors', 'Warnings'],
            [[p.days_ahead, p.total, p.errors, p.warnings] for p in trend.projections],
            numeric_from=0,
        ))
    return parts


def render_html_report(
    snapshots: Sequence[Snapshot],
    current: dict,
    trend: Optional[TrendReport] = None,
    generated_at: Optional[datetime] = None,
    limit: int = 10,
) -> str:
    """
    Render the full report page.

    Args:
        snapshots: History parsed from the progress log
        current: The latest JSON snapshot
        trend: Trend analysis of ``snapshots`` (optional)
        generated_at: Timestamp shown in the header (defaults to now)
        limit: Rows shown in the rule, file and directory tables
    """
    generated_at = generated_at or datetime.now()
    stats = current.get('stats') or {}
    rules = current.get('ruleStats') or []
    files = current.get('worstFiles') or []
    directories = current.get('issuesByDirectory') or []

    parts = [
        '<!DOCTYPE html>',
        '<html lang="en"><head><meta charset="utf-8">',
        '<title>Lint Progress Report</title>',
        f'<style>{STYLE}</style></head><body>',
        '<h1>Lint Progress Report</h1>',
        f'<p class="generated">Generated {escape(generated_at.strftime("%Y-%m-%d %H:%M"))}'
        f' from the run at {escape(str(current.get("timestamp", "unknown")))}</p>',
        '<div class="cards">',
        _card('Files scanned', stats.get('totalFiles', 0), 'info'),
        _card('Files with issues', stats.get('filesWithIssues', 0), 'warning'),
        _card('Errors', stats.get('errors', 0), 'error'),
        _card('Warnings', stats.get('warnings', 0), 'warning'),
        _card('Formatting', stats.get('formatting', 0), 'info'),
        '</div>',
    ]

    parts.extend(_trend_section(trend))

    parts.append('<h2>History</h2>')
    if snapshots:
        max_total = max(s.total_issues for s in snapshots)
        parts.append(_table(
            ['Date', 'Total', 'Errors', 'Warnings', 'Formatting', ''],
            [
                [escape(s.timestamp or 'unknown'), s.total_issues, s.error_count,
                 s.warning_count, s.formatting_count, _bar(s.total_issues, max_total)]
                for s in snapshots
            ],
        ))
    else:
        parts.append('<p>No history recorded.</p>')

    if rules:
        parts.append('<h2>Top Rules</h2>')
        parts.append(_table(
            ['Rule', 'Count', 'Errors', 'Warnings'],
            [[escape(r['rule']), r.get('count', 0), r.get('errors', ''), r.get('warnings', '')]
             for r in rules[:limit]],
        ))

    if files:
        parts.append('<h2>Files With Most Issues</h2>')
        parts.append(_table(
            ['File', 'Total', 'Errors', 'Warnings'],
            [[escape(f['file']), f.get('total', 0), f.get('errors', 0), f.get('warnings', 0)]
             for f in files[:limit]],
        ))

    if directories:
        parts.append('<h2>Directories</h2>')
        max_dir = max(d.get('total', 0) for d in directories[:limit])
        parts.append(_table(
            ['Directory', 'Total', 'Errors', 'Warnings', ''],
            [[escape(d['directory'] or '.'), d.get('total', 0), d.get('errors', 0),
              d.get('warnings', 0), _bar(d.get('total', 0), max_dir)]
             for d in directories[:limit]],
        ))

    parts.append('</body></html>')
    return '\n'.join(parts) + '\n'
