"""ASCII progress charts."""

from typing import Optional, Sequence

from .models import Snapshot
from .themes import Theme, get_theme


DEFAULT_WIDTH = 50
DIRECTORY_BAR_WIDTH = 20
FILLED = '█'
EMPTY = '░'


def progress_percent(total: int, max_total: int) -> int:
    """How far ``total`` is below the worst run, as a whole percentage."""
    if max_total <= 0:
        return 100
    return int((1 - total / max_total) * 100)


def progress_bar(total: int, max_total: int, width: int = DEFAULT_WIDTH) -> str:
    """Bar whose filled part grows as issues go down."""
    remaining = int(width * total / max_total) if max_total > 0 else 0
    return FILLED * (width - remaining) + EMPTY * remaining


def _progress_style(theme: Theme, percent: int):
    if percent >= 75:
        return theme.success
    if percent >= 50:
        return theme.info
    if percent >= 25:
        return theme.warning
    return theme.error


def render_chart(
    snapshots: Sequence[Snapshot],
    theme: Optional[Theme] = None,
    width: int = DEFAULT_WIDTH,
) -> str:
    """
    Render one row per snapshot: date, counts, and a progress bar scaled
    against the worst run in the history.
    """
    theme = theme or get_theme('default')
    lines = [
        theme.title("Lint Progress Chart"),
        theme.title("Date       | Errors | Warnings | Format | Progress"),
        '-' * (width + 40),
    ]

    if not snapshots:
        return '\n'.join(lines)

    max_total = max(s.total_issues for s in snapshots)

    for snapshot in snapshots:
        date_str = (snapshot.timestamp[:10] or 'unknown').ljust(10)
        percent = progress_percent(snapshot.total_issues, max_total)
        bar = progress_bar(snapshot.total_issues, max_total, width)
        style = _progress_style(theme, percent)
        lines.append(
            f"{date_str} | {theme.error(str(snapshot.error_count).rjust(6))} "
            f"| {theme.warning(str(snapshot.warning_count).rjust(8))} "
            f"| {theme.info(str(snapshot.formatting_count).rjust(6))} "
            f"| {style(f'{bar} {percent}%')}"
        )

    return '\n'.join(lines)


def render_directory_bars(
    directories: list[dict],
    theme: Optional[Theme] = None,
    limit: int = 5,
    width: int = DIRECTORY_BAR_WIDTH,
) -> str:
    """Horizontal bars for the directories with most issues (JSON snapshot rows)."""
    theme = theme or get_theme('default')
    top = directories[:limit]
    if not top:
        return ''

    max_total = max(d.get('total', 0) for d in top) or 1
    lines = []
    for index, d in enumerate(top, 1):
        bar = FILLED * int(d.get('total', 0) / max_total * width)
        name = (d.get('directory') or '.').ljust(30)
        lines.append(
            f"{index}. {name}: {bar} {d.get('total', 0)} "
            f"({theme.error(str(d.get('errors', 0)))} errors, "
            f"{theme.warning(str(d.get('warnings', 0)))} warnings)"
        )
    return '\n'.join(lines)


def render_worst_files(files: list[dict], theme: Optional[Theme] = None, limit: int = 5) -> str:
    theme = theme or get_theme('default')
    return '\n'.join(
        f"{index}. {f['file']}: {theme.error(str(f.get('errors', 0)))} errors, "
        f"{theme.warning(str(f.get('warnings', 0)))} warnings"
        for index, f in enumerate(files[:limit], 1)
    )
