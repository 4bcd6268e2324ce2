"""CLI entry point for lint-track."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import Config, load_config
from .errors import LintTrackError
from .store import SnapshotStore
from .themes import get_theme


class EchoHandler(logging.Handler):
    """Logging handler that writes through click.echo to stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(debug: bool = False, quiet: bool = False) -> None:
    """Send package log records to stderr at a level chosen by --debug/--quiet."""
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    root = logging.getLogger('lint_track')
    root.setLevel(level)
    if not any(isinstance(h, EchoHandler) for h in root.handlers):
        handler = EchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(handler)


def fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def get_store(config: Config) -> SnapshotStore:
    return SnapshotStore(Path(config.report_dir))


def no_log_message(store: SnapshotStore) -> None:
    click.echo(f"No log file found at {store.log_path}")
    click.echo("Run 'lint-track track' first to record a lint run.")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False, path_type=Path),
              help="Config file (default: ./.lint-track.json)")
@click.option("--report-dir", default=None, help="Directory for the log and reports")
@click.option("--timeout", "timeout_ms", default=None, type=click.IntRange(min=1),
              help="Abort lint/format runs after this many milliseconds")
@click.option("--non-interactive", is_flag=True, help="Never prompt; use defaults")
@click.option("--debug", is_flag=True, help="Verbose logging")
@click.option("--quiet", is_flag=True, help="Only log errors, no progress indicator")
@click.pass_context
def main(ctx, config_path, report_dir, timeout_ms, non_interactive, debug, quiet):
    """Lint Track - record lint results over time and chart the progress."""
    setup_logging(debug=debug, quiet=quiet)

    config = load_config(config_path)
    if report_dir:
        config.report_dir = report_dir
    if timeout_ms:
        config.timeout_ms = timeout_ms

    ctx.obj = {
        'config': config,
        'config_path': config_path,
        'non_interactive': non_interactive,
        'quiet': quiet,
    }


@main.command()
@click.option("--pattern", "patterns", multiple=True, help="File glob to lint (repeatable)")
@click.option("--no-formatting", is_flag=True, help="Skip the formatting check")
@click.pass_obj
def track(obj, patterns, no_formatting):
    """Run the linter, record the results, and show a summary."""
    from .aggregate import aggregate_results, format_log_entry, stats_to_json
    from .runner import collect_lint_results, count_formatting_issues

    config: Config = obj['config']
    if patterns:
        config.patterns = list(patterns)
    theme = get_theme(config.theme)
    store = get_store(config)
    show_progress = not obj['quiet']

    click.echo(theme.title("Running Linting Analysis"))

    try:
        results = collect_lint_results(config, show_progress=show_progress)
        formatting = None
        if config.check_formatting and not no_formatting:
            formatting = count_formatting_issues(config, show_progress=show_progress)
    except LintTrackError as e:
        fail(str(e))

    stats = aggregate_results(results, formatting_count=formatting, root=Path.cwd())
    snapshot = stats.snapshot

    click.echo("")
    click.echo(theme.title("Summary"))
    click.echo(f"Files scanned: {theme.info(str(stats.total_files))}")
    click.echo(f"Files with issues: {theme.warning(str(stats.files_with_issues))}")
    click.echo(f"Errors: {theme.error(str(snapshot.error_count))}")
    click.echo(f"Warnings: {theme.warning(str(snapshot.warning_count))}")
    if stats.formatting_checked:
        click.echo(f"Formatting issues: {theme.info(str(snapshot.formatting_count))}")
    click.echo(f"Total issues: {theme.highlight(str(snapshot.total_issues))}")

    if stats.rule_stats:
        click.echo("")
        click.echo(theme.title("Top Issues by Rule"))
        for index, rule in enumerate(stats.rule_stats[:5], 1):
            click.echo(f"{index}. {rule.rule_id}: {rule.count} occurrences "
                       f"({rule.error_count} errors, {rule.warning_count} warnings)")

    if stats.directory_stats:
        click.echo("")
        click.echo(theme.title("Worst Directories"))
        for index, d in enumerate(stats.directory_stats[:5], 1):
            click.echo(f"{index}. {d.directory or '.'}: {d.total_count} issues "
                       f"({d.error_count} errors, {d.warning_count} warnings)")

    entry = format_log_entry(
        stats,
        details=config.log_details,
        top_rules=config.top_rules,
        fix_globs=config.fix_globs,
    )
    try:
        store.append_entry(entry)
        store.write_current(stats_to_json(stats))
    except OSError as e:
        fail(f"Could not write results: {e}")

    click.echo("")
    click.echo(theme.success(f"Progress entry added to {store.log_path}"))
    click.echo(f"Detailed results saved to {store.current_path}")


@main.command()
@click.option("--format", "output_format", default="text", type=click.Choice(['text', 'json']), help="Output format")
@click.option("--detailed/--no-detailed", default=True, help="Include files, directories and suggestions")
@click.pass_obj
def chart(obj, output_format, detailed):
    """Chart progress over time with trend analysis."""
    from .chart import render_chart, render_directory_bars, render_worst_files
    from .trend import analyze_trend, format_trend_report, improvement_suggestions, trend_to_json

    config: Config = obj['config']
    theme = get_theme(config.theme)
    store = get_store(config)

    if not store.has_log():
        no_log_message(store)
        return

    snapshots = store.read_snapshots()
    if not snapshots:
        click.echo(f"No data entries found in {store.log_path}")
        click.echo("Entries look like:")
        click.echo("===== DATE =====")
        click.echo("X problems (Y errors, Z warnings)")
        return

    report = analyze_trend(snapshots)

    if output_format == 'json':
        data = {
            'snapshots': [
                {
                    'timestamp': s.timestamp,
                    'total': s.total_issues,
                    'errors': s.error_count,
                    'warnings': s.warning_count,
                    'formatting': s.formatting_count,
                }
                for s in snapshots
            ],
            'trend': trend_to_json(report),
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(render_chart(snapshots, theme))
    click.echo("")
    click.echo(format_trend_report(report))

    if not detailed:
        return

    current = store.load_current()
    if current is None:
        return

    worst_files = render_worst_files(current.get('worstFiles') or [], theme)
    if worst_files:
        click.echo("")
        click.echo(theme.title("Files With Most Issues"))
        click.echo(worst_files)

    directory_bars = render_directory_bars(current.get('issuesByDirectory') or [], theme)
    if directory_bars:
        click.echo("")
        click.echo(theme.title("Directory Breakdown"))
        click.echo(directory_bars)

    suggestions = improvement_suggestions(snapshots, current)
    click.echo("")
    click.echo(theme.title("Improvement Suggestions"))
    if suggestions:
        for index, suggestion in enumerate(suggestions, 1):
            click.echo(f"{theme.info(f'{index}.')} {suggestion}")
    else:
        click.echo(f"{theme.success('Great job!')} Your codebase has no major linting issues.")


@main.command()
@click.pass_obj
def compare(obj):
    """Compare the two most recent lint runs."""
    from .compare import compare_files, format_comparison_report

    config: Config = obj['config']
    store = get_store(config)

    if not store.has_log():
        no_log_message(store)
        return

    snapshots = store.read_snapshots()
    if len(snapshots) < 2:
        click.echo("Need at least two runs to compare.")
        click.echo("Run 'lint-track track' again to record another one.")
        return

    previous, current = snapshots[-2], snapshots[-1]
    file_changes = compare_files(store.load_previous(), store.load_current())
    click.echo(format_comparison_report(previous, current, file_changes))


@main.command()
@click.argument("rule", required=False)
@click.pass_obj
def fix(obj, rule):
    """Auto-fix issues for one lint rule."""
    from .aggregate import aggregate_results, relative_file_path
    from .models import UNKNOWN_RULE
    from .runner import collect_lint_results, run_rule_fix

    config: Config = obj['config']
    theme = get_theme(config.theme)
    show_progress = not obj['quiet']

    if rule == UNKNOWN_RULE:
        fail("Issues without a rule id can't be fixed automatically.")

    try:
        results = collect_lint_results(config, show_progress=show_progress)
    except LintTrackError as e:
        fail(str(e))

    stats = aggregate_results(results)
    rule_counts = {r.rule_id: r.count for r in stats.rule_stats if r.rule_id != UNKNOWN_RULE}

    if not rule_counts:
        click.echo(theme.success("No fixable lint issues found!"))
        return

    if rule is None:
        click.echo(theme.title("Rules With Issues"))
        for rule_id, count in rule_counts.items():
            click.echo(f"  {theme.error(rule_id)}: {count} occurrences")
        if obj['non_interactive']:
            fail("Specify a rule to fix when running non-interactively.")
        rule = click.prompt("Which rule would you like to fix?", type=click.Choice(list(rule_counts)))

    if rule not in rule_counts:
        fail(f"No issues found for rule: {rule}")

    affected = [r for r in results if any(m.rule_id == rule for m in r.messages)]
    click.echo("")
    click.echo(f"Rule: {theme.error(rule)}")
    click.echo(f"Occurrences: {theme.warning(str(rule_counts[rule]))}")
    click.echo(f"Affected files: {theme.warning(str(len(affected)))}")
    for result in affected[:3]:
        example = next(m for m in result.messages if m.rule_id == rule)
        click.echo(f"  {relative_file_path(result.file_path, Path.cwd())}:{example.line} {example.message}")

    if not obj['non_interactive'] and not click.confirm("Attempt to fix this rule automatically?", default=True):
        click.echo("Fix cancelled.")
        return

    try:
        run_rule_fix(config, rule, show_progress=show_progress)
        after = collect_lint_results(config, show_progress=show_progress)
    except LintTrackError as e:
        fail(str(e))

    remaining = sum(1 for r in after for m in r.messages if m.rule_id == rule)
    fixed = rule_counts[rule] - remaining

    if fixed > 0:
        click.echo(theme.success(f"Fixed {fixed} issues."))
    else:
        click.echo(theme.warning("No issues could be fixed automatically."))
    if remaining > 0:
        click.echo(theme.warning(f"{remaining} issues need manual attention."))


@main.command()
@click.argument("name", required=False)
@click.pass_obj
def theme(obj, name):
    """List colour themes or choose one."""
    from .config import save_config_value
    from .themes import THEMES, preview_theme

    config: Config = obj['config']

    if name is None:
        for key, t in THEMES.items():
            marker = '*' if key == config.theme else ' '
            click.echo(f"{marker} {key}: {t.description}")
        return

    if name not in THEMES:
        fail(f"Unknown theme '{name}'. Available: {', '.join(THEMES)}")

    path = save_config_value('theme', name, obj['config_path'])
    click.echo(preview_theme(THEMES[name]))
    click.echo("")
    click.echo(f"Theme set to '{name}' in {path}")


@main.command()
@click.option("--output", default=None, type=click.Path(dir_okay=False, path_type=Path),
              help="Write the report here (default: <report-dir>/lint-report.html)")
@click.pass_obj
def html(obj, output: Optional[Path]):
    """Generate an HTML report from the recorded results."""
    from .html_report import render_html_report
    from .trend import analyze_trend

    config: Config = obj['config']
    store = get_store(config)

    current = store.load_current()
    if current is None:
        fail(f"No results found at {store.current_path}. Run 'lint-track track' first.")

    snapshots = store.read_snapshots()
    trend = analyze_trend(snapshots) if snapshots else None

    output_path = output or store.html_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_html_report(snapshots, current, trend), encoding='utf-8')
    click.echo(f"Wrote HTML report to {output_path}")


if __name__ == "__main__":
    main()
