"""Configuration: defaults plus an optional project JSON file."""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional


logger = logging.getLogger(__name__)

CONFIG_FILENAME = '.lint-track.json'


@dataclass
class Config:
    """
    Options for a lint-track run.

    patterns: file globs handed to both the lint tool and the formatter
    report_dir: directory holding the log, JSON snapshots and HTML report
    timeout_ms: abort a lint/format subprocess after this many milliseconds
    check_formatting: run the formatter check and record a formatting count
    log_details: append the "Top issues by rule" block to each log entry
    top_rules: how many rules that block lists
    theme: colour palette for terminal output
    lint_command / format_command: executables (argv prefix) to run
    """
    patterns: list[str] = field(default_factory=lambda: ['src/**/*.{js,jsx,ts,tsx}'])
    report_dir: str = 'reports'
    timeout_ms: int = 60000
    check_formatting: bool = True
    log_details: bool = True
    top_rules: int = 10
    theme: str = 'default'
    lint_command: list[str] = field(default_factory=lambda: ['npx', 'eslint'])
    format_command: list[str] = field(default_factory=lambda: ['npx', 'prettier'])

    @property
    def fix_globs(self) -> str:
        """Patterns quoted for display in suggested shell commands."""
        return ' '.join(f'"{p}"' for p in self.patterns)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_FILENAME


def _load_json(path: Path) -> Optional[dict[str, Any]]:
    """Load a JSON object; None if the file is missing or invalid."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return None
    return data


def config_from_dict(data: dict[str, Any]) -> Config:
    """Build a Config from a dict, skipping unknown keys."""
    known = {f.name for f in fields(Config)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Unknown config option ignored: %s", key)
            continue
        values[key] = value
    if isinstance(values.get('patterns'), str):
        values['patterns'] = [values['patterns']]
    return Config(**values)


def load_config(path: Optional[Path] = None) -> Config:
    """Load config from ``path`` (default: ./.lint-track.json) over the defaults."""
    data = _load_json(path or default_config_path())
    if data is None:
        return Config()
    return config_from_dict(data)


def save_config_value(key: str, value: Any, path: Optional[Path] = None) -> Path:
    """
    Set one option in the config file, keeping the others.

    Creates the file if it doesn't exist. Returns the path written.
    """
    config_path = path or default_config_path()
    data = _load_json(config_path) or {}
    data[key] = value
    config_path.write_text(json.dumps(data, indent=2) + '\n', encoding='utf-8')
    return config_path
