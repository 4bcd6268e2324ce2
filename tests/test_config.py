"""Tests for config module."""

import json
import logging

import pytest

from lint_track.config import (
    CONFIG_FILENAME,
    Config,
    config_from_dict,
    default_config_path,
    load_config,
    save_config_value,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_when_missing(self, temp_dir):
        config = load_config(temp_dir / CONFIG_FILENAME)

        assert config == Config()
        assert config.timeout_ms == 60000
        assert config.report_dir == 'reports'
        assert config.lint_command == ['npx', 'eslint']

    def test_file_overrides_defaults(self, temp_dir):
        path = temp_dir / CONFIG_FILENAME
        path.write_text(json.dumps({'timeout_ms': 5000, 'theme': 'ocean'}))

        config = load_config(path)

        assert config.timeout_ms == 5000
        assert config.theme == 'ocean'
        assert config.top_rules == 10

    def test_invalid_json_falls_back(self, temp_dir, caplog):
        path = temp_dir / CONFIG_FILENAME
        path.write_text('{oops')

        with caplog.at_level(logging.WARNING, logger='lint_track'):
            config = load_config(path)

        assert config == Config()
        assert 'Ignoring unreadable config' in caplog.text

    def test_non_object_falls_back(self, temp_dir):
        path = temp_dir / CONFIG_FILENAME
        path.write_text('["a"]')
        assert load_config(path) == Config()

    def test_default_path_is_cwd(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        (temp_dir / CONFIG_FILENAME).write_text('{"top_rules": 3}')

        assert default_config_path().resolve() == (temp_dir / CONFIG_FILENAME).resolve()
        assert load_config().top_rules == 3


class TestConfigFromDict:
    """Tests for config_from_dict."""

    def test_unknown_keys_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger='lint_track'):
            config = config_from_dict({'colour': 'red', 'top_rules': 4})

        assert config.top_rules == 4
        assert 'Unknown config option ignored: colour' in caplog.text

    def test_single_pattern_string(self):
        assert config_from_dict({'patterns': 'lib/*.js'}).patterns == ['lib/*.js']


class TestConfig:
    """Tests for the Config dataclass."""

    def test_fix_globs(self):
        assert Config(patterns=['src/*.ts', 'lib/*.js']).fix_globs == '"src/*.ts" "lib/*.js"'

    def test_to_dict(self):
        data = Config().to_dict()
        assert data['check_formatting'] is True
        assert data['format_command'] == ['npx', 'prettier']


class TestSaveConfigValue:
    """Tests for save_config_value."""

    def test_creates_file(self, temp_dir):
        path = save_config_value('theme', 'forest', temp_dir / CONFIG_FILENAME)

        assert json.loads(path.read_text()) == {'theme': 'forest'}

    def test_keeps_other_keys(self, temp_dir):
        path = temp_dir / CONFIG_FILENAME
        path.write_text(json.dumps({'top_rules': 5, 'theme': 'ocean'}))

        save_config_value('theme', 'sunset', path)

        assert json.loads(path.read_text()) == {'top_rules': 5, 'theme': 'sunset'}
        assert load_config(path).theme == 'sunset'

    @pytest.mark.parametrize('key,value', [('top_rules', 3), ('check_formatting', False)])
    def test_round_trips_through_load(self, temp_dir, key, value):
        path = save_config_value(key, value, temp_dir / CONFIG_FILENAME)
        assert getattr(load_config(path), key) == value
