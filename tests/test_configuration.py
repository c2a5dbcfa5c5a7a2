"""
Tests for configuration loading.

Tests cover:
- Built-in defaults
- TOML and JSON configuration files
- Environment and command-line overrides
- Validation failures reported as ConfigurationError
"""

import json
from pathlib import Path

import pytest

from bookmark_archiver.config.configuration import Configuration
from bookmark_archiver.config.pydantic_config import BookmarkConfig
from bookmark_archiver.utils.error_handler import ConfigurationError


class TestDefaults:
    def test_store_path_defaults_to_home(self, isolated_home):
        config = Configuration()

        assert config.store_path == isolated_home / ".bookmark"
        assert config.source is None

    def test_fetcher_defaults(self):
        settings = Configuration().get_fetcher_settings()

        assert settings["timeout"] == 20
        assert settings["max_retries"] == 3
        assert settings["retry_after_grace"] == 60
        assert settings["max_redirects"] == 10

    def test_availability_defaults(self):
        settings = Configuration().get_availability_settings()
        assert settings == {
            "endpoint": "http://archive.org/wayback/available",
            "timeout": 20,
        }

    def test_logging_defaults(self):
        config = BookmarkConfig()
        assert config.logging.level == "WARNING"
        assert config.logging.log_file is None


class TestConfigFiles:
    def test_toml_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[storage]\npath = "/tmp/marks"\n\n[network]\ntimeout = 5\nmax_retries = 1\n'
        )
        config = Configuration(path)

        assert config.store_path == Path("/tmp/marks")
        assert config.config.network.timeout == 5
        assert config.config.network.max_retries == 1
        assert config.source == path

    def test_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"logging": {"level": "debug"}}))

        assert Configuration(path).config.logging.level == "DEBUG"

    def test_tilde_is_expanded(self, tmp_path, isolated_home):
        path = tmp_path / "config.toml"
        path.write_text('[storage]\npath = "~/marks"\n')

        assert Configuration(path).store_path == isolated_home / "marks"

    def test_default_location_is_discovered(self, isolated_home):
        config_dir = isolated_home / ".config" / "bookmark"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("[network]\nmax_redirects = 3\n")

        assert Configuration().config.network.max_redirects == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            Configuration(tmp_path / "absent.toml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("network: {}\n")

        with pytest.raises(ConfigurationError, match="Unsupported"):
            Configuration(path)

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[network\n")

        with pytest.raises(ConfigurationError):
            Configuration(path)

    @pytest.mark.parametrize(
        "body, location",
        [
            ("[network]\ntimeout = 0\n", "network.timeout"),
            ("[network]\nmax_retries = 99\n", "network.max_retries"),
            ('[logging]\nlevel = "LOUD"\n', "logging.level"),
            ('[archive]\navailability_url = "ftp://x"\n', "archive.availability_url"),
        ],
    )
    def test_invalid_values(self, tmp_path, body, location):
        path = tmp_path / "config.toml"
        path.write_text(body)

        with pytest.raises(ConfigurationError, match=location):
            Configuration(path)


class TestOverrides:
    def test_environment_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[storage]\npath = "/from/file"\n')
        monkeypatch.setenv("BOOKMARK_FILE", "/from/env")
        monkeypatch.setenv("BOOKMARK_LOG_LEVEL", "info")

        config = Configuration(path)

        assert config.store_path == Path("/from/env")
        assert config.config.logging.level == "INFO"

    def test_cli_beats_environment(self, monkeypatch):
        monkeypatch.setenv("BOOKMARK_FILE", "/from/env")
        config = Configuration()
        config.update_from_args({"store_path": Path("/from/cli")})

        assert config.store_path == Path("/from/cli")

    def test_cli_without_overrides_keeps_values(self, monkeypatch):
        monkeypatch.setenv("BOOKMARK_FILE", "/from/env")
        config = Configuration()
        config.update_from_args({"store_path": None})

        assert config.store_path == Path("/from/env")
