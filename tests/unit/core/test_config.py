"""Tests for configuration loading."""

from pathlib import Path

import pytest

from tagnav.core.config import Config, DateTagConfig, IndexConfig, PatternConfig
from tagnav.core.exceptions import ConfigError

ENV_VARS = [
    "TAGNAV_CONFIG",
    "TAGNAV_TAG_REGEX",
    "TAGNAV_EXCLUDE_REGEX",
    "TAGNAV_VALUE_DELIM",
    "TAGNAV_NESTED_TAGS",
    "TAGNAV_INHERIT_TAGS",
    "TAGNAV_IGNORE_CODE_BLOCKS",
    "TAGNAV_IGNORE_FRONTMATTER",
    "TAGNAV_MIN_COUNT",
    "TAGNAV_DATE_FORMAT",
    "TAGNAV_MAX_WORKERS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without tagnav variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Tests for default configuration values."""

    def test_pattern_defaults(self):
        config = PatternConfig()

        assert config.tag_regex == ""
        assert config.value_delim == "="
        assert config.nested_tags is True
        assert config.inherit_tags is True
        assert config.ignore_code_blocks is True
        assert config.ignore_frontmatter is False
        assert config.min_count == 1

    def test_date_defaults(self):
        config = DateTagConfig()

        assert config.today_tag == "#today"
        assert config.date_format == "#%Y-%m-%d"
        assert config.week_start_day == 0

    def test_index_defaults(self):
        config = IndexConfig()

        assert config.max_workers == 4
        assert config.ignore_html is True
        assert config.glob_patterns == ["**/*.md"]

    def test_sections_are_independent(self):
        """Each Config gets its own section instances."""
        first, second = Config(), Config()
        first.index.glob_patterns.append("**/*.txt")

        assert second.index.glob_patterns == ["**/*.md"]


class TestFromEnv:
    """Tests for Config.from_env."""

    def test_no_env(self):
        assert Config.from_env() == Config()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("TAGNAV_TAG_REGEX", r"@\w+")
        monkeypatch.setenv("TAGNAV_VALUE_DELIM", ":")
        monkeypatch.setenv("TAGNAV_NESTED_TAGS", "false")
        monkeypatch.setenv("TAGNAV_IGNORE_FRONTMATTER", "Yes")
        monkeypatch.setenv("TAGNAV_MIN_COUNT", "3")
        monkeypatch.setenv("TAGNAV_DATE_FORMAT", "#%d/%m/%Y")
        monkeypatch.setenv("TAGNAV_MAX_WORKERS", "8")

        config = Config.from_env()

        assert config.patterns.tag_regex == r"@\w+"
        assert config.patterns.value_delim == ":"
        assert config.patterns.nested_tags is False
        assert config.patterns.ignore_frontmatter is True
        assert config.patterns.min_count == 3
        assert config.dates.date_format == "#%d/%m/%Y"
        assert config.index.max_workers == 8


class TestFromFile:
    """Tests for Config.from_file."""

    def test_loads_sections(self, tmp_path: Path):
        path = tmp_path / "tagnav.toml"
        path.write_text(
            "[patterns]\n"
            'exclude_regex = "^#\\\\d"\n'
            "inherit_tags = false\n"
            "[dates]\n"
            "week_start_day = 6\n"
            "[index]\n"
            'glob_patterns = ["**/*.md", "**/*.txt"]\n'
        )

        config = Config.from_file(path)

        assert config.patterns.exclude_regex == r"^#\d"
        assert config.patterns.inherit_tags is False
        assert config.dates.week_start_day == 6
        assert config.index.glob_patterns == ["**/*.md", "**/*.txt"]

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "tagnav.toml"
        path.write_text("[index]\nmax_workers = 2\n")
        monkeypatch.setenv("TAGNAV_MAX_WORKERS", "6")

        assert Config.from_file(path).index.max_workers == 6

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Cannot load config"):
            Config.from_file(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[patterns\n")

        with pytest.raises(ConfigError):
            Config.from_file(path)

    def test_unknown_option(self, tmp_path: Path):
        path = tmp_path / "tagnav.toml"
        path.write_text("[patterns]\nnope = 1\n")

        with pytest.raises(ConfigError, match="patterns.nope"):
            Config.from_file(path)


class TestFromEnvOrFile:
    """Tests for Config.from_env_or_file."""

    def test_config_env_var(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "tagnav.toml"
        path.write_text("[patterns]\nmin_count = 5\n")
        monkeypatch.setenv("TAGNAV_CONFIG", str(path))

        assert Config.from_env_or_file().patterns.min_count == 5

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "tagnav.toml"
        path.write_text("[patterns]\nmin_count = 2\n")
        monkeypatch.setenv("TAGNAV_CONFIG", str(tmp_path / "missing.toml"))

        assert Config.from_env_or_file(path).patterns.min_count == 2

    def test_env_only(self):
        assert Config.from_env_or_file() == Config()
