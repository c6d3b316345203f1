"""Configuration management for tagnav."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .exceptions import ConfigError


@dataclass
class PatternConfig:
    """Tag matching and scanning configuration."""

    # Empty string selects the built-in tag pattern
    tag_regex: str = ""
    # Empty string disables exclusion
    exclude_regex: str = ""
    value_delim: str = "="
    space_replace: str = "_"
    tag_prefix: str = "#"
    nested_tags: bool = True
    inherit_tags: bool = True
    ignore_code_blocks: bool = True
    ignore_frontmatter: bool = False
    # Minimum total occurrences for a tag to be presented in counts
    min_count: int = 1


@dataclass
class DateTagConfig:
    """Relative date tag markers and their output formats (strftime)."""

    today_tag: str = "#today"
    date_format: str = "#%Y-%m-%d"
    month_tag: str = "#month"
    month_format: str = "#%Y-%m"
    week_tag: str = "#week"
    week_format: str = "#%Y-%m-%d"
    # 0 = Monday ... 6 = Sunday
    week_start_day: int = 0


@dataclass
class IndexConfig:
    """Index build configuration."""

    max_workers: int = 4
    ignore_html: bool = True
    glob_patterns: list[str] = field(default_factory=lambda: ["**/*.md"])
    page_size: int = 50


_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in _BOOL_TRUE


def _apply_section(section: Any, values: dict[str, Any], name: str) -> None:
    """Copy known keys from a TOML table onto a config dataclass."""
    known = {f.name for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            raise ConfigError(f"Unknown option {name}.{key}")
        setattr(section, key, value)


@dataclass
class Config:
    """Main application configuration."""

    patterns: PatternConfig = field(default_factory=PatternConfig)
    dates: DateTagConfig = field(default_factory=DateTagConfig)
    index: IndexConfig = field(default_factory=IndexConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()
        config._apply_env()
        return config

    @classmethod
    def from_file(cls, path: Path | str) -> "Config":
        """Load configuration from a TOML file, then apply env overrides.

        Raises:
            ConfigError: If the file cannot be read or has unknown options.
        """
        path = Path(path)
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot load config {path}: {e}") from e

        config = cls()
        for name in ("patterns", "dates", "index"):
            if name in data:
                _apply_section(getattr(config, name), data[name], name)
        config._apply_env()
        return config

    @classmethod
    def from_env_or_file(cls, path: Path | str | None = None) -> "Config":
        """Load from an explicit path, ``TAGNAV_CONFIG``, or the environment."""
        path = path or os.environ.get("TAGNAV_CONFIG")
        if path:
            return cls.from_file(path)
        return cls.from_env()

    def _apply_env(self) -> None:
        if regex := os.environ.get("TAGNAV_TAG_REGEX"):
            self.patterns.tag_regex = regex
        if regex := os.environ.get("TAGNAV_EXCLUDE_REGEX"):
            self.patterns.exclude_regex = regex
        if delim := os.environ.get("TAGNAV_VALUE_DELIM"):
            self.patterns.value_delim = delim
        if (value := os.environ.get("TAGNAV_NESTED_TAGS")) is not None:
            self.patterns.nested_tags = _env_bool(value)
        if (value := os.environ.get("TAGNAV_INHERIT_TAGS")) is not None:
            self.patterns.inherit_tags = _env_bool(value)
        if (value := os.environ.get("TAGNAV_IGNORE_CODE_BLOCKS")) is not None:
            self.patterns.ignore_code_blocks = _env_bool(value)
        if (value := os.environ.get("TAGNAV_IGNORE_FRONTMATTER")) is not None:
            self.patterns.ignore_frontmatter = _env_bool(value)
        if value := os.environ.get("TAGNAV_MIN_COUNT"):
            self.patterns.min_count = int(value)
        if fmt := os.environ.get("TAGNAV_DATE_FORMAT"):
            self.dates.date_format = fmt
        if value := os.environ.get("TAGNAV_MAX_WORKERS"):
            self.index.max_workers = int(value)
