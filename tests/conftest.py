"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from tagnav.core.config import Config, DateTagConfig, PatternConfig
from tagnav.metadata.dates import DateTagResolver
from tagnav.metadata.scanner import TagScanner
from tagnav.search.evaluator import QueryEvaluator
from tagnav.services import TagNavigator
from tagnav.store.index import TagIndex

# A Wednesday; the week containing it starts on Monday 2026-10-19
FIXED_NOW = datetime(2026, 10, 21, 9, 30)

EXAMPLE_DOCUMENT = "# Project\nsome note #alpha\n  nested line\n## Sub\nother line #beta=1"


@pytest.fixture
def date_resolver() -> DateTagResolver:
    """Provide a date resolver with a fixed clock."""
    return DateTagResolver(DateTagConfig(), now=lambda: FIXED_NOW)


@pytest.fixture
def pattern_config() -> PatternConfig:
    """Provide the default pattern configuration."""
    return PatternConfig()


@pytest.fixture
def scanner(pattern_config: PatternConfig, date_resolver: DateTagResolver) -> TagScanner:
    """Provide a TagScanner with default settings."""
    return TagScanner(pattern_config, date_resolver=date_resolver)


@pytest.fixture
def index(scanner: TagScanner) -> TagIndex:
    """Provide an empty TagIndex."""
    return TagIndex(scanner)


@pytest.fixture
def evaluator(index: TagIndex) -> QueryEvaluator:
    """Provide a QueryEvaluator bound to the index fixture."""
    return QueryEvaluator(index)


@pytest.fixture
def navigator(date_resolver: DateTagResolver) -> TagNavigator:
    """Provide a TagNavigator with default config and a fixed clock."""
    return TagNavigator(Config(), date_resolver=date_resolver)


@pytest.fixture
def make_scanner(date_resolver: DateTagResolver):
    """Provide a factory building scanners with PatternConfig overrides."""

    def _make(**options) -> TagScanner:
        return TagScanner(PatternConfig(**options), date_resolver=date_resolver)

    return _make


@pytest.fixture
def example_document() -> str:
    """Provide the heading and indentation example document."""
    return EXAMPLE_DOCUMENT
