"""Core types, configuration and errors for tagnav."""

from .config import Config, DateTagConfig, IndexConfig, PatternConfig
from .exceptions import (
    ConfigError,
    DocumentNotFoundError,
    QueryValidationError,
    SourceError,
    SourceFetchError,
    SourceListError,
    TagNavError,
)
from .types import (
    DocumentLinks,
    DocumentTags,
    IndexedDocument,
    ResultSet,
    SearchField,
    TagOccurrence,
    TextBlock,
    ranked_tags,
)

__all__ = [
    "Config",
    "PatternConfig",
    "DateTagConfig",
    "IndexConfig",
    "TagNavError",
    "ConfigError",
    "QueryValidationError",
    "DocumentNotFoundError",
    "SourceError",
    "SourceListError",
    "SourceFetchError",
    "ResultSet",
    "SearchField",
    "TagOccurrence",
    "DocumentTags",
    "DocumentLinks",
    "IndexedDocument",
    "TextBlock",
    "ranked_tags",
]
