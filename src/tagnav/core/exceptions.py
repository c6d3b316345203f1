"""Custom exceptions for tagnav."""

from typing import Any


class TagNavError(Exception):
    """Base exception for all tagnav errors."""

    pass


class ConfigError(TagNavError):
    """Configuration file could not be loaded."""

    pass


class QueryValidationError(TagNavError):
    """Query structure was rejected before evaluation."""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        """Initialize exception with the offending field.

        Args:
            message: Human readable description of the problem.
            field: Dotted path of the invalid field, e.g. ``query[0][1].tag``.
            value: The rejected value.
        """
        self.field = field
        self.value = value
        super().__init__(message)


class DocumentNotFoundError(TagNavError):
    """Document is not present in the index."""

    def __init__(self, doc_id: str):
        self.doc_id = doc_id
        super().__init__(f"Document not found: {doc_id}")


class SourceError(TagNavError):
    """Base exception for document source operations."""

    pass


class SourceListError(SourceError):
    """Failed to enumerate documents from a source."""

    def __init__(self, source_uri: str, reason: str):
        self.source_uri = source_uri
        self.reason = reason
        super().__init__(f"Failed to list documents from {source_uri}: {reason}")


class SourceFetchError(SourceError):
    """Failed to fetch a document."""

    def __init__(self, doc_id: str, reason: str):
        self.doc_id = doc_id
        self.reason = reason
        super().__init__(f"Failed to fetch {doc_id}: {reason}")
