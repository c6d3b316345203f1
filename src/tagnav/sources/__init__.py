"""Document sources feeding the tag index."""

from .base import DocumentSource, FailedDocument, SourceDocument, SourcePage
from .filesystem import FileSystemSource

__all__ = [
    "DocumentSource",
    "SourceDocument",
    "FailedDocument",
    "SourcePage",
    "FileSystemSource",
]
