"""Services composing the tag index with document sources."""

from .container import TagNavigator
from .indexing import IndexingService, IndexResult

__all__ = [
    "TagNavigator",
    "IndexingService",
    "IndexResult",
]
