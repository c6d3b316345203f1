"""In-memory tag index."""

from .index import IndexSnapshot, TagIndex

__all__ = ["IndexSnapshot", "TagIndex"]
