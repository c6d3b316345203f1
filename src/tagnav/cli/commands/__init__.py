"""Command implementations for tagnav CLI."""

from .query import add_query_arguments, handle_query
from .tags import add_tags_arguments, handle_lines, handle_tags

__all__ = [
    "add_query_arguments",
    "handle_query",
    "add_tags_arguments",
    "handle_tags",
    "handle_lines",
]
