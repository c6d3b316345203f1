"""Test fakes for testing without real infrastructure.

Example:
    from tests.fakes import InMemorySource

    source = InMemorySource()
    source.add("note-1", "text #tag", title="Note 1")
    IndexingService(index, source).build()
"""

from .sources import InMemorySource

__all__ = ["InMemorySource"]
