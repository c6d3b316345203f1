"""In-memory document source fake for testing.

Implements the DocumentSource protocol from tagnav.sources.base without
touching the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from tagnav.core.exceptions import SourceFetchError
from tagnav.sources.base import FailedDocument, SourceDocument, SourcePage


@dataclass
class InMemorySource:
    """Document source backed by a dict, paged like a host API."""

    documents: dict[str, SourceDocument] = field(default_factory=dict)
    page_size: int = 2
    pages_served: int = 0
    failing: dict[str, str] = field(default_factory=dict)

    def add(self, doc_id: str, text: str, title: str = "", **metadata) -> SourceDocument:
        document = SourceDocument(id=doc_id, text=text, title=title, metadata=metadata)
        self.documents[doc_id] = document
        return document

    def delete(self, doc_id: str) -> None:
        self.documents.pop(doc_id, None)

    def fail(self, doc_id: str, reason: str = "read error") -> None:
        """Keep listing ``doc_id`` but make reading it fail."""
        self.failing[doc_id] = reason

    def fetch_document(self, doc_id: str) -> SourceDocument:
        if doc_id in self.failing:
            raise SourceFetchError(doc_id, self.failing[doc_id])
        try:
            return self.documents[doc_id]
        except KeyError:
            raise SourceFetchError(doc_id, "no such document") from None

    def fetch_all_documents(self) -> Iterator[SourcePage]:
        ids = sorted(self.documents)
        for start in range(0, len(ids), self.page_size):
            self.pages_served += 1
            yield [self._entry(doc_id) for doc_id in ids[start : start + self.page_size]]

    def _entry(self, doc_id: str) -> SourceDocument | FailedDocument:
        if doc_id in self.failing:
            return FailedDocument(doc_id, self.failing[doc_id])
        return self.documents[doc_id]
