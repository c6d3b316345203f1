"""Base protocol and types for document sources.

The index never fetches documents itself. A host supplies them through a
:class:`DocumentSource`, one page at a time, and calls back into the index
whenever a document changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class SourceDocument:
    """A document as delivered by the host.

    Attributes:
        id: Stable document identifier.
        text: Full raw text.
        title: Display title, also used to resolve title references.
        metadata: Host-specific fields (e.g. ``markup_language``).
    """

    id: str
    text: str
    title: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_html(self) -> bool:
        return str(self.metadata.get("markup_language", "markdown")).lower() == "html"


@dataclass(frozen=True)
class FailedDocument:
    """A listed document whose text could not be read.

    Still part of the corpus, so the index keeps its previous version.
    """

    id: str
    reason: str


SourcePage = list[Union[SourceDocument, FailedDocument]]


@runtime_checkable
class DocumentSource(Protocol):
    """Protocol defining the interface for document sources.

    Example implementation:

        class NotesApiSource:
            def fetch_document(self, doc_id: str) -> SourceDocument:
                note = api.get_note(doc_id)
                return SourceDocument(note.id, note.body, note.title)

            def fetch_all_documents(self) -> Iterator[list[SourceDocument]]:
                page = 1
                while True:
                    batch = api.list_notes(page=page)
                    yield [SourceDocument(n.id, n.body, n.title) for n in batch.items]
                    if not batch.has_more:
                        break
                    page += 1
    """

    def fetch_document(self, doc_id: str) -> SourceDocument:
        """Fetch one document.

        Raises:
            SourceFetchError: If the document cannot be fetched.
        """
        ...

    def fetch_all_documents(self) -> Iterator[SourcePage]:
        """Enumerate every document, one page per iteration.

        A document that is listed but cannot be read appears in its page as
        a :class:`FailedDocument`.

        Raises:
            SourceListError: If enumeration fails.
        """
        ...
