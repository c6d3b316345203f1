"""Indexing service: feeds documents from a source into the tag index."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from loguru import logger

from tagnav.core.config import IndexConfig
from tagnav.core.types import IndexedDocument
from tagnav.sources.base import DocumentSource, FailedDocument, SourceDocument
from tagnav.store.index import TagIndex


@dataclass
class IndexResult:
    """Result of an indexing operation."""

    indexed: int = 0
    """Number of documents indexed."""

    skipped: int = 0
    """Number of documents skipped (e.g. HTML documents)."""

    removed: int = 0
    """Number of documents dropped because the source no longer has them."""

    errors: list[tuple[str, str]] = field(default_factory=list)
    """List of (document id, error message) for documents that could not be
    read or scanned. Their previous index entries are kept."""


class IndexingService:
    """Builds and maintains a :class:`TagIndex` from a :class:`DocumentSource`.

    Scanning is pure, so each page of documents is scanned on a bounded
    thread pool; the resulting documents are applied to the index by the
    calling thread, which is the only writer.

    Example:

        service = IndexingService(index, FileSystemSource("notes"))
        result = service.build()
        print(f"Indexed {result.indexed} documents")
    """

    def __init__(self, index: TagIndex, source: DocumentSource, config: IndexConfig | None = None):
        self.index = index
        self.source = source
        self.config = config or IndexConfig()

    def build(self) -> IndexResult:
        """Index every document the source yields.

        Documents already in the index but no longer listed by the source
        are removed. A listed document that cannot be read keeps its
        previous entry and is reported in ``errors``.
        """
        result = IndexResult()
        seen: set[str] = set()
        start_time = time.perf_counter()

        with ThreadPoolExecutor(max_workers=max(self.config.max_workers, 1)) as executor:
            for page in self.source.fetch_all_documents():
                wanted: list[SourceDocument] = []
                skipped: list[str] = []
                for document in page:
                    seen.add(document.id)
                    if isinstance(document, FailedDocument):
                        logger.warning(f"Failed to fetch {document.id}: {document.reason}")
                        result.errors.append((document.id, document.reason))
                    elif self._skip(document):
                        skipped.append(document.id)
                    else:
                        wanted.append(document)

                built = list(executor.map(self._build, wanted))
                ready = [doc for doc in built if isinstance(doc, IndexedDocument)]
                result.errors.extend(err for err in built if isinstance(err, tuple))
                # skipped documents may have been indexed before the setting changed
                self.index.apply(ready, removals=skipped)
                result.indexed += len(ready)
                result.skipped += len(skipped)

        stale = [doc_id for doc_id in self.index.document_ids() if doc_id not in seen]
        if stale:
            self.index.apply(removals=stale)
        result.removed = len(stale)

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Index built: indexed={result.indexed}, skipped={result.skipped}, "
            f"removed={result.removed}, errors={len(result.errors)}, {elapsed:.2f}s"
        )
        return result

    def refresh(self, doc_id: str) -> None:
        """Re-fetch and re-index one document after the host reports a change.

        Raises:
            SourceFetchError: If the source cannot provide the document.
        """
        document = self.source.fetch_document(doc_id)
        if self._skip(document):
            self.index.remove_document(doc_id)
            return
        self.index.index_document(document.id, document.text, document.title)

    def remove(self, doc_id: str) -> None:
        self.index.remove_document(doc_id)

    def _skip(self, document: SourceDocument) -> bool:
        return self.config.ignore_html and document.is_html

    def _build(self, document: SourceDocument) -> IndexedDocument | tuple[str, str]:
        try:
            return self.index.build_document(document.id, document.text, document.title)
        except Exception as e:
            logger.error(f"Failed to index {document.id}: {e}")
            return (document.id, str(e))
