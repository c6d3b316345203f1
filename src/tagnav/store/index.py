"""In-memory inverted tag index.

The index maps documents to their tag occurrences and tags back to the
documents containing them. State lives in an immutable
:class:`IndexSnapshot`; writers build a new snapshot under a lock and swap
it in, so readers always see one consistent version without locking.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from loguru import logger

from tagnav.core.exceptions import DocumentNotFoundError
from tagnav.core.types import IndexedDocument, ResultSet, SearchField, TagOccurrence
from tagnav.metadata.frontmatter import FrontmatterTagExtractor
from tagnav.metadata.links import id_key, scan_links, title_key
from tagnav.metadata.scanner import TagScanner

_EMPTY: frozenset[str] = frozenset()


@dataclass(frozen=True)
class IndexSnapshot:
    """One immutable version of the index.

    Attributes:
        documents: Document id -> indexed document.
        tag_documents: Tag -> ids of documents containing it.
        link_documents: Link key -> ids of documents containing the link.
        titles: Lower-cased title -> document ids.
        sorted_tags: Every tag, ascending.
    """

    documents: Mapping[str, IndexedDocument] = field(default_factory=dict)
    tag_documents: Mapping[str, frozenset[str]] = field(default_factory=dict)
    link_documents: Mapping[str, frozenset[str]] = field(default_factory=dict)
    titles: Mapping[str, frozenset[str]] = field(default_factory=dict)
    sorted_tags: tuple[str, ...] = ()

    def get_document(self, doc_id: str) -> IndexedDocument:
        try:
            return self.documents[doc_id]
        except KeyError:
            raise DocumentNotFoundError(doc_id) from None

    def tags_of(self, doc_id: str) -> set[str]:
        document = self.documents.get(doc_id)
        return set(document.tags) if document else set()

    def title_of(self, doc_id: str) -> str:
        document = self.documents.get(doc_id)
        return document.title if document else ""

    def tags_at_line(self, doc_id: str, line: int) -> set[str]:
        document = self.documents.get(doc_id)
        if document is None:
            return set()
        return {tag for tag, occurrence in document.tags.items() if line in occurrence.lines}

    def all_tags(self) -> list[str]:
        """Every known tag in ascending order.

        Range queries stop scanning at the first tag above their upper bound,
        so this order must hold.
        """
        return list(self.sorted_tags)

    def tag_counts(
        self, value_delim: str = "=", min_count: int = 1, nested: bool = True
    ) -> dict[str, int]:
        """Total direct occurrences per tag, valued tags rolled into their key.

        With ``nested`` the scanner already indexed ``key`` wherever it saw
        ``key=value``, so the valued tag is not added again. Without nesting
        every valued occurrence adds to its key.
        """
        counts: dict[str, int] = {}
        for document in self.documents.values():
            for tag, occurrence in document.tags.items():
                key = tag
                if value_delim and value_delim in tag:
                    key = tag.split(value_delim, 1)[0]
                    if not key or (nested and key in document.tags):
                        continue
                counts[key] = counts.get(key, 0) + occurrence.count
        threshold = max(min_count, 1)
        return {tag: count for tag, count in counts.items() if count >= threshold}

    def search_by(self, field: SearchField, value: str, negated: bool = False) -> ResultSet:
        """Look up the lines matching one field/value pair.

        Args:
            field: What ``value`` names: a tag, a document id or a title.
                Document fields match lines linking to that document.
            value: Normalized tag, document id or title.
            negated: Return the lines that carry some tag but do not match.

        Returns:
            ResultSet of document id -> line numbers. Documents without any
            tag never appear in a negated result.
        """
        positive = self._positive(field, value)
        return self.complement(positive) if negated else positive

    def complement(self, result_set: ResultSet) -> ResultSet:
        """Tag-bearing lines of every document that are not in ``result_set``.

        The universe of a document is the union of all its tags' lines, so a
        document without tags contributes nothing.
        """
        result: ResultSet = {}
        for doc_id, document in self.documents.items():
            remaining = set(document.tag_lines()) - result_set.get(doc_id, set())
            if remaining:
                result[doc_id] = remaining
        return result

    def _positive(self, field: SearchField, value: str) -> ResultSet:
        value = value.strip().lower()
        if field is SearchField.TAG:
            result: ResultSet = {}
            for doc_id in self.tag_documents.get(value, _EMPTY):
                result[doc_id] = set(self.documents[doc_id].tags[value].lines)
            return result

        if field is SearchField.DOCUMENT_ID:
            keys = [id_key(value)]
        else:
            keys = [title_key(value)] + [id_key(d) for d in self.titles.get(value, _EMPTY)]

        result = {}
        for key in keys:
            for doc_id in self.link_documents.get(key, _EMPTY):
                result.setdefault(doc_id, set()).update(self.documents[doc_id].links[key])
        return result


def _add_members(
    target: dict[str, frozenset[str]], keys: Iterable[str], doc_id: str
) -> None:
    for key in keys:
        target[key] = target.get(key, _EMPTY) | {doc_id}


def _drop_members(
    target: dict[str, frozenset[str]], keys: Iterable[str], doc_id: str
) -> None:
    for key in keys:
        remaining = target.get(key, _EMPTY) - {doc_id}
        if remaining:
            target[key] = remaining
        else:
            target.pop(key, None)


class TagIndex:
    """Inverted index over scanned documents.

    Example:
        >>> index = TagIndex(TagScanner())
        >>> index.index_document("n1", "note #alpha")
        >>> index.all_tags()
        ['alpha']
        >>> index.search_by(SearchField.TAG, "alpha")
        {'n1': {0}}
    """

    def __init__(
        self,
        scanner: TagScanner,
        frontmatter: FrontmatterTagExtractor | None = None,
    ):
        self.scanner = scanner
        self.frontmatter = frontmatter or FrontmatterTagExtractor(scanner.config, scanner.patterns)
        self._snapshot = IndexSnapshot()
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build_document(self, doc_id: str, text: str, title: str = "") -> IndexedDocument:
        """Scan one document without touching index state.

        Safe to call from worker threads.
        """
        tags = self.scanner.scan(text)
        for tag, occurrence in self.frontmatter.extract(text).items():
            tags[tag] = tags[tag].merge(occurrence) if tag in tags else occurrence

        links = scan_links(text, self.scanner.config.ignore_code_blocks)
        return IndexedDocument(
            doc_id=doc_id,
            title=title,
            text=text,
            tags={tag: occurrence.freeze() for tag, occurrence in tags.items()},
            links={key: frozenset(lines) for key, lines in links.items()},
        )

    def index_document(self, doc_id: str, text: str, title: str = "") -> None:
        """Replace ``doc_id``'s contribution with a scan of ``text``."""
        self.apply([self.build_document(doc_id, text, title)])

    def index_documents(self, documents: Iterable[tuple[str, str, str]]) -> int:
        """Index ``(doc_id, text, title)`` tuples with one snapshot swap."""
        built = [self.build_document(doc_id, text, title) for doc_id, text, title in documents]
        self.apply(built)
        return len(built)

    def remove_document(self, doc_id: str) -> None:
        """Delete ``doc_id``'s contribution; unknown ids are ignored."""
        self.apply(removals=[doc_id])

    def clear(self) -> None:
        with self._write_lock:
            self._snapshot = IndexSnapshot()

    def apply(
        self,
        documents: Iterable[IndexedDocument] = (),
        removals: Iterable[str] = (),
    ) -> None:
        """Swap in a snapshot with ``documents`` replaced and ``removals`` gone."""
        with self._write_lock:
            current = self._snapshot
            docs = dict(current.documents)
            tag_docs = dict(current.tag_documents)
            link_docs = dict(current.link_documents)
            titles = dict(current.titles)

            def drop(doc_id: str) -> None:
                old = docs.pop(doc_id, None)
                if old is None:
                    return
                _drop_members(tag_docs, old.tags, doc_id)
                _drop_members(link_docs, old.links, doc_id)
                _drop_members(titles, [old.title.strip().lower()], doc_id)

            for doc_id in removals:
                drop(doc_id)
            for document in documents:
                drop(document.doc_id)
                docs[document.doc_id] = document
                _add_members(tag_docs, document.tags, document.doc_id)
                _add_members(link_docs, document.links, document.doc_id)
                if document.title.strip():
                    _add_members(titles, [document.title.strip().lower()], document.doc_id)

            if tag_docs.keys() == current.tag_documents.keys():
                sorted_tags = current.sorted_tags
            else:
                sorted_tags = tuple(sorted(tag_docs))

            self._snapshot = IndexSnapshot(
                documents=MappingProxyType(docs),
                tag_documents=MappingProxyType(tag_docs),
                link_documents=MappingProxyType(link_docs),
                titles=MappingProxyType(titles),
                sorted_tags=sorted_tags,
            )
        logger.debug(f"Index updated: {len(docs)} documents, {len(sorted_tags)} tags")

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def snapshot(self) -> IndexSnapshot:
        """Current consistent view, for callers making several reads."""
        return self._snapshot

    def document_ids(self) -> list[str]:
        return list(self._snapshot.documents)

    def has_document(self, doc_id: str) -> bool:
        return doc_id in self._snapshot.documents

    def get_document(self, doc_id: str) -> IndexedDocument:
        return self._snapshot.get_document(doc_id)

    def tags_of(self, doc_id: str) -> set[str]:
        return self._snapshot.tags_of(doc_id)

    def title_of(self, doc_id: str) -> str:
        return self._snapshot.title_of(doc_id)

    def tags_at_line(self, doc_id: str, line: int) -> set[str]:
        return self._snapshot.tags_at_line(doc_id, line)

    def occurrence(self, doc_id: str, tag: str) -> TagOccurrence | None:
        document = self._snapshot.documents.get(doc_id)
        return document.tags.get(tag) if document else None

    def all_tags(self) -> list[str]:
        return self._snapshot.all_tags()

    def tag_counts(self, value_delim: str = "=", min_count: int = 1) -> dict[str, int]:
        return self._snapshot.tag_counts(value_delim, min_count, self.scanner.patterns.nested)

    def search_by(self, field: SearchField, value: str, negated: bool = False) -> ResultSet:
        return self._snapshot.search_by(field, value, negated)
