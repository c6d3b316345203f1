"""Type definitions for tagnav."""

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet

# Document id -> matched line numbers. The value type of query evaluation.
ResultSet = dict[str, set[int]]


class SearchField(Enum):
    """Field a single index lookup is keyed on."""

    TAG = "tag"
    DOCUMENT_ID = "document-id"
    DOCUMENT_TITLE = "document-title"


@dataclass
class TagOccurrence:
    """Lines a tag applies to within one document.

    ``count`` only reflects literal matches; ``lines`` additionally holds
    lines the tag was inherited on, so ``count <= len(lines)`` for scanned tags.
    """

    lines: AbstractSet[int] = field(default_factory=set)
    count: int = 0

    def add(self, line: int, direct: bool = True) -> None:
        self.lines.add(line)  # type: ignore[attr-defined]
        if direct:
            self.count += 1

    def merge(self, other: "TagOccurrence") -> "TagOccurrence":
        """Return a new occurrence holding the union of both."""
        return TagOccurrence(lines=set(self.lines) | set(other.lines), count=self.count + other.count)

    def freeze(self) -> "TagOccurrence":
        return TagOccurrence(lines=frozenset(self.lines), count=self.count)


# Tag -> occurrence for one document
DocumentTags = dict[str, TagOccurrence]

# Link target key -> lines carrying that link for one document
DocumentLinks = dict[str, set[int]]


def ranked_tags(tags: DocumentTags) -> list[tuple[str, TagOccurrence]]:
    """Order a document's tags by direct count (descending), then name."""
    return sorted(tags.items(), key=lambda item: (-item[1].count, item[0]))


@dataclass(frozen=True)
class TextBlock:
    """A maximal run of consecutive matched lines."""

    first_line: int
    text: str


@dataclass(frozen=True)
class IndexedDocument:
    """A document's full contribution to the index."""

    doc_id: str
    title: str
    text: str
    tags: dict[str, TagOccurrence]
    links: dict[str, frozenset[int]]

    def tag_lines(self) -> frozenset[int]:
        """Union of every line carrying any tag in this document."""
        universe: set[int] = set()
        for occurrence in self.tags.values():
            universe.update(occurrence.lines)
        return frozenset(universe)
