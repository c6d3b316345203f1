"""ResultSet algebra and result materialization.

Query evaluation works on line-granular result sets: AND intersects the
line sets of documents present on both sides, OR unions them. The
materializer turns the final line sets into text blocks, one per run of
consecutive matched lines.
"""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from tagnav.core.exceptions import DocumentNotFoundError
from tagnav.core.types import ResultSet, TextBlock
from tagnav.store.index import IndexSnapshot, TagIndex


def intersect(left: ResultSet, right: ResultSet) -> ResultSet:
    """Documents in both sets, with only the lines present in both."""
    result: ResultSet = {}
    for doc_id, lines in left.items():
        if doc_id in right:
            common = lines & right[doc_id]
            if common:
                result[doc_id] = common
    return result


def union(left: ResultSet, right: ResultSet) -> ResultSet:
    """Documents in either set, with the union of their lines."""
    result: ResultSet = {doc_id: set(lines) for doc_id, lines in left.items()}
    for doc_id, lines in right.items():
        result.setdefault(doc_id, set()).update(lines)
    return result


def group_runs(lines: Iterable[int]) -> list[list[int]]:
    """Split line numbers into maximal runs of consecutive integers.

    Example:
        >>> group_runs([7, 2, 3])
        [[2, 3], [7]]
    """
    runs: list[list[int]] = []
    for line in sorted(set(lines)):
        if runs and line == runs[-1][-1] + 1:
            runs[-1].append(line)
        else:
            runs.append([line])
    return runs


def text_blocks(lines: Iterable[int], text: str) -> list[TextBlock]:
    """Materialize one document's matched lines into text blocks."""
    source_lines = text.split("\n")
    blocks = []
    for run in group_runs(lines):
        body = "\n".join(source_lines[n] for n in run if n < len(source_lines))
        blocks.append(TextBlock(first_line=run[0], text=body))
    return blocks


def materialize(
    result_set: ResultSet,
    index: TagIndex | IndexSnapshot,
    strict: bool = False,
) -> dict[str, list[TextBlock]]:
    """Convert a ResultSet into text blocks per document.

    Args:
        result_set: Evaluated query result.
        index: Index (or snapshot) holding the documents' text.
        strict: Raise for documents missing from the index instead of
            skipping them.

    Raises:
        DocumentNotFoundError: If ``strict`` and a document is unknown.
    """
    snapshot = index.snapshot() if isinstance(index, TagIndex) else index
    materialized: dict[str, list[TextBlock]] = {}
    for doc_id, lines in result_set.items():
        document = snapshot.documents.get(doc_id)
        if document is None:
            if strict:
                raise DocumentNotFoundError(doc_id)
            logger.debug(f"Skipping result for unindexed document {doc_id}")
            continue
        materialized[doc_id] = text_blocks(lines, document.text)
    return materialized
