"""Service container wiring configuration, index and evaluator together."""

from __future__ import annotations

from typing import Any

from loguru import logger

from tagnav.core.config import Config
from tagnav.core.types import ResultSet, TextBlock
from tagnav.metadata.dates import DateTagResolver
from tagnav.metadata.frontmatter import FrontmatterTagExtractor
from tagnav.metadata.patterns import compile_patterns
from tagnav.metadata.scanner import TagScanner
from tagnav.search.evaluator import QueryEvaluator
from tagnav.search.query import Query, parse_query
from tagnav.search.results import materialize
from tagnav.services.indexing import IndexingService, IndexResult
from tagnav.sources.base import DocumentSource
from tagnav.store.index import TagIndex


class TagNavigator:
    """Owns one index and everything needed to query it.

    Several navigators can coexist (e.g. one per test), each with its own
    configuration and index.

    Usage:

        navigator = TagNavigator(Config.from_env())
        navigator.index_source(FileSystemSource("notes"))
        result = navigator.evaluate('[[{"tag": "project"}]]')
        for doc_id, blocks in navigator.materialize(result).items():
            ...

    Attributes:
        config: Application configuration.
        index: The tag index.
        evaluator: Query evaluator bound to ``index``.
    """

    def __init__(self, config: Config | None = None, date_resolver: DateTagResolver | None = None):
        self.config = config or Config()
        self.date_resolver = date_resolver or DateTagResolver(self.config.dates)
        patterns = compile_patterns(self.config.patterns)
        self.scanner = TagScanner(self.config.patterns, patterns, self.date_resolver)
        self.index = TagIndex(
            self.scanner, FrontmatterTagExtractor(self.config.patterns, patterns)
        )
        self.evaluator = QueryEvaluator(self.index, self.date_resolver, patterns)

    def index_source(self, source: DocumentSource) -> IndexResult:
        """Build the index from every document ``source`` provides."""
        return self.indexing_service(source).build()

    def indexing_service(self, source: DocumentSource) -> IndexingService:
        return IndexingService(self.index, source, self.config.index)

    def index_document(self, doc_id: str, text: str, title: str = "") -> None:
        self.index.index_document(doc_id, text, title)

    def remove_document(self, doc_id: str) -> None:
        self.index.remove_document(doc_id)

    def evaluate(self, query: Query | str | list[Any], current_document_id: str | None = None) -> ResultSet:
        """Evaluate a query model, or raw query data after validation.

        Raises:
            QueryValidationError: If raw query data is malformed.
        """
        if isinstance(query, str) or not _is_query_model(query):
            query = parse_query(query)
        return self.evaluator.evaluate(query, current_document_id)

    def materialize(self, result_set: ResultSet, strict: bool = False) -> dict[str, list[TextBlock]]:
        return materialize(result_set, self.index, strict=strict)

    def tags_at_line(self, doc_id: str, line: int) -> set[str]:
        return self.index.tags_at_line(doc_id, line)

    def tag_counts(self, value_delim: str | None = None, min_count: int | None = None) -> dict[str, int]:
        """Tag counts using the configured delimiter and presentation threshold."""
        delim = self.config.patterns.value_delim if value_delim is None else value_delim
        threshold = self.config.patterns.min_count if min_count is None else min_count
        counts = self.index.tag_counts(delim, threshold)
        logger.debug(f"{len(counts)} tags at or above count {threshold}")
        return counts

    def all_tags(self) -> list[str]:
        return self.index.all_tags()


def _is_query_model(query: list[Any]) -> bool:
    return all(
        isinstance(clause, list) and all(not isinstance(part, dict) for part in clause)
        for clause in query
    )
