"""Boolean query evaluation over the tag index.

Parts within a clause are intersected line by line, clauses are unioned.
Negation is resolved by the index lookup itself, so the evaluator only
combines positive result sets.
"""

from __future__ import annotations

from loguru import logger

from tagnav.core.types import ResultSet, SearchField
from tagnav.metadata.dates import DateTagResolver
from tagnav.metadata.patterns import TagPatterns
from tagnav.search.query import CURRENT_DOCUMENT, NotePart, Query, QueryPart, RangePart, TagPart
from tagnav.search.results import intersect, union
from tagnav.store.index import IndexSnapshot, TagIndex


class QueryEvaluator:
    """Evaluate DNF queries against a :class:`TagIndex`.

    Example:
        evaluator = QueryEvaluator(index)
        result = evaluator.evaluate([[TagPart("alpha"), TagPart("beta")]])
        # {"note-1": {4}}
    """

    def __init__(
        self,
        index: TagIndex,
        date_resolver: DateTagResolver | None = None,
        patterns: TagPatterns | None = None,
    ):
        self.index = index
        self.date_resolver = date_resolver or index.scanner.date_resolver
        self.patterns = patterns or index.scanner.patterns

    def evaluate(self, query: Query, current_document_id: str | None = None) -> ResultSet:
        """Evaluate ``query`` against one snapshot of the index.

        Args:
            query: Validated query (see :func:`~tagnav.search.query.parse_query`).
            current_document_id: Document the caller has open; resolves
                note parts referencing ``"current"``.

        Returns:
            Document id -> matching line numbers.
        """
        snapshot = self.index.snapshot()
        result: ResultSet = {}
        for clause in query:
            if not clause:
                continue
            clause_result = self._evaluate_part(snapshot, clause[0], current_document_id)
            for part in clause[1:]:
                if not clause_result:
                    break
                clause_result = intersect(
                    clause_result, self._evaluate_part(snapshot, part, current_document_id)
                )
            result = union(result, clause_result)

        logger.debug(
            f"Query with {len(query)} clause(s) matched "
            f"{sum(len(lines) for lines in result.values())} line(s) in {len(result)} document(s)"
        )
        return result

    def _evaluate_part(
        self, snapshot: IndexSnapshot, part: QueryPart, current_document_id: str | None
    ) -> ResultSet:
        if isinstance(part, TagPart):
            return snapshot.search_by(SearchField.TAG, self._normalize(part.tag), part.negated)
        if isinstance(part, NotePart):
            return self._evaluate_note(snapshot, part, current_document_id)
        if isinstance(part, RangePart):
            return self._evaluate_range(snapshot, part)
        raise TypeError(f"Unsupported query part: {part!r}")

    def _normalize(self, tag: str) -> str:
        return self.patterns.normalize(self.date_resolver.resolve(tag.strip()))

    def _evaluate_note(
        self, snapshot: IndexSnapshot, part: NotePart, current_document_id: str | None
    ) -> ResultSet:
        doc_id = part.external_id
        if doc_id.lower() == CURRENT_DOCUMENT:
            if current_document_id is None:
                logger.debug("Query references the current document but none is open")
            doc_id = current_document_id or ""

        positive = snapshot.search_by(SearchField.DOCUMENT_ID, doc_id) if doc_id else {}
        if part.title:
            positive = union(positive, snapshot.search_by(SearchField.DOCUMENT_TITLE, part.title))
        return snapshot.complement(positive) if part.negated else positive

    def _evaluate_range(self, snapshot: IndexSnapshot, part: RangePart) -> ResultSet:
        low = self._normalize(part.min_value)
        high = self._normalize(part.max_value)
        result: ResultSet = {}
        for tag in snapshot.all_tags():
            if tag < low:
                continue
            if tag > high:
                break
            result = union(result, snapshot.search_by(SearchField.TAG, tag))
        return result
