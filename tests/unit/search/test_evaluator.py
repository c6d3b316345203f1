"""Tests for boolean query evaluation."""

import pytest

from tagnav.search.evaluator import QueryEvaluator
from tagnav.search.query import NotePart, RangePart, TagPart, parse_query
from tagnav.store.index import TagIndex


def tag(name, negated=False):
    return {"tag": name, "negated": negated}


class TestTagQueries:
    """Tests for AND, OR and NOT over tags."""

    def test_and_without_common_line(self, index: TagIndex, evaluator: QueryEvaluator, example_document):
        """Parts of a clause must hold on the same line."""
        index.index_document("d", example_document)

        assert evaluator.evaluate(parse_query([[tag("alpha"), tag("beta")]])) == {}

    def test_and_through_heading(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document(
            "d", "## Project #alpha\nsome note\n  nested\n### Sub\nother line #beta=1"
        )

        assert evaluator.evaluate(parse_query([[tag("alpha"), tag("beta")]])) == {"d": {4}}

    def test_or(self, index: TagIndex, evaluator: QueryEvaluator, example_document):
        index.index_document("d", example_document)

        assert evaluator.evaluate(parse_query([[tag("alpha")], [tag("beta=1")]])) == {"d": {1, 2, 4}}

    def test_not(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#a #b\n#a\n#b")
        index.index_document("e", "#a")

        result = evaluator.evaluate(parse_query([[tag("a"), tag("b", negated=True)]]))

        assert result == {"d": {1}, "e": {0}}

    def test_tag_is_normalized(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "note #Alpha")

        assert evaluator.evaluate([[TagPart("#ALPHA")]]) == {"d": {0}}

    def test_date_tag(self, index: TagIndex, evaluator: QueryEvaluator):
        """Date markers in queries resolve like markers in documents."""
        index.index_document("d", "due #2026-10-22\ndone #2026-10-20")

        assert evaluator.evaluate([[TagPart("#today+1")]]) == {"d": {0}}

    def test_nested_prefix(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#status/open\n#status/done\n#other")

        assert evaluator.evaluate([[TagPart("status")]]) == {"d": {0, 1}}

    def test_empty_clause_skipped(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#a")

        assert evaluator.evaluate([[], [TagPart("a")]]) == {"d": {0}}
        assert evaluator.evaluate([]) == {}

    def test_unknown_part(self, evaluator: QueryEvaluator):
        with pytest.raises(TypeError):
            evaluator.evaluate([["not a part"]])


class TestRangeQueries:
    """Tests for range parts."""

    def test_date_range(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "due #2026-10-20\nlater #2026-11-30\nother #2026-10-25")

        result = evaluator.evaluate([[RangePart("#today", "#today+7")]])

        assert result == {"d": {2}}

    def test_bounds_are_inclusive(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#apple\n#b\n#c\n#cat")

        assert evaluator.evaluate([[RangePart("apple", "c")]]) == {"d": {0, 1, 2}}

    def test_empty_range(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#m")

        assert evaluator.evaluate([[RangePart("x", "a")]]) == {}

    def test_range_combined_with_tag(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#p #2026-10-22\n#2026-10-23\n#p")

        result = evaluator.evaluate([[TagPart("p"), RangePart("#today", "#week+1")]])

        assert result == {"d": {0}}


class TestNoteQueries:
    """Tests for note reference parts."""

    @pytest.fixture
    def linked(self, index: TagIndex) -> TagIndex:
        index.index_document("d1", "link [x](:/target1)\n#a")
        index.index_document("d2", "see [[Target Doc]]")
        index.index_document("target1", "body", title="Target Doc")
        return index

    def test_by_id(self, linked, evaluator: QueryEvaluator):
        assert evaluator.evaluate([[NotePart("target1")]]) == {"d1": {0}}

    def test_by_title(self, linked, evaluator: QueryEvaluator):
        result = evaluator.evaluate([[NotePart("unknown", title="Target Doc")]])

        assert result == {"d1": {0}, "d2": {0}}

    def test_current_document(self, linked, evaluator: QueryEvaluator):
        query = [[NotePart("current")]]

        assert evaluator.evaluate(query, current_document_id="target1") == {"d1": {0}}
        assert evaluator.evaluate(query) == {}

    def test_negated(self, linked, evaluator: QueryEvaluator):
        """Negated references return tagged lines that do not link."""
        assert evaluator.evaluate([[NotePart("target1", negated=True)]]) == {"d1": {1}}


class TestRangeMonotonicity:
    """Widening a range never loses results."""

    def test_widening(self, index: TagIndex, evaluator: QueryEvaluator):
        index.index_document("d", "#2026-10-19\n#2026-10-21\n#2026-10-23\n#2026-11-02")
        narrow = evaluator.evaluate([[RangePart("#today", "#today+1")]])
        wide = evaluator.evaluate([[RangePart("#week", "#week+2")]])

        assert narrow == {"d": {1}}
        for doc_id, lines in narrow.items():
            assert lines <= wide[doc_id]
        assert wide == {"d": {0, 1, 2, 3}}
