"""Query model, evaluation and result materialization."""

from .evaluator import QueryEvaluator
from .query import (
    CURRENT_DOCUMENT,
    NotePart,
    Query,
    QueryPart,
    RangePart,
    TagPart,
    parse_query,
)
from .results import group_runs, intersect, materialize, text_blocks, union

__all__ = [
    "QueryEvaluator",
    "CURRENT_DOCUMENT",
    "NotePart",
    "Query",
    "QueryPart",
    "RangePart",
    "TagPart",
    "parse_query",
    "group_runs",
    "intersect",
    "materialize",
    "text_blocks",
    "union",
]
