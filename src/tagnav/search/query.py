"""Query model and boundary validation.

A query is in disjunctive normal form: a list of clauses, each clause a list
of parts that must all hold on the same line. Queries usually arrive as JSON
(e.g. from a saved query block), so :func:`parse_query` validates the raw
structure and rejects anything malformed with an actionable error.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Union

from tagnav.core.exceptions import QueryValidationError

MAX_CLAUSES = 50
MAX_PARTS_PER_CLAUSE = 100
MAX_TAG_LENGTH = 200
MAX_ID_LENGTH = 100
MAX_QUERY_LENGTH = 10000

CURRENT_DOCUMENT = "current"

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_EXTERNAL_ID = re.compile(r"^[a-zA-Z0-9.%:/-]+$")


@dataclass(frozen=True)
class TagPart:
    """Lines carrying ``tag`` (or, negated, tagged lines without it)."""

    tag: str
    negated: bool = False


@dataclass(frozen=True)
class NotePart:
    """Lines linking to a document, by id or ``"current"``, optionally by title."""

    external_id: str
    title: str | None = None
    negated: bool = False


@dataclass(frozen=True)
class RangePart:
    """Lines carrying any tag between ``min_value`` and ``max_value`` inclusive."""

    min_value: str
    max_value: str


QueryPart = Union[TagPart, NotePart, RangePart]
Clause = list[QueryPart]
Query = list[Clause]


def _clean_string(value: Any, field: str, max_length: int) -> str:
    if value is None:
        return ""
    text = str(value)
    if len(text) > max_length:
        raise QueryValidationError(
            f"{field} exceeds maximum length of {max_length} characters", field, value
        )
    return _CONTROL_CHARS.sub("", text).strip()


def _parse_part(item: Any, field: str) -> QueryPart:
    if not isinstance(item, dict):
        raise QueryValidationError(f"{field} must be an object", field, item)

    negated = bool(item.get("negated", False))
    kinds = [k for k in ("tag", "externalId", "minValue") if k in item]
    if "maxValue" in item and "minValue" not in item:
        kinds.append("maxValue")
    if len(kinds) != 1:
        raise QueryValidationError(
            f"{field} must have exactly one of tag, externalId or minValue/maxValue",
            field,
            item,
        )

    if "tag" in item:
        tag = _clean_string(item["tag"], f"{field}.tag", MAX_TAG_LENGTH)
        if not tag:
            raise QueryValidationError(f"{field}.tag must not be empty", f"{field}.tag", item)
        return TagPart(tag=tag, negated=negated)

    if "externalId" in item:
        external_id = _clean_string(item["externalId"], f"{field}.externalId", MAX_ID_LENGTH)
        if not external_id or not _EXTERNAL_ID.match(external_id):
            raise QueryValidationError(
                f"{field}.externalId has an invalid format", f"{field}.externalId", item
            )
        title = None
        if item.get("title") is not None:
            title = _clean_string(item["title"], f"{field}.title", MAX_TAG_LENGTH) or None
        return NotePart(external_id=external_id, title=title, negated=negated)

    for bound in ("minValue", "maxValue"):
        if bound not in item:
            raise QueryValidationError(f"{field} range needs {bound}", f"{field}.{bound}", item)
    min_value = _clean_string(item["minValue"], f"{field}.minValue", MAX_TAG_LENGTH)
    max_value = _clean_string(item["maxValue"], f"{field}.maxValue", MAX_TAG_LENGTH)
    if negated:
        raise QueryValidationError(f"{field} range parts cannot be negated", field, item)
    return RangePart(min_value=min_value, max_value=max_value)


def parse_query(data: Any) -> Query:
    """Validate raw query data and build the query model.

    Args:
        data: A list of clauses (lists of part dicts using the keys ``tag``,
            ``externalId``, ``title``, ``minValue``, ``maxValue`` and
            ``negated``), or the same structure as a JSON string.

    Returns:
        The validated query.

    Raises:
        QueryValidationError: If the structure is malformed.

    Example:
        >>> parse_query('[[{"tag": "alpha"}, {"tag": "beta", "negated": true}]]')
        [[TagPart(tag='alpha', negated=False), TagPart(tag='beta', negated=True)]]
    """
    if isinstance(data, str):
        if len(data) > MAX_QUERY_LENGTH:
            raise QueryValidationError("query is too long", "query", None)
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise QueryValidationError(f"Invalid JSON in query: {e}", "query", data) from e

    if not isinstance(data, list):
        raise QueryValidationError("Query must be an array", "query", data)
    if len(data) > MAX_CLAUSES:
        raise QueryValidationError(
            f"Query cannot have more than {MAX_CLAUSES} groups", "query", len(data)
        )

    query: Query = []
    for clause_index, clause in enumerate(data):
        field = f"query[{clause_index}]"
        if not isinstance(clause, list):
            raise QueryValidationError(f"{field} must be an array", field, clause)
        if len(clause) > MAX_PARTS_PER_CLAUSE:
            raise QueryValidationError(
                f"{field} cannot have more than {MAX_PARTS_PER_CLAUSE} items", field, len(clause)
            )
        query.append(
            [_parse_part(item, f"{field}[{part_index}]") for part_index, item in enumerate(clause)]
        )
    return query
