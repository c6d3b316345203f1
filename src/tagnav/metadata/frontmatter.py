"""Front matter parsing and front-matter tags.

A leading ``---`` block is parsed as YAML. When PyYAML rejects it, a
permissive line parser takes over and records each line it cannot read as a
diagnostic instead of discarding the whole block. Every key in the block
becomes a tag that applies to all lines of the block.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import yaml
from loguru import logger

from tagnav.core.config import PatternConfig
from tagnav.core.types import DocumentTags, TagOccurrence
from tagnav.metadata.patterns import FRONTMATTER_TAG, TagPatterns, compile_patterns

# Maximum number of lines searched for the closing delimiter
FRONTMATTER_LOOKAHEAD = 200

_OPEN = "---"
_CLOSE = ("---", "...")
_KEY_VALUE = re.compile(r"^([^:#][^:]*?)\s*:(?:\s+(.*))?$")
_INT = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?$")


@dataclass
class FrontmatterResult:
    """Result from parsing a front matter block.

    Attributes:
        data: Parsed key/value pairs.
        start_line: Line of the opening delimiter (always 0).
        end_line: Last line of the block, inclusive.
        parser: ``"yaml"`` or ``"fallback"``.
        errors: Non-fatal diagnostics from the fallback parser.
    """

    data: dict[str, Any]
    start_line: int
    end_line: int
    parser: str = "yaml"
    errors: list[str] = field(default_factory=list)

    @property
    def lines(self) -> set[int]:
        return set(range(self.start_line, self.end_line + 1))


def find_frontmatter(lines: list[str]) -> tuple[int, int, bool] | None:
    """Locate the front matter block.

    An unclosed block only counts when it holds at least one ``key: value``
    line, so a leading thematic break followed by prose is not front matter.

    Returns:
        ``(start, end, closed)`` with ``end`` inclusive and ``closed`` telling
        whether ``end`` is a closing delimiter, or None without a block.
    """
    if not lines or lines[0].rstrip() != _OPEN:
        return None

    limit = min(len(lines), FRONTMATTER_LOOKAHEAD)
    has_key = False
    for i in range(1, limit):
        text = lines[i].rstrip()
        if text in _CLOSE:
            return 0, i, True
        if not text.strip():
            return (0, i - 1, False) if has_key else None
        has_key = has_key or bool(_KEY_VALUE.match(text.strip()))
    return (0, limit - 1, False) if has_key else None


def parse_frontmatter(text: str) -> FrontmatterResult | None:
    """Parse the front matter block at the start of ``text``.

    Example:
        >>> result = parse_frontmatter("---\\ntitle: Doc\\ntags: [a, b]\\n---\\nbody")
        >>> result.data
        {'title': 'Doc', 'tags': ['a', 'b']}
        >>> result.end_line
        3

    Returns:
        FrontmatterResult, or None when the document has no front matter.
    """
    lines = text.split("\n")
    found = find_frontmatter(lines)
    if found is None:
        return None

    start, end, closed = found
    body = lines[start + 1 : end if closed else end + 1]

    try:
        data = yaml.safe_load("\n".join(body))
    except yaml.YAMLError as e:
        logger.debug(f"Front matter is not valid YAML, using fallback parser: {e}")
    else:
        if data is None:
            return FrontmatterResult(data={}, start_line=start, end_line=end)
        if isinstance(data, dict):
            return FrontmatterResult(data=data, start_line=start, end_line=end)

    data, errors = _parse_lines(body, first_line=start + 1)
    if errors:
        logger.warning(f"Front matter parsed with {len(errors)} problem(s): {errors[0]}")
    return FrontmatterResult(
        data=data, start_line=start, end_line=end, parser="fallback", errors=errors
    )


def _parse_scalar(value: str) -> Any:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered in ("null", "~", ""):
        return None
    if _INT.match(value):
        return int(value)
    if _FLOAT.match(value):
        return float(value)
    return value


def _parse_inline_list(value: str) -> list[Any]:
    inner = value.strip()[1:-1]
    return [_parse_scalar(item) for item in inner.split(",") if item.strip()]


def _parse_lines(lines: list[str], first_line: int) -> tuple[dict[str, Any], list[str]]:
    """Permissive line parser for the front matter subset tagnav uses."""
    data: dict[str, Any] = {}
    errors: list[str] = []
    list_key: str | None = None

    for offset, raw in enumerate(lines):
        line_number = first_line + offset
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if stripped.startswith("- ") or stripped == "-":
            if list_key is None:
                errors.append(f"line {line_number}: list item without a key")
                continue
            if not isinstance(data.get(list_key), list):
                data[list_key] = []
            data[list_key].append(_parse_scalar(stripped[1:]))
            continue

        match = _KEY_VALUE.match(stripped)
        if not match:
            errors.append(f"line {line_number}: cannot parse {stripped!r}")
            list_key = None
            continue

        key, value = match.group(1).strip(), (match.group(2) or "").strip()
        if not value:
            data[key] = None
            list_key = key
        elif value.startswith("[") and value.endswith("]"):
            data[key] = _parse_inline_list(value)
            list_key = None
        elif value.startswith("["):
            errors.append(f"line {line_number}: unterminated list for {key!r}")
            data[key] = _parse_scalar(value)
            list_key = None
        else:
            data[key] = _parse_scalar(value)
            list_key = None

    return data, errors


def _value_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def extract_tags_from_field(value: Any) -> list[str]:
    """Extract tag strings from a ``tags`` field value.

    Handles lists, comma separated strings and single values.
    """
    if value is None:
        return []
    if isinstance(value, list):
        items = [_value_text(item).strip() for item in value if item is not None]
        return [item for item in items if item]
    if isinstance(value, str):
        if "," in value:
            return [t.strip() for t in value.split(",") if t.strip()]
        return [value.strip()] if value.strip() else []
    return [_value_text(value)]


class FrontmatterTagExtractor:
    """Turn a document's front matter into tags anchored to the block.

    - items of ``tags``/``tag`` become tags directly
    - every other key becomes ``key<delim>value`` per value; nested mappings
      join keys with ``/``
    - the ``frontmatter`` tag marks that the document has a block
    """

    def __init__(self, config: PatternConfig | None = None, patterns: TagPatterns | None = None):
        self.config = config or PatternConfig()
        self.patterns = patterns or compile_patterns(self.config)

    def extract(self, text: str) -> DocumentTags:
        if self.config.ignore_frontmatter:
            return {}
        result = parse_frontmatter(text)
        if result is None:
            return {}

        raw_tags = [FRONTMATTER_TAG]
        for key, value in result.data.items():
            raw_tags.extend(self._key_tags(self._clean(str(key)), value))

        lines = result.lines
        tags: DocumentTags = {}
        for raw in raw_tags:
            for tag in self.patterns.expand(raw):
                if tag and tag not in tags:
                    tags[tag] = TagOccurrence(lines=set(lines), count=1)
        return tags

    def _clean(self, text: str) -> str:
        return text.strip().lower().replace(" ", self.config.space_replace)

    def _key_tags(self, key: str, value: Any) -> list[str]:
        if not key:
            return []
        if key in ("tags", "tag"):
            return [self.patterns.normalize(self._clean(item)) for item in extract_tags_from_field(value)]
        if isinstance(value, dict):
            nested = []
            for child, child_value in value.items():
                nested.extend(self._key_tags(f"{key}/{self._clean(str(child))}", child_value))
            return nested or [key]

        values = value if isinstance(value, list) else [value]
        delim = self.config.value_delim
        tags = [
            f"{key}{delim}{self._clean(_value_text(item))}"
            for item in values
            if item is not None and _value_text(item).strip()
        ]
        return tags or [key]
