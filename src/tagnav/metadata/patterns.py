"""Compiled tag patterns and tag-string helpers.

Turns a :class:`~tagnav.core.config.PatternConfig` into compiled regular
expressions. A broken user-supplied pattern never stops indexing: the
built-in pattern is used instead and a warning is logged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

from tagnav.core.config import PatternConfig

# A '#' at line start or after whitespace / '(' that ends in a word character.
# Markdown headings ("# Title", "## Title") never match.
DEFAULT_TAG_REGEX = r"(?<![^\s(])#[^\s#]*\w"

QUERY_START = "<!-- itags-query-start -->"
QUERY_END = "<!-- itags-query-end -->"
RESULTS_START = "<!-- itags-results-start -->"
RESULTS_END = "<!-- itags-results-end -->"

FRONTMATTER_TAG = "frontmatter"

_FENCE = "```"
_HEADING_PATTERN = re.compile(r"^(#+)(?:\s|$)")


@dataclass(frozen=True)
class TagPatterns:
    """Compiled matching rules shared by the scanners.

    Attributes:
        tag: Pattern whose matches are tag candidates.
        exclude: Optional pattern; matches it finds are dropped.
        prefix: Tag prefix stripped during normalization.
        value_delim: Separator between a tag key and its value.
        nested: Whether ``a/b`` also yields ``a``.
    """

    tag: re.Pattern[str]
    exclude: re.Pattern[str] | None
    prefix: str = "#"
    value_delim: str = "="
    nested: bool = True

    def find_tags(self, line: str) -> list[str]:
        """Return raw tag matches in ``line`` that are not excluded."""
        found = []
        for match in self.tag.finditer(line):
            raw = match.group(0)
            if not raw:
                continue
            if self.exclude is not None and self.exclude.search(raw):
                continue
            found.append(raw)
        return found

    def normalize(self, raw: str) -> str:
        """Lower-case a tag and strip its prefix."""
        tag = raw.strip().lower()
        if self.prefix and tag.startswith(self.prefix):
            tag = tag[len(self.prefix):]
        return tag

    def expand(self, tag: str) -> list[str]:
        """Expand a normalized tag into its prefix chain."""
        return expand_tag(tag, self.value_delim, self.nested)


def expand_tag(tag: str, value_delim: str, nested: bool) -> list[str]:
    """Expand ``tag`` into every prefix it implies, most general first.

    Example:
        >>> expand_tag("a/b=1", "=", True)
        ['a', 'a/b', 'a/b=1']
        >>> expand_tag("a/b=1", "=", False)
        ['a/b=1']
    """
    if not nested:
        return [tag]

    key = tag
    if value_delim and value_delim in tag:
        key = tag.split(value_delim, 1)[0]

    chain: list[str] = []
    current = ""
    for segment in key.split("/"):
        current = f"{current}/{segment}" if current else segment
        if current and current not in chain:
            chain.append(current)
    if tag not in chain:
        chain.append(tag)
    return chain


def compile_patterns(config: PatternConfig) -> TagPatterns:
    """Compile the configured tag and exclude patterns.

    Invalid patterns fall back to the default tag pattern / no exclusion.

    Args:
        config: Pattern configuration.

    Returns:
        TagPatterns ready for scanning.
    """
    tag_pattern = re.compile(DEFAULT_TAG_REGEX)
    if config.tag_regex:
        try:
            tag_pattern = re.compile(config.tag_regex)
        except re.error as e:
            logger.warning(f"Invalid tag regex {config.tag_regex!r} ({e}); using default")

    exclude_pattern = None
    if config.exclude_regex:
        try:
            exclude_pattern = re.compile(config.exclude_regex)
        except re.error as e:
            logger.warning(f"Invalid exclude regex {config.exclude_regex!r} ({e}); ignoring")

    return TagPatterns(
        tag=tag_pattern,
        exclude=exclude_pattern,
        prefix=config.tag_prefix,
        value_delim=config.value_delim,
        nested=config.nested_tags,
    )


def is_fence(line: str) -> bool:
    return line.strip().startswith(_FENCE)


def heading_level(line: str) -> int:
    """Number of leading '#' of a markdown heading, 0 for other lines."""
    match = _HEADING_PATTERN.match(line)
    return len(match.group(1)) if match else 0


def indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


class BlockTracker:
    """Tracks code-fence and sentinel-block state across lines.

    ``skip(line)`` consumes one line and reports whether its content must be
    ignored by a scanner.
    """

    def __init__(self, ignore_code_blocks: bool = True):
        self.ignore_code_blocks = ignore_code_blocks
        self.in_code = False
        self.in_query = False
        self.in_results = False

    def skip(self, line: str) -> bool:
        stripped = line.strip()
        if is_fence(line):
            self.in_code = not self.in_code
            return self.ignore_code_blocks
        if stripped == QUERY_START:
            self.in_query = True
            return True
        if stripped == QUERY_END:
            self.in_query = False
            return True
        if stripped == RESULTS_START:
            self.in_results = True
            return True
        if stripped == RESULTS_END:
            self.in_results = False
            return True
        if self.in_code and self.ignore_code_blocks:
            return True
        return self.in_query or self.in_results or not stripped
