"""Inline tag scanner.

Scans a document line by line and records, for every tag, the lines it
applies to. A tag applies to the line it is written on and, when tag
inheritance is enabled, to:

- following lines indented deeper than the tagged line, until a line at the
  same or a shallower indentation;
- tagged lines below a heading that carries the tag, until a heading of the
  same or a more prominent level.

Blank lines, fenced code (optionally) and query/result blocks are skipped
without closing any open scope.
"""

from __future__ import annotations

from loguru import logger

from tagnav.core.config import PatternConfig
from tagnav.core.types import DocumentTags, TagOccurrence
from tagnav.metadata.dates import DateTagResolver
from tagnav.metadata.patterns import (
    BlockTracker,
    TagPatterns,
    compile_patterns,
    heading_level,
    indent_width,
)
from tagnav.metadata.scopes import ScopeTracker


class TagScanner:
    """Single-pass tag extraction with scope inheritance.

    The scanner holds configuration only; every :meth:`scan` call starts
    from fresh state.

    Example:
        >>> scanner = TagScanner(PatternConfig())
        >>> tags = scanner.scan("note #alpha\\n  child line")
        >>> sorted(tags["alpha"].lines)
        [0, 1]
    """

    def __init__(
        self,
        config: PatternConfig | None = None,
        patterns: TagPatterns | None = None,
        date_resolver: DateTagResolver | None = None,
    ):
        self.config = config or PatternConfig()
        self.patterns = patterns or compile_patterns(self.config)
        self.date_resolver = date_resolver or DateTagResolver()

    def scan(self, text: str) -> DocumentTags:
        """Extract tags and their applicable lines from ``text``.

        Args:
            text: Raw document text.

        Returns:
            Mapping of normalized tag to its occurrence.
        """
        inherit = self.config.inherit_tags
        blocks = BlockTracker(self.config.ignore_code_blocks)
        indent_scopes = ScopeTracker()
        heading_scopes = ScopeTracker()
        tags: DocumentTags = {}

        for line_number, line in enumerate(text.lower().split("\n")):
            if blocks.skip(line):
                continue

            indent = indent_width(line)
            for tag, level in list(indent_scopes.active()):
                if indent <= level:
                    indent_scopes.close(tag)
                elif inherit:
                    tags[tag].add(line_number, direct=False)

            level = heading_level(line)
            if level and inherit:
                heading_scopes.close_where(lambda open_level: open_level >= level)

            # A tag counts once per line, however often it is repeated there
            seen: set[str] = set()
            for raw in self.patterns.find_tags(line):
                normalized = self.patterns.normalize(self.date_resolver.resolve(raw))
                if not normalized:
                    continue
                for tag in self.patterns.expand(normalized):
                    if tag in seen:
                        continue
                    seen.add(tag)
                    occurrence = tags.setdefault(tag, TagOccurrence())
                    indent_scopes.open(tag, indent)
                    if inherit and level:
                        heading_scopes.open_prominent(tag, level)
                    occurrence.add(line_number)

            if seen:
                for tag, _ in heading_scopes.active():
                    tags[tag].add(line_number, direct=False)

        logger.debug(f"Scanned {len(tags)} tags")
        return tags
