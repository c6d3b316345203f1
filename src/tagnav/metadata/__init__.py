"""Tag extraction: inline tags, front matter, date tags and links.

The scanners turn one document's text into a mapping of tag to the lines it
applies to. They hold configuration only, so a scanner can be shared by
worker threads.
"""

from tagnav.metadata.dates import DateTagResolver
from tagnav.metadata.frontmatter import (
    FrontmatterResult,
    FrontmatterTagExtractor,
    extract_tags_from_field,
    find_frontmatter,
    parse_frontmatter,
)
from tagnav.metadata.links import scan_links
from tagnav.metadata.patterns import (
    DEFAULT_TAG_REGEX,
    FRONTMATTER_TAG,
    QUERY_END,
    QUERY_START,
    RESULTS_END,
    RESULTS_START,
    TagPatterns,
    compile_patterns,
    expand_tag,
)
from tagnav.metadata.scanner import TagScanner
from tagnav.metadata.scopes import INACTIVE, ActiveAt, ScopeTracker

__all__ = [
    "DateTagResolver",
    "FrontmatterResult",
    "FrontmatterTagExtractor",
    "extract_tags_from_field",
    "find_frontmatter",
    "parse_frontmatter",
    "scan_links",
    "DEFAULT_TAG_REGEX",
    "FRONTMATTER_TAG",
    "QUERY_START",
    "QUERY_END",
    "RESULTS_START",
    "RESULTS_END",
    "TagPatterns",
    "compile_patterns",
    "expand_tag",
    "TagScanner",
    "INACTIVE",
    "ActiveAt",
    "ScopeTracker",
]
