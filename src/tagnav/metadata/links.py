"""Note link extraction.

Lines that link to another document are indexed so a query can ask for
"lines referencing document X". Two link forms are recognised:

- ``[label](:/<id>)`` internal links, keyed ``id:<id>``
- ``[[Title]]`` wiki links, keyed ``title:<title>``
"""

import re

from tagnav.core.types import DocumentLinks
from tagnav.metadata.patterns import BlockTracker

_ID_LINK = re.compile(r"\[[^\]]*\]\(:/([A-Za-z0-9]+)(?:#[^)]*)?\)")
_WIKI_LINK = re.compile(r"\[\[([^\]|#]+)(?:[#|][^\]]*)?\]\]")


def id_key(doc_id: str) -> str:
    return f"id:{doc_id.lower()}"


def title_key(title: str) -> str:
    return f"title:{title.strip().lower()}"


def scan_links(text: str, ignore_code_blocks: bool = True) -> DocumentLinks:
    """Map each link target in ``text`` to the lines that reference it."""
    blocks = BlockTracker(ignore_code_blocks)
    links: DocumentLinks = {}
    for line_number, line in enumerate(text.split("\n")):
        if blocks.skip(line):
            continue
        for match in _ID_LINK.finditer(line):
            links.setdefault(id_key(match.group(1)), set()).add(line_number)
        for match in _WIKI_LINK.finditer(line):
            links.setdefault(title_key(match.group(1)), set()).add(line_number)
    return links
