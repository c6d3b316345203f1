"""Filesystem document source.

Reads markdown files below a directory. The document id is the file's path
relative to the base directory (posix separators); the title is the first
markdown heading, or the file stem.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

from loguru import logger

from tagnav.core.exceptions import SourceFetchError, SourceListError
from tagnav.sources.base import FailedDocument, SourceDocument, SourcePage

_TITLE_PATTERN = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)


def _title_for(path: Path, text: str) -> str:
    match = _TITLE_PATTERN.search(text)
    return match.group(1) if match else path.stem


class FileSystemSource:
    """Document source for a local directory.

    Example:
        source = FileSystemSource(Path("~/notes").expanduser())
        for page in source.fetch_all_documents():
            for document in page:
                if isinstance(document, SourceDocument):
                    print(document.id, document.title)
    """

    def __init__(
        self,
        base_path: Path | str,
        glob_patterns: list[str] | None = None,
        page_size: int = 50,
        encoding: str = "utf-8",
    ):
        self._base_path = Path(base_path).resolve()
        self.glob_patterns = glob_patterns or ["**/*.md"]
        self.page_size = max(page_size, 1)
        self.encoding = encoding

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _paths(self) -> list[Path]:
        if not self._base_path.is_dir():
            raise SourceListError(str(self._base_path), "not a directory")
        found: set[Path] = set()
        for pattern in self.glob_patterns:
            found.update(p for p in self._base_path.glob(pattern) if p.is_file())
        return sorted(found)

    def _read(self, path: Path) -> SourceDocument:
        doc_id = path.relative_to(self._base_path).as_posix()
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceFetchError(doc_id, str(e)) from e
        metadata = {"markup_language": "html" if path.suffix.lower() in (".html", ".htm") else "markdown"}
        return SourceDocument(id=doc_id, text=text, title=_title_for(path, text), metadata=metadata)

    def fetch_document(self, doc_id: str) -> SourceDocument:
        path = (self._base_path / doc_id).resolve()
        if not path.is_relative_to(self._base_path) or not path.is_file():
            raise SourceFetchError(doc_id, "no such document")
        return self._read(path)

    def fetch_all_documents(self) -> Iterator[SourcePage]:
        paths = self._paths()
        logger.debug(f"Found {len(paths)} files under {self._base_path}")
        for start in range(0, len(paths), self.page_size):
            page: SourcePage = []
            for path in paths[start : start + self.page_size]:
                try:
                    page.append(self._read(path))
                except SourceFetchError as e:
                    page.append(FailedDocument(e.doc_id, e.reason))
            yield page
