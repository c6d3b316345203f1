"""Shared helpers for CLI commands."""

from loguru import logger

from ...core.config import Config
from ...services import TagNavigator
from ...sources import FileSystemSource


def build_navigator(path: str, config: Config) -> TagNavigator:
    """Index the markdown files under ``path``.

    Args:
        path: Directory to index.
        config: Application configuration.

    Returns:
        Navigator with a populated index.
    """
    navigator = TagNavigator(config)
    source = FileSystemSource(
        path,
        glob_patterns=config.index.glob_patterns,
        page_size=config.index.page_size,
    )
    result = navigator.index_source(source)
    for doc_id, error in result.errors:
        logger.warning(f"Skipped {doc_id}: {error}")
    return navigator
