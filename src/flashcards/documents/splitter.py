"""Split large documents into bounded page ranges."""
from __future__ import annotations

import logging
from typing import List

from flashcards.config import DEFAULT_CHUNK_SIZE_PAGES, DEFAULT_THRESHOLD_PAGES
from flashcards.errors import ConfigurationError, DocumentFormatError

from .models import Chunk, Document

LOGGER = logging.getLogger(__name__)


def page_ranges(page_count: int, chunk_size_pages: int) -> List[tuple[int, int]]:
    """Return consecutive ``[start, end)`` ranges of at most ``chunk_size_pages`` pages."""

    if chunk_size_pages < 1:
        raise ConfigurationError(f"chunk_size_pages must be at least 1 (got {chunk_size_pages})")
    return [
        (start, min(start + chunk_size_pages, page_count))
        for start in range(0, page_count, chunk_size_pages)
    ]


def split(
    doc: Document,
    threshold_pages: int = DEFAULT_THRESHOLD_PAGES,
    chunk_size_pages: int = DEFAULT_CHUNK_SIZE_PAGES,
) -> List[Chunk]:
    """Split ``doc`` into chunks when it has more than ``threshold_pages`` pages.

    Documents at or below the threshold come back as a single chunk holding
    the original object, so their bytes reach the generator untouched.
    Larger documents are cut into ``chunk_size_pages`` page pieces; the last
    piece holds whatever remains.
    """

    if chunk_size_pages < 1:
        raise ConfigurationError(f"chunk_size_pages must be at least 1 (got {chunk_size_pages})")
    if threshold_pages < 0:
        raise ConfigurationError(f"threshold_pages must not be negative (got {threshold_pages})")

    total_pages = doc.page_count
    if total_pages == 0:
        raise DocumentFormatError("Document has no pages")

    if total_pages <= threshold_pages:
        LOGGER.info("Document has %s pages; processing without splitting", total_pages)
        return [Chunk(document=doc, position=0, start_page=0, end_page=total_pages)]

    chunks = [
        Chunk(document=doc.extract_range(start, end), position=position, start_page=start, end_page=end)
        for position, (start, end) in enumerate(page_ranges(total_pages, chunk_size_pages))
    ]
    LOGGER.info(
        "Split %s-page document into %s chunks of up to %s pages",
        total_pages,
        len(chunks),
        chunk_size_pages,
    )
    return chunks
