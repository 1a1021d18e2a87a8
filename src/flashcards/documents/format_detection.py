"""Checks that an upload looks like a PDF before it is parsed."""
from __future__ import annotations

import logging
from typing import Optional

from flashcards.errors import DocumentFormatError

LOGGER = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
PDF_MIME_TYPES = frozenset({"application/pdf", "application/x-pdf", "application/acrobat", "text/pdf"})


class DocumentFormatDetector:
    """Decide whether an uploaded file is a PDF.

    Clients label PDFs inconsistently, so the declared MIME type is only a
    hint. The ``%PDF-`` header must appear within the first kilobyte, which
    is where PDF readers look for it; the parser has the final word.
    """

    @classmethod
    def is_pdf(cls, data: bytes) -> bool:
        return PDF_MAGIC in data[:1024]

    @classmethod
    def ensure_pdf(cls, data: bytes, file_name: Optional[str] = None, mime_type: Optional[str] = None) -> None:
        """Raise :class:`DocumentFormatError` unless the upload is a PDF."""

        mime = (mime_type or "").split(";", 1)[0].strip().lower()
        if not cls.is_pdf(data):
            label = file_name or "upload"
            raise DocumentFormatError(f"{label} is not a PDF document")
        if mime and mime not in PDF_MIME_TYPES:
            LOGGER.info("Upload %s declared as %s but carries a PDF header", file_name or "upload", mime)
