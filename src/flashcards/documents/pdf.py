"""PDF implementation of :class:`~flashcards.documents.models.Document` backed by pypdf."""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader, PdfWriter

from flashcards.errors import DocumentFormatError

logger = logging.getLogger(__name__)


class PdfDocument:
    """Immutable PDF payload with page-range extraction.

    The raw bytes are kept verbatim so a document that is never split is
    forwarded exactly as it was uploaded.
    """

    __slots__ = ("_data", "_reader")

    def __init__(self, data: bytes, reader: PdfReader) -> None:
        self._data = data
        self._reader = reader

    @classmethod
    def from_bytes(cls, data: bytes) -> "PdfDocument":
        """Parse ``data`` eagerly, raising :class:`DocumentFormatError` if it is not a PDF."""

        if not data:
            raise DocumentFormatError("Uploaded document is empty")
        try:
            reader = PdfReader(io.BytesIO(data))
            if reader.is_encrypted and not reader.decrypt(""):
                raise DocumentFormatError("PDF is encrypted and requires a password")
            # Force the page tree to load so broken documents fail here.
            len(reader.pages)
        except DocumentFormatError:
            raise
        except Exception as exc:  # pypdf raises assorted errors on malformed input
            raise DocumentFormatError(f"Unable to read PDF: {exc}", cause=exc) from exc
        return cls(bytes(data), reader)

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def extract_range(self, start: int, end: int) -> "PdfDocument":
        if not 0 <= start < end <= self.page_count:
            raise DocumentFormatError(
                f"Invalid page range [{start}, {end}) for a {self.page_count}-page document"
            )
        writer = PdfWriter()
        buffer = io.BytesIO()
        try:
            for index in range(start, end):
                writer.add_page(self._reader.pages[index])
            writer.write(buffer)
        except Exception as exc:
            raise DocumentFormatError(
                f"Failed to extract pages {start + 1}-{end}: {exc}", cause=exc
            ) from exc
        logger.debug("Extracted pages %s-%s into %s bytes", start + 1, end, buffer.tell())
        return PdfDocument.from_bytes(buffer.getvalue())

    def to_bytes(self) -> bytes:
        return self._data

    def __repr__(self) -> str:
        return f"PdfDocument(pages={self.page_count}, size={len(self._data)})"
