"""Mock flashcard generator that answers deterministically without network access."""
from __future__ import annotations

from typing import Optional

from flashcards.documents.pdf import PdfDocument

from .base import RecordGenerator
from .models import Record, RecordBatch


class MockFlashcardGenerator(RecordGenerator):
    """Return one predictable flashcard per page of the given PDF."""

    name = "mock"

    async def generate(self, document: bytes, *, label: Optional[str] = None) -> RecordBatch:
        label = label or "document.pdf"
        pages = PdfDocument.from_bytes(document).page_count
        return [
            Record(
                question=f"MOCK_QUESTION: {label} page {page}",
                answer=f"MOCK_ANSWER: {label} page {page}",
            )
            for page in range(1, pages + 1)
        ]
