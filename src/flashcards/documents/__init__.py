"""Document loading and splitting."""
from __future__ import annotations

from .format_detection import DocumentFormatDetector
from .models import Chunk, Document
from .pdf import PdfDocument
from .splitter import page_ranges, split

__all__ = ["Chunk", "Document", "DocumentFormatDetector", "PdfDocument", "page_ranges", "split"]
