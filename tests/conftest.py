"""Shared fixtures: in-memory PDFs and lightweight document/generator doubles."""
from __future__ import annotations

import io
import os
import tempfile
from typing import Callable, List, Optional

import pytest
from pypdf import PdfReader, PdfWriter

# Keep the test run offline and out of the working tree's log directory.
os.environ.setdefault("GENERATOR_PROVIDER", "mock")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="flashcards-logs-"))

from flashcards.generation import Record, RecordBatch, RecordGenerator  # noqa: E402

BASE_WIDTH = 100


def build_pdf(page_count: int) -> bytes:
    """Return a PDF whose page ``i`` is ``BASE_WIDTH + i`` points wide."""

    writer = PdfWriter()
    for index in range(page_count):
        writer.add_blank_page(width=BASE_WIDTH + index, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> List[int]:
    reader = PdfReader(io.BytesIO(data))
    return [round(float(page.mediabox.width)) for page in reader.pages]


class FakeDocument:
    """Page-count-only document used to exercise the splitter without PDFs."""

    def __init__(self, page_count: int, first_page: int = 0) -> None:
        self._page_count = page_count
        self.first_page = first_page
        self.extracted: list[tuple[int, int]] = []

    @property
    def page_count(self) -> int:
        return self._page_count

    def extract_range(self, start: int, end: int) -> "FakeDocument":
        self.extracted.append((start, end))
        return FakeDocument(end - start, first_page=self.first_page + start)

    def to_bytes(self) -> bytes:
        return f"pages {self.first_page}-{self.first_page + self._page_count}".encode()


class ScriptedGenerator(RecordGenerator):
    """Generator returning one record per call and optionally failing on a given call."""

    name = "scripted"

    def __init__(self, fail_on_call: Optional[int] = None, error: Optional[Exception] = None) -> None:
        self.fail_on_call = fail_on_call
        self.error = error
        self.labels: list[str] = []

    async def generate(self, document: bytes, *, label: Optional[str] = None) -> RecordBatch:
        call_index = len(self.labels)
        self.labels.append(label or "")
        if self.fail_on_call is not None and call_index == self.fail_on_call:
            raise self.error or RuntimeError("generator failed")
        return [Record(question=f"q{call_index}", answer=f"a{call_index}")]


@pytest.fixture
def pdf_factory() -> Callable[[int], bytes]:
    return build_pdf
