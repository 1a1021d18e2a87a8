"""Document abstractions shared by the splitter and the pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Document(Protocol):
    """Paginated document the pipeline can split and forward to a generator."""

    @property
    def page_count(self) -> int:
        """Number of pages in the document."""
        ...

    def extract_range(self, start: int, end: int) -> "Document":
        """Return pages ``[start, end)`` as a new, standalone document."""
        ...

    def to_bytes(self) -> bytes:
        """Serialise the document to the bytes sent to the generator."""
        ...


@dataclass(frozen=True, slots=True)
class Chunk:
    """One sub-document together with its place in the split sequence."""

    document: Document
    position: int
    start_page: int
    end_page: int

    @property
    def page_count(self) -> int:
        return self.end_page - self.start_page

    @property
    def label(self) -> str:
        return f"chunk-{self.position:04d}.pdf"
