"""Serialise flashcards to quoted comma-separated text."""
from __future__ import annotations

from typing import Iterable

from flashcards.generation.models import Record

HEADER_ROW = "question,answer"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def serialize(records: Iterable[Record], *, include_header: bool = False) -> str:
    """Render ``records`` as one ``"question","answer"`` line each.

    Every field is quoted and embedded quotes are doubled; commas, newlines
    and any other characters are written verbatim. Lines are joined with
    ``\\n`` and there is no trailing newline. No records and no header
    gives an empty string.
    """

    lines = [f"{_quote(record.question)},{_quote(record.answer)}" for record in records]
    if include_header:
        lines.insert(0, HEADER_ROW)
    return "\n".join(lines)
