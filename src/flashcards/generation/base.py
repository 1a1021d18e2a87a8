"""Interface implemented by flashcard generation backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .models import RecordBatch

__all__ = ["RecordGenerator"]


class RecordGenerator(ABC):
    """Turns the bytes of one PDF into an ordered batch of flashcards.

    Implementations raise :class:`~flashcards.errors.GeneratorCallError` when
    the backend fails and :class:`~flashcards.errors.SchemaValidationError`
    when it answers with something other than flashcards.
    """

    name: str = "generator"

    @abstractmethod
    async def generate(self, document: bytes, *, label: Optional[str] = None) -> RecordBatch:
        """Generate flashcards for ``document``."""

    def readiness_error(self) -> Optional[str]:
        """Return a reason the backend cannot serve requests, or ``None``."""

        return None
