"""Flashcard generation backends."""
from __future__ import annotations

from flashcards.config import Settings
from flashcards.errors import ConfigurationError

from .base import RecordGenerator
from .mock import MockFlashcardGenerator
from .models import Record, RecordBatch, parse_flashcard_payload
from .openai_generator import OpenAIFlashcardGenerator


def create_generator(settings: Settings) -> RecordGenerator:
    """Instantiate the backend named by ``settings.generator_provider``."""

    if settings.generator_provider == "mock":
        return MockFlashcardGenerator()
    if settings.generator_provider == "openai":
        return OpenAIFlashcardGenerator(
            api_key=settings.openai_api_key,
            model=settings.gpt_model,
            timeout=settings.generator_timeout_seconds,
        )
    raise ConfigurationError(f"Unknown generator provider: {settings.generator_provider}")


__all__ = [
    "MockFlashcardGenerator",
    "OpenAIFlashcardGenerator",
    "Record",
    "RecordBatch",
    "RecordGenerator",
    "create_generator",
    "parse_flashcard_payload",
]
