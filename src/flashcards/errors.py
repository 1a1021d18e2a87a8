"""Exceptions raised by the flashcard pipeline."""
from __future__ import annotations


class FlashcardError(RuntimeError):
    """Base class for errors that abort a flashcard request."""

    status_code = 500

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class InputMissingError(FlashcardError):
    """Raised when the request does not carry a document."""

    status_code = 400


class DocumentFormatError(FlashcardError):
    """Raised when the uploaded bytes are not a usable PDF document."""

    status_code = 400


class GeneratorCallError(FlashcardError):
    """Raised when the flashcard generation service fails or times out."""

    status_code = 502


class SchemaValidationError(FlashcardError):
    """Raised when the generation service returns an unexpected payload."""

    status_code = 502


class RequestCancelledError(FlashcardError):
    """Raised when the client goes away before all chunks were processed."""

    status_code = 499


class ConfigurationError(ValueError):
    """Raised at startup when the service settings are invalid."""
