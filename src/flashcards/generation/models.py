"""Flashcard records and validation of generator responses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from flashcards.errors import SchemaValidationError

RESPONSE_KEY = "flashcard"


@dataclass(frozen=True, slots=True)
class Record:
    """A single question/answer pair."""

    question: str
    answer: str


RecordBatch = List[Record]


class FlashcardModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    question: StrictStr
    answer: StrictStr


class FlashcardPayload(BaseModel):
    """Expected response body: ``{"flashcard": [{"question": ..., "answer": ...}]}``."""

    model_config = ConfigDict(extra="forbid")

    flashcard: List[FlashcardModel]


# JSON schema handed to the model so it answers in the shape validated above.
RESPONSE_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": [RESPONSE_KEY],
    "properties": {
        RESPONSE_KEY: {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["question", "answer"],
                "properties": {
                    "question": {"type": "string"},
                    "answer": {"type": "string"},
                },
            },
        }
    },
}


def _summarise(error: ValidationError) -> str:
    problems = []
    for item in error.errors()[:3]:
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        problems.append(f"{location}: {item.get('msg')}")
    if error.error_count() > 3:
        problems.append(f"... {error.error_count() - 3} more")
    return "; ".join(problems)


def parse_flashcard_payload(payload: Union[str, bytes, Mapping[str, Any]]) -> RecordBatch:
    """Validate a generator response and return its records in order.

    Raises :class:`SchemaValidationError` for invalid JSON, missing or extra
    keys and non-string fields. Nothing is coerced.
    """

    try:
        if isinstance(payload, (str, bytes)):
            parsed = FlashcardPayload.model_validate_json(payload)
        else:
            parsed = FlashcardPayload.model_validate(payload)
    except ValidationError as exc:
        raise SchemaValidationError(
            f"Generator response does not match the flashcard schema: {_summarise(exc)}",
            cause=exc,
        ) from exc
    return [Record(question=item.question, answer=item.answer) for item in parsed.flashcard]
