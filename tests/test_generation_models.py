from __future__ import annotations

import json

import pytest

from flashcards.errors import SchemaValidationError
from flashcards.generation import Record, parse_flashcard_payload


def test_parse_payload_keeps_order() -> None:
    payload = json.dumps(
        {
            "flashcard": [
                {"question": "What is a contract?", "answer": "An agreement."},
                {"question": "", "answer": ""},
                {"question": "Кой?", "answer": "Аз"},
            ]
        }
    )

    records = parse_flashcard_payload(payload)

    assert records == [
        Record("What is a contract?", "An agreement."),
        Record("", ""),
        Record("Кой?", "Аз"),
    ]


def test_parse_payload_accepts_mapping() -> None:
    assert parse_flashcard_payload({"flashcard": []}) == []


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        "[]",
        json.dumps({}),
        json.dumps({"flashcards": []}),
        json.dumps({"flashcard": [], "extra": 1}),
        json.dumps({"flashcard": [{"question": "q"}]}),
        json.dumps({"flashcard": [{"question": "q", "answer": "a", "hint": "h"}]}),
        json.dumps({"flashcard": [{"question": 1, "answer": "a"}]}),
        json.dumps({"flashcard": [{"question": "q", "answer": None}]}),
        json.dumps({"flashcard": {"question": "q", "answer": "a"}}),
    ],
)
def test_parse_payload_rejects_malformed_responses(payload: str) -> None:
    with pytest.raises(SchemaValidationError):
        parse_flashcard_payload(payload)
