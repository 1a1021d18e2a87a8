from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from flashcards.config import Settings
from flashcards.errors import GeneratorCallError, SchemaValidationError
from flashcards.main import app
from flashcards.pipeline import FlashcardPipeline, get_flashcard_pipeline

from conftest import ScriptedGenerator, build_pdf


@pytest.fixture
def client_with() -> Iterator:
    def _install(generator, settings: Settings | None = None) -> TestClient:
        pipeline = FlashcardPipeline(generator, settings or Settings())
        app.dependency_overrides[get_flashcard_pipeline] = lambda: pipeline
        return TestClient(app)

    try:
        yield _install
    finally:
        app.dependency_overrides.clear()


def test_upload_returns_csv_attachment(client_with) -> None:
    client = client_with(ScriptedGenerator())

    response = client.post(
        "/api/flashcards",
        files={"file": ("lecture.pdf", build_pdf(3), "application/pdf")},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=flashcards.csv"
    assert response.text == '"q0","a0"'


def test_large_upload_is_split_into_ordered_lines(client_with) -> None:
    generator = ScriptedGenerator()
    client = client_with(generator, Settings(threshold_pages=500, chunk_size_pages=100))

    response = client.post(
        "/api/flashcards",
        files={"file": ("book.pdf", build_pdf(650), "application/pdf")},
    )

    assert response.status_code == 200
    assert response.text.split("\n") == [f'"q{index}","a{index}"' for index in range(7)]
    assert response.headers["x-flashcard-count"] == "7"


def test_missing_file_field_is_a_client_error(client_with) -> None:
    generator = ScriptedGenerator()
    client = client_with(generator)

    response = client.post("/api/flashcards", data={"note": "no file here"})

    assert response.status_code == 400
    assert "file" in response.json()["detail"]
    assert generator.labels == []


def test_non_pdf_upload_is_a_client_error(client_with) -> None:
    generator = ScriptedGenerator()
    client = client_with(generator)

    response = client.post(
        "/api/flashcards",
        files={"file": ("notes.txt", b"just some text", "text/plain")},
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/json")
    assert generator.labels == []


def test_generator_failure_returns_error_without_csv(client_with) -> None:
    generator = ScriptedGenerator(fail_on_call=3, error=GeneratorCallError("upstream unavailable"))
    client = client_with(generator, Settings(threshold_pages=500, chunk_size_pages=100))

    response = client.post(
        "/api/flashcards",
        files={"file": ("book.pdf", build_pdf(650), "application/pdf")},
    )

    assert response.status_code == 502
    assert response.headers["content-type"].startswith("application/json")
    assert "upstream unavailable" in response.json()["detail"]
    assert '"q0"' not in response.text
    assert len(generator.labels) == 4


def test_schema_failure_maps_to_bad_gateway(client_with) -> None:
    client = client_with(ScriptedGenerator(fail_on_call=0, error=SchemaValidationError("bad shape")))

    response = client.post(
        "/api/flashcards",
        files={"file": ("lecture.pdf", build_pdf(1), "application/pdf")},
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "bad shape"


def test_text_in_file_field_is_a_client_error(client_with) -> None:
    generator = ScriptedGenerator()
    client = client_with(generator)

    response = client.post("/api/flashcards", data={"file": "not a file"})

    assert response.status_code == 400
    assert "file" in response.json()["detail"]
    assert generator.labels == []


def test_pdf_with_alias_content_type_is_accepted(client_with) -> None:
    client = client_with(ScriptedGenerator())

    response = client.post(
        "/api/flashcards",
        files={"file": ("a.pdf", build_pdf(1), "application/x-pdf")},
    )

    assert response.status_code == 200
    assert response.text == '"q0","a0"'


def test_unexpected_failure_returns_json_500() -> None:
    pipeline = FlashcardPipeline(ScriptedGenerator(fail_on_call=0, error=RuntimeError("boom")))
    app.dependency_overrides[get_flashcard_pipeline] = lambda: pipeline
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.post(
            "/api/flashcards",
            files={"file": ("lecture.pdf", build_pdf(1), "application/pdf")},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"detail": "Internal error"}
