import logging
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse

from flashcards.api import router as flashcards_router
from flashcards.logging_config import configure_logging
from flashcards.pipeline import get_flashcard_pipeline
from flashcards.telemetry import emit_app_startup_event

configure_logging()

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Flashcards API")
app.include_router(flashcards_router)


@app.on_event("startup")
async def _startup_pipeline() -> None:
    """Build the pipeline eagerly so invalid settings stop the service at boot."""

    pipeline = _resolve_dependency(get_flashcard_pipeline)
    emit_app_startup_event(pipeline.settings)


T = TypeVar("T")


def _resolve_dependency(factory: Callable[[], T]) -> T:
    """Resolve a dependency while respecting FastAPI overrides."""

    override: Any | None = app.dependency_overrides.get(factory)
    resolved: Any = override if override is not None else factory
    return resolved() if callable(resolved) else resolved


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"


@app.get("/healthz", response_class=PlainTextResponse)
def healthcheck() -> str:
    """Liveness probe reporting whether the flashcard generator can serve requests."""
    reason = _resolve_dependency(get_flashcard_pipeline).generator.readiness_error()
    if reason:
        raise HTTPException(status_code=503, detail=reason)
    return "ok"
