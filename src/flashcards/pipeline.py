"""Turn one uploaded PDF into flashcard CSV text."""
from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from flashcards.config import Settings, load_settings
from flashcards.documents import Chunk, DocumentFormatDetector, PdfDocument, split
from flashcards.errors import FlashcardError, GeneratorCallError, RequestCancelledError
from flashcards.generation import Record, RecordBatch, RecordGenerator, create_generator
from flashcards.logging_config import AUDIT_LOGGER_NAME
from flashcards.serializer import serialize
from flashcards.telemetry import (
    emit_exception,
    emit_generation_request,
    emit_generation_result,
    emit_pipeline_event,
)

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger(AUDIT_LOGGER_NAME)

GenerateFn = Callable[[Chunk], Awaitable[RecordBatch]]
AbortCheck = Callable[[], Awaitable[bool]]


async def _wait_for_abort(should_abort: AbortCheck, poll_interval: float) -> None:
    while not await should_abort():
        await asyncio.sleep(poll_interval)


async def _generate_unless_aborted(
    chunk: Chunk,
    generate: GenerateFn,
    should_abort: Optional[AbortCheck],
    poll_interval: float,
) -> RecordBatch:
    if should_abort is None:
        return await generate(chunk)

    call = asyncio.ensure_future(generate(chunk))
    watcher = asyncio.ensure_future(_wait_for_abort(should_abort, poll_interval))
    try:
        done, _ = await asyncio.wait({call, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        pending = [task for task in (call, watcher) if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    if call in done:
        return call.result()
    # Surface a failing disconnect check instead of reporting a cancellation.
    watcher.result()
    raise RequestCancelledError(f"Request cancelled while generating chunk {chunk.position + 1}")


async def aggregate(
    chunks: Sequence[Chunk],
    generate: GenerateFn,
    *,
    should_abort: Optional[AbortCheck] = None,
    req_id: Optional[str] = None,
    poll_interval: float = 0.5,
) -> List[Record]:
    """Run ``generate`` over ``chunks`` one at a time and concatenate the batches.

    Chunks are awaited strictly in position order with a single call in
    flight. The first failure propagates and the records gathered so far
    are dropped with it. When ``should_abort`` is given it is checked
    before each chunk and polled every ``poll_interval`` seconds while a
    call is running; a true result cancels that call.
    """

    records: List[Record] = []
    for chunk in sorted(chunks, key=lambda item: item.position):
        if should_abort is not None and await should_abort():
            raise RequestCancelledError(
                f"Request cancelled before chunk {chunk.position + 1} of {len(chunks)}"
            )

        emit_generation_request(
            req_id=req_id,
            position=chunk.position,
            start_page=chunk.start_page,
            end_page=chunk.end_page,
            size_bytes=len(chunk.document.to_bytes()),
        )
        started = time.perf_counter()
        batch = await _generate_unless_aborted(chunk, generate, should_abort, poll_interval)
        emit_generation_result(
            req_id=req_id,
            position=chunk.position,
            records=len(batch),
            duration_ms=(time.perf_counter() - started) * 1000.0,
        )
        records.extend(batch)
    return records


@dataclass(slots=True)
class FlashcardResult:
    """CSV output of :meth:`FlashcardPipeline.run` with run statistics."""

    csv: str
    page_count: int
    chunk_count: int
    record_count: int
    duration_seconds: float


class FlashcardPipeline:
    """Parse, split, generate and serialise flashcards for a single document."""

    def __init__(self, generator: RecordGenerator, settings: Optional[Settings] = None) -> None:
        self.settings = (settings or Settings()).validate()
        self.generator = generator

    async def run(
        self,
        data: bytes,
        *,
        file_name: Optional[str] = None,
        mime_type: Optional[str] = None,
        should_abort: Optional[AbortCheck] = None,
        req_id: Optional[str] = None,
    ) -> FlashcardResult:
        req_id = req_id or uuid.uuid4().hex
        emit_pipeline_event("pipeline.start", req_id=req_id, file_name=file_name, size_bytes=len(data))
        timeout = self.settings.request_timeout_seconds
        try:
            result = await asyncio.wait_for(
                self._run(data, file_name=file_name, mime_type=mime_type, should_abort=should_abort, req_id=req_id),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            error = GeneratorCallError(f"Flashcard generation timed out after {timeout:g}s", cause=exc)
            emit_exception(module=__name__, error=error, req_id=req_id)
            raise error from exc
        except FlashcardError as error:
            emit_exception(module=__name__, error=error, req_id=req_id)
            raise

        emit_pipeline_event(
            "pipeline.complete",
            req_id=req_id,
            file_name=file_name,
            pages=result.page_count,
            chunks=result.chunk_count,
            records=result.record_count,
            duration_ms=result.duration_seconds * 1000.0,
        )
        AUDIT_LOGGER.info(
            {
                "event": "flashcards",
                "req_id": req_id,
                "file_name": file_name,
                "pages": result.page_count,
                "chunk_count": result.chunk_count,
                "record_count": result.record_count,
                "generator": self.generator.name,
            }
        )
        return result

    async def _run(
        self,
        data: bytes,
        *,
        file_name: Optional[str],
        mime_type: Optional[str],
        should_abort: Optional[AbortCheck],
        req_id: str,
    ) -> FlashcardResult:
        started = time.perf_counter()
        DocumentFormatDetector.ensure_pdf(data, file_name, mime_type)

        # Parsing and page copying are CPU bound; keep them off the event loop.
        document = await asyncio.to_thread(PdfDocument.from_bytes, data)
        chunks = await asyncio.to_thread(
            split,
            document,
            self.settings.threshold_pages,
            self.settings.chunk_size_pages,
        )
        LOGGER.info(
            "Generating flashcards for %s (%s pages, %s chunks)",
            file_name or "upload",
            document.page_count,
            len(chunks),
        )

        records = await aggregate(chunks, self._generate_chunk, should_abort=should_abort, req_id=req_id)
        csv_text = serialize(records, include_header=self.settings.csv_include_header)
        return FlashcardResult(
            csv=csv_text,
            page_count=document.page_count,
            chunk_count=len(chunks),
            record_count=len(records),
            duration_seconds=time.perf_counter() - started,
        )

    async def _generate_chunk(self, chunk: Chunk) -> RecordBatch:
        return await self.generator.generate(chunk.document.to_bytes(), label=chunk.label)


_pipeline: FlashcardPipeline | None = None


def get_flashcard_pipeline() -> FlashcardPipeline:
    """FastAPI dependency returning the process-wide :class:`FlashcardPipeline`."""

    global _pipeline
    if _pipeline is None:
        settings = load_settings().validate()
        _pipeline = FlashcardPipeline(create_generator(settings), settings)
    return _pipeline
