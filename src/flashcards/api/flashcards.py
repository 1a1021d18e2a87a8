"""API router exposing flashcard generation from an uploaded PDF."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile

from flashcards.errors import FlashcardError, InputMissingError
from flashcards.pipeline import FlashcardPipeline, FlashcardResult, get_flashcard_pipeline
from flashcards.telemetry import emit_exception

router = APIRouter(prefix="/api", tags=["flashcards"])

CSV_FILENAME = "flashcards.csv"
UPLOAD_FIELD = "file"


def _csv_response(result: FlashcardResult, req_id: str) -> Response:
    return Response(
        content=result.csv,
        status_code=200,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename={CSV_FILENAME}",
            "X-Request-ID": req_id,
            "X-Flashcard-Count": str(result.record_count),
        },
    )


async def _run_upload(request: Request, pipeline: FlashcardPipeline, req_id: str) -> FlashcardResult:
    # The form is read by hand so a text value in the upload field is a 400, not a 422.
    async with request.form() as form:
        upload = form.get(UPLOAD_FIELD)
        if not isinstance(upload, UploadFile):
            raise InputMissingError(f"Missing PDF in form-data under field '{UPLOAD_FIELD}'.")
        data = await upload.read()
        file_name = upload.filename
        mime_type = upload.content_type

    return await pipeline.run(
        data,
        file_name=file_name,
        mime_type=mime_type,
        should_abort=request.is_disconnected,
        req_id=req_id,
    )


@router.post("/flashcards", response_class=Response)
async def create_flashcards(
    request: Request,
    pipeline: FlashcardPipeline = Depends(get_flashcard_pipeline),
) -> Response:
    """Generate flashcards for the PDF in the ``file`` form field and return them as CSV."""

    req_id = uuid.uuid4().hex
    headers = {"X-Request-ID": req_id}
    try:
        result = await _run_upload(request, pipeline, req_id)
    except FlashcardError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc), headers=headers) from exc
    except HTTPException:
        raise
    except Exception as exc:
        emit_exception(module=__name__, error=exc, req_id=req_id)
        raise HTTPException(status_code=500, detail="Internal error", headers=headers) from exc
    return _csv_response(result, req_id)
