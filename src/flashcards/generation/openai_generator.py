"""
Flashcard generation through the OpenAI Chat Completions API.

The PDF is sent inline as a base64 ``file`` content part and the model is
constrained to the flashcard JSON schema, so the reply can be validated
without any prompt-side parsing.

Model: gpt-4o-mini  (override with GPT_MODEL env var, e.g. "gpt-4o")
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from flashcards.errors import GeneratorCallError

from .base import RecordGenerator
from .models import RESPONSE_JSON_SCHEMA, RecordBatch, parse_flashcard_payload

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert study-guide assistant. Create comprehensive, in-depth flash cards "
    "that cover all concepts in the attached PDF. Do not omit any sections."
)


class OpenAIFlashcardGenerator(RecordGenerator):
    """Record generator backed by an OpenAI chat model."""

    name = "openai"

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        timeout: float = 120.0,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise GeneratorCallError("OPENAI_API_KEY is not set. Add it to your .env file.")
            # Retries are left to the caller; a failed chunk fails the request.
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout, max_retries=0)
        return self._client

    def readiness_error(self) -> Optional[str]:
        if self._client is None and not self._api_key:
            return "OPENAI_API_KEY is not set"
        return None

    async def generate(self, document: bytes, *, label: Optional[str] = None) -> RecordBatch:
        client = self._get_client()
        file_name = label or "document.pdf"
        encoded = base64.b64encode(document).decode("ascii")

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "file",
                                "file": {
                                    "filename": file_name,
                                    "file_data": f"data:application/pdf;base64,{encoded}",
                                },
                            }
                        ],
                    },
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "flashcards",
                        "strict": True,
                        "schema": RESPONSE_JSON_SCHEMA,
                    },
                },
            )
        except OpenAIError as exc:
            raise GeneratorCallError(f"Flashcard generation failed for {file_name}: {exc}", cause=exc) from exc

        if not response.choices:
            raise GeneratorCallError(f"Model returned no choices for {file_name}")
        message = response.choices[0].message
        if getattr(message, "refusal", None):
            raise GeneratorCallError(f"Model refused to process {file_name}: {message.refusal}")
        content = message.content
        if not content:
            raise GeneratorCallError(f"Model response was empty for {file_name}")

        logger.debug("Raw flashcard response for %s: %s", file_name, content)
        return parse_flashcard_payload(content)
