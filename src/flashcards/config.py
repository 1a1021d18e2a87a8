"""Environment driven settings for the flashcard service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from flashcards.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_THRESHOLD_PAGES = 500
DEFAULT_CHUNK_SIZE_PAGES = 100
DEFAULT_GPT_MODEL = "gpt-4o-mini"

SUPPORTED_PROVIDERS: tuple[str, ...] = ("openai", "mock")


def _load_dotenv() -> None:
    env_file = PROJECT_ROOT / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=env_file)
    else:
        load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default


def _float_from_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        LOGGER.warning("Invalid float for %s: %s; using default %s", name, value, default)
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings resolved once per process."""

    threshold_pages: int = DEFAULT_THRESHOLD_PAGES
    chunk_size_pages: int = DEFAULT_CHUNK_SIZE_PAGES
    generator_provider: str = "openai"
    gpt_model: str = DEFAULT_GPT_MODEL
    openai_api_key: str | None = None
    generator_timeout_seconds: float = 120.0
    request_timeout_seconds: float = 900.0
    csv_include_header: bool = False

    def validate(self) -> "Settings":
        """Raise :class:`ConfigurationError` when the settings cannot work."""

        if self.chunk_size_pages < 1:
            raise ConfigurationError(
                f"CHUNK_SIZE_PAGES must be at least 1 (got {self.chunk_size_pages})"
            )
        if self.threshold_pages < 0:
            raise ConfigurationError(
                f"SPLIT_THRESHOLD_PAGES must not be negative (got {self.threshold_pages})"
            )
        if self.generator_provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"GENERATOR_PROVIDER must be one of {', '.join(SUPPORTED_PROVIDERS)} "
                f"(got {self.generator_provider!r})"
            )
        if self.generator_timeout_seconds <= 0 or self.request_timeout_seconds <= 0:
            raise ConfigurationError("Timeouts must be positive numbers of seconds")
        return self


def load_settings() -> Settings:
    """Build :class:`Settings` from the process environment."""

    _load_dotenv()
    return Settings(
        threshold_pages=_int_from_env("SPLIT_THRESHOLD_PAGES", DEFAULT_THRESHOLD_PAGES),
        chunk_size_pages=_int_from_env("CHUNK_SIZE_PAGES", DEFAULT_CHUNK_SIZE_PAGES),
        generator_provider=os.getenv("GENERATOR_PROVIDER", "openai").strip().lower(),
        gpt_model=os.getenv("GPT_MODEL", DEFAULT_GPT_MODEL),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        generator_timeout_seconds=_float_from_env("GENERATOR_TIMEOUT_SECONDS", 120.0),
        request_timeout_seconds=_float_from_env("REQUEST_TIMEOUT_SECONDS", 900.0),
        csv_include_header=_env_flag("CSV_INCLUDE_HEADER"),
    )
