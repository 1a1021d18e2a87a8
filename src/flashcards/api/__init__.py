"""HTTP routers."""
from __future__ import annotations

from .flashcards import router

__all__ = ["router"]
