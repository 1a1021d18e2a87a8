"""Flashcard generation service: split PDFs, generate question/answer pairs, export CSV."""

__version__ = "0.1.0"
