"""witness_editor.errors
========================

Exception types raised by the editor core.
"""

from __future__ import annotations

from typing import Optional


class PuzzleEditorError(Exception):
    """Base class for all editor core failures."""


class InvalidInputError(PuzzleEditorError, ValueError):
    """Caller supplied parameters that cannot produce a valid result."""

    def __init__(self, message: str = "Invalid input.") -> None:
        super().__init__(message)


class CorruptDataError(PuzzleEditorError, ValueError):
    """A puzzle record or model references something that does not exist.

    ``record_index`` is the position of the offending record inside a saved
    collection when known, so callers can report which puzzle was skipped.
    """

    def __init__(self, message: str = "Corrupt puzzle data.", record_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.record_index = record_index


__all__ = ["PuzzleEditorError", "InvalidInputError", "CorruptDataError"]
