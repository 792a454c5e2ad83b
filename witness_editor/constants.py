"""witness_editor.constants
===========================

Global constants used across the editor core. Keeping them here avoids import
cycles between modules and makes it easier to discover configurable paths.
"""

from __future__ import annotations

SAVE_PATH = "puzzles.json"
FAIL_LOG = "load_failures.jsonl"

DEFAULT_SIZE = 4
DEFAULT_PADDING = 0.18
DEFAULT_END_DOT_VECTOR = (1.0, 0.0)

# Exit stub length is fixed at half a cell of the default 4x4 grid.
END_DOT_LENGTH = (1.0 - 2 * DEFAULT_PADDING) / 4 / 2

FALLBACK_COLOR_TAG = "white"

__all__ = [
    "SAVE_PATH",
    "FAIL_LOG",
    "DEFAULT_SIZE",
    "DEFAULT_PADDING",
    "DEFAULT_END_DOT_VECTOR",
    "END_DOT_LENGTH",
    "FALLBACK_COLOR_TAG",
]
