"""witness_editor.types
=======================

Foundational type aliases shared by the model, generator and codec modules.
Centralising them keeps every module importing the exact same names for the
same concepts, whether that is a grid coordinate handed to the generator or a
raw JSON payload travelling between the codec and the storage layer.

The module intentionally stays minimal: no functions are declared here, so
importing it never triggers runtime side effects.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------
Vector = Tuple[float, float]
GridPos = Tuple[int, int]

# ---------------------------------------------------------------------------
# Persisted payloads
# ---------------------------------------------------------------------------
# Records are plain JSON objects once they leave the codec. The aliases document
# intent rather than enforce a schema; validation happens during decoding.
JsonDict = Dict[str, Any]

__all__ = [
    "Vector",
    "GridPos",
    "JsonDict",
]
