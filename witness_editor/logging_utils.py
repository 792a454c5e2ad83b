"""witness_editor.logging_utils
==============================

Simple logging utilities: console warnings for recoverable problems, and a
JSON-lines log recording puzzles that were skipped while loading a collection
so they can be inspected or repaired by hand later.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .constants import FAIL_LOG


def warn(message: str) -> None:
    """Print ``message`` with the ``[WARN]`` prefix used across the package."""

    print(f"[WARN] {message}")


def log_load_failure(path: str | Path, failure: Any, log_path: str | Path = FAIL_LOG) -> None:
    """Append a JSON line describing a rejected record to ``log_path``."""

    entry = {
        "path": str(path),
        "index": getattr(failure, "index", None),
        "id": getattr(failure, "id", None),
        "reason": getattr(failure, "reason", str(failure)),
        "logged_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
    }
    with Path(log_path).open("a") as handle:
        handle.write(json.dumps(entry) + "\n")


__all__ = ["warn", "log_load_failure"]
