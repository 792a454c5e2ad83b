"""witness_editor.storage
========================

Persistence layer for puzzle collections.

Collections are stored as a single JSON document: a top-level list of puzzle
records in the layout produced by :meth:`~witness_editor.codec.PuzzleRecord.to_json`.
JSON keeps the format human-auditable and easy to consume from other tools.

Saving is atomic: the document is written next to the target and moved into
place with :func:`os.replace`, so an interrupted save leaves the previous file
untouched. Loading treats a missing file as an empty collection and skips
individual records that fail to decode, reporting them instead of aborting.

:class:`PuzzleCollection` wraps both operations together with the id
bookkeeping an editor front-end needs (next free id, renumbering, deletion and
copy-on-open editing sessions).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from .codec import PuzzleRecord, copy_puzzle, decode_record, describe_record, puzzles_to_json
from .constants import FAIL_LOG, SAVE_PATH
from .errors import CorruptDataError, InvalidInputError
from .generators import RectPuzzleConfig, generate_from_config
from .logging_utils import log_load_failure, warn
from .puzzle import Puzzle


@dataclass
class LoadFailure:
    """A record that was skipped while loading a collection."""

    index: int
    id: Optional[int]
    reason: str


@dataclass
class LoadReport:
    """Result of :func:`read_collection`: decoded puzzles plus skipped records."""

    puzzles: List[Puzzle] = field(default_factory=list)
    failures: List[LoadFailure] = field(default_factory=list)


# ----------------------------------------------------------------------
# Plain functions
# ----------------------------------------------------------------------
def save_puzzles(puzzles: List[Puzzle], path: str | Path = SAVE_PATH) -> None:
    """Sort ``puzzles`` by id in place, encode them and write ``path`` atomically."""

    puzzles.sort(key=lambda puzzle: puzzle.id)
    payload = puzzles_to_json(puzzles)
    target = Path(path)
    tmp_path = target.with_name(target.name + ".tmp")
    try:
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp_path, target)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def read_collection(path: str | Path = SAVE_PATH, verbose: bool = True) -> LoadReport:
    """Read ``path`` and decode every record it holds.

    A missing or unreadable file yields an empty report. A document that is not
    valid JSON, or whose top level is not a list, raises
    :class:`CorruptDataError`. Records that fail individually are collected in
    :attr:`LoadReport.failures` and the remaining ones still load.
    """

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError:
        return LoadReport()
    except PermissionError:
        if verbose:
            warn(f"cannot read {source}, starting with an empty collection")
        return LoadReport()
    except UnicodeDecodeError as exc:
        raise CorruptDataError(f"{source} is not valid UTF-8: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptDataError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise CorruptDataError(f"{source} must contain a list of puzzles")

    report = LoadReport()
    for index, payload in enumerate(raw):
        try:
            report.puzzles.append(decode_record(PuzzleRecord.from_json(payload), verbose=verbose))
        except CorruptDataError as exc:
            exc.record_index = index
            report.failures.append(LoadFailure(index, describe_record(payload), str(exc)))
    return report


def _report_failures(
    path: str | Path, failures: List[LoadFailure], verbose: bool, fail_log: str | Path | None
) -> None:
    for failure in failures:
        if verbose:
            warn(f"skipping puzzle #{failure.index} (id={failure.id}) in {path}: {failure.reason}")
        if fail_log is not None:
            log_load_failure(path, failure, fail_log)


def load_puzzles(
    path: str | Path = SAVE_PATH,
    verbose: bool = True,
    fail_log: str | Path | None = FAIL_LOG,
) -> List[Puzzle]:
    """Load the puzzles stored at ``path`` in file order.

    Skipped records are reported with a warning and appended to ``fail_log``
    (pass ``None`` to disable the log). Use :func:`read_collection` to get the
    failures back as data.
    """

    report = read_collection(path, verbose=verbose)
    _report_failures(path, report.failures, verbose, fail_log)
    return report.puzzles


# ----------------------------------------------------------------------
# Collection manager
# ----------------------------------------------------------------------
class PuzzleCollection:
    """Ordered set of puzzles with unique ids backed by a JSON file."""

    def __init__(self, path: str | Path = SAVE_PATH, fail_log: str | Path | None = FAIL_LOG) -> None:
        self.path = Path(path)
        self.fail_log = fail_log
        self.puzzles: List[Puzzle] = []
        self.failures: List[LoadFailure] = []

    def __len__(self) -> int:
        return len(self.puzzles)

    def __getitem__(self, index: int) -> Puzzle:
        return self.puzzles[index]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self, verbose: bool = True) -> None:
        """Populate :attr:`puzzles` from :attr:`path`, remembering skipped records."""

        report = read_collection(self.path, verbose=verbose)
        _report_failures(self.path, report.failures, verbose, self.fail_log)
        self.puzzles = report.puzzles
        self.failures = report.failures

    def save(self) -> None:
        """Persist :attr:`puzzles` (re-sorted by id)."""

        save_puzzles(self.puzzles, self.path)

    # ------------------------------------------------------------------
    # Ids
    # ------------------------------------------------------------------
    def next_id(self) -> int:
        """Id for a new puzzle: one past the highest id, or ``0`` when empty.

        Saved collections are sorted by id, so this is the last puzzle's id + 1.
        """

        if not self.puzzles:
            return 0
        return max(puzzle.id for puzzle in self.puzzles) + 1

    def is_unique_id(self, candidate: int, ignore_index: Optional[int] = None) -> bool:
        return all(
            puzzle.id != candidate for index, puzzle in enumerate(self.puzzles) if index != ignore_index
        )

    def change_id(self, index: int, new_id: Any) -> None:
        """Assign ``new_id`` to the puzzle at ``index`` and save.

        ``new_id`` may be an int or a string holding one. Keeping the current id
        is allowed.

        Raises
        ------
        InvalidInputError
            If ``new_id`` is not an integer or another puzzle already uses it.
        """

        try:
            candidate = int(str(new_id).strip())
        except ValueError:
            raise InvalidInputError(f"Can't cast id {new_id!r} to int") from None
        if not self.is_unique_id(candidate, ignore_index=index):
            raise InvalidInputError(f"Not unique id. You can use '{self.next_id()}'")
        self.puzzles[index].id = candidate
        self.save()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def add_new(self, config: Optional[RectPuzzleConfig] = None) -> Puzzle:
        """Generate a rectangular puzzle with the next free id, append it and save."""

        puzzle = generate_from_config(config or RectPuzzleConfig())
        puzzle.id = self.next_id()
        self.puzzles.append(puzzle)
        self.save()
        return puzzle

    def delete(self, index: int) -> Puzzle:
        removed = self.puzzles.pop(index)
        self.save()
        return removed

    def open_copy(self, index: int) -> Puzzle:
        """Return a deep copy for an editing session; edits never touch the original."""

        return copy_puzzle(self.puzzles[index])

    def duplicate(self, index: int) -> Puzzle:
        """Append a deep copy of the puzzle at ``index`` under the next free id."""

        clone = copy_puzzle(self.puzzles[index])
        clone.id = self.next_id()
        self.puzzles.append(clone)
        self.save()
        return clone

    def commit(self, index: int, edited: Puzzle) -> None:
        """Replace the puzzle at ``index`` with an edited copy and save."""

        self.puzzles[index] = edited
        self.save()


__all__ = [
    "LoadFailure",
    "LoadReport",
    "save_puzzles",
    "read_collection",
    "load_puzzles",
    "PuzzleCollection",
]
