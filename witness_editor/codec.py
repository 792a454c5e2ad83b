"""witness_editor.codec
======================

Index-based encoding of puzzles.

A :class:`~witness_editor.puzzle.Puzzle` is an object graph: the same dot is
referenced by several lines, by ``start_dots`` and possibly by a constraint, and
the same pane appears both as a ``pane_map`` key and inside its neighbours'
lists. :func:`encode_puzzle` flattens that graph into a :class:`PuzzleRecord`
in which every reference is replaced by its position in ``dots`` or ``panes``.
:func:`decode_record` reverses the process, allocating fresh dots and panes and
resolving each index back to them, so sharing survives the round trip while no
object is shared with the original. ``decode_record(encode_puzzle(p))`` is how
puzzles are deep-copied (see :func:`copy_puzzle`).

Records convert to and from plain JSON objects via :meth:`PuzzleRecord.to_json`
and :meth:`PuzzleRecord.from_json`. Parsing is lenient about *missing optional*
fields and unknown keys (older and newer saves both load) but strict about
required fields and index ranges.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .errors import CorruptDataError
from .geometry import Dot, Line, Pane
from .logging_utils import warn
from .puzzle import ColoredPane, Complexity, Neighbor, PaneEntry, Puzzle, PuzzleColor
from .types import JsonDict

# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PointRecord:
    x: float
    y: float


@dataclass(frozen=True)
class LineRecord:
    dot1: int
    dot2: int


@dataclass(frozen=True)
class PaneRef:
    ind: int


@dataclass(frozen=True)
class ColoredPaneRecord:
    """Pane index plus the colour's stable tag (kept verbatim, even if unknown)."""

    ind: int
    color: str


@dataclass
class NeighborRecord:
    pane: PaneRef
    line: LineRecord


@dataclass
class PaneMapRecord:
    pane: PaneRef
    neighbors: List[NeighborRecord] = field(default_factory=list)


@dataclass
class ComplexityRecord:
    black_dots_on_dot: List[int] = field(default_factory=list)
    black_dots_on_line: List[LineRecord] = field(default_factory=list)
    line_breaks: List[LineRecord] = field(default_factory=list)
    suns: List[ColoredPaneRecord] = field(default_factory=list)
    squares: List[ColoredPaneRecord] = field(default_factory=list)

    def to_json(self) -> JsonDict:
        return {
            "blackDotsOnDot": list(self.black_dots_on_dot),
            "blackDotsOnLine": [_line_json(item) for item in self.black_dots_on_line],
            "lineBreaks": [_line_json(item) for item in self.line_breaks],
            "suns": [_colored_json(item) for item in self.suns],
            "squares": [_colored_json(item) for item in self.squares],
        }

    @classmethod
    def from_json(cls, payload: Any) -> "ComplexityRecord":
        """Parse a complexity object; every field is optional."""

        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise CorruptDataError("complexity must be an object")
        return cls(
            black_dots_on_dot=[_int(item, "blackDotsOnDot") for item in _list(payload, "blackDotsOnDot")],
            black_dots_on_line=[_line_record(item, "blackDotsOnLine") for item in _list(payload, "blackDotsOnLine")],
            line_breaks=[_line_record(item, "lineBreaks") for item in _list(payload, "lineBreaks")],
            suns=[_colored_record(item, "suns") for item in _list(payload, "suns")],
            squares=[_colored_record(item, "squares") for item in _list(payload, "squares")],
        )


@dataclass
class PuzzleRecord:
    """Flat, reference-free form of a puzzle.

    Parameters
    ----------
    id:
        Puzzle identifier.
    start_dots, end_dots:
        Indices into ``dots``.
    dots, panes:
        Coordinates in canonical order; positions are the index spaces.
    lines:
        Endpoint index pairs into ``dots``.
    pane_map:
        Pane adjacency with panes as indices into ``panes``.
    complexity:
        Constraint annotations in index form.
    """

    id: int
    start_dots: List[int]
    end_dots: List[int]
    dots: List[PointRecord]
    lines: List[LineRecord]
    panes: List[PointRecord]
    pane_map: List[PaneMapRecord]
    complexity: ComplexityRecord = field(default_factory=ComplexityRecord)

    def to_json(self) -> JsonDict:
        """Return a JSON-serialisable dictionary in the on-disk layout."""

        return {
            "id": self.id,
            "startDots": list(self.start_dots),
            "endDots": list(self.end_dots),
            "dots": [_point_json(item) for item in self.dots],
            "lines": [_line_json(item) for item in self.lines],
            "panes": [_point_json(item) for item in self.panes],
            "paneMap": [
                {
                    "pane": {"ind": entry.pane.ind},
                    "neighbors": [
                        {"pane": {"ind": neighbor.pane.ind}, "line": _line_json(neighbor.line)}
                        for neighbor in entry.neighbors
                    ],
                }
                for entry in self.pane_map
            ],
            "complexity": self.complexity.to_json(),
        }

    @classmethod
    def from_json(cls, payload: Any) -> "PuzzleRecord":
        """Parse one record, defaulting optional fields and ignoring unknown keys.

        ``dots``, ``lines``, ``panes`` and ``paneMap`` are required. Older saves
        stored the identifier as ``name`` and the constraints under
        ``complexityJson``; both spellings are still understood.
        """

        if not isinstance(payload, dict):
            raise CorruptDataError("puzzle record must be an object")
        for key in ("dots", "lines", "panes", "paneMap"):
            if payload.get(key) is None:
                raise CorruptDataError(f"puzzle record is missing required field {key!r}")

        if "id" in payload:
            identifier = _int(payload["id"], "id")
        elif "name" in payload:
            identifier = _int(payload["name"], "name")
        else:
            identifier = -1

        complexity_payload = payload.get("complexity", payload.get("complexityJson"))
        return cls(
            id=identifier,
            start_dots=[_int(item, "startDots") for item in _list(payload, "startDots")],
            end_dots=[_int(item, "endDots") for item in _list(payload, "endDots")],
            dots=[_point_record(item, "dots") for item in _list(payload, "dots")],
            lines=[_line_record(item, "lines") for item in _list(payload, "lines")],
            panes=[_point_record(item, "panes") for item in _list(payload, "panes")],
            pane_map=[_pane_map_record(item) for item in _list(payload, "paneMap")],
            complexity=ComplexityRecord.from_json(complexity_payload),
        )


# ---------------------------------------------------------------------------
# JSON field helpers
# ---------------------------------------------------------------------------


def _point_json(point: PointRecord) -> JsonDict:
    return {"x": point.x, "y": point.y}


def _line_json(line: LineRecord) -> JsonDict:
    return {"dot1": line.dot1, "dot2": line.dot2}


def _colored_json(item: ColoredPaneRecord) -> JsonDict:
    return {"ind": item.ind, "color": item.color}


def _list(payload: JsonDict, key: str) -> List[Any]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise CorruptDataError(f"{key} must be a list")
    return value


def _int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CorruptDataError(f"{where}: expected an integer, got {value!r}")
    return value


def _float(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptDataError(f"{where}: expected a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        raise CorruptDataError(f"{where}: number {value!r} is too large") from None
    if not math.isfinite(number):
        raise CorruptDataError(f"{where}: expected a finite number, got {value!r}")
    return number


def _field(payload: Any, key: str, where: str) -> Any:
    if not isinstance(payload, dict) or key not in payload:
        raise CorruptDataError(f"{where}: missing field {key!r}")
    return payload[key]


def _point_record(payload: Any, where: str) -> PointRecord:
    return PointRecord(_float(_field(payload, "x", where), where), _float(_field(payload, "y", where), where))


def _line_record(payload: Any, where: str) -> LineRecord:
    return LineRecord(_int(_field(payload, "dot1", where), where), _int(_field(payload, "dot2", where), where))


def _pane_ref(payload: Any, where: str) -> PaneRef:
    return PaneRef(_int(_field(payload, "ind", where), where))


def _colored_record(payload: Any, where: str) -> ColoredPaneRecord:
    ind = _int(_field(payload, "ind", where), where)
    # Colour tags are resolved at decode time so unknown ones can fall back.
    color = payload.get("color")
    return ColoredPaneRecord(ind, color if isinstance(color, str) else repr(color))


def _pair(payload: Any, first: str, second: str, where: str) -> Tuple[Any, Any]:
    """Read a two-field object, also accepting the legacy ``first``/``second`` form."""

    if isinstance(payload, dict) and first in payload:
        return payload[first], payload.get(second)
    if isinstance(payload, dict) and "first" in payload:
        return payload["first"], payload.get("second")
    raise CorruptDataError(f"{where}: expected an object with {first!r} and {second!r}")


def _pane_map_record(payload: Any) -> PaneMapRecord:
    pane_payload, neighbors_payload = _pair(payload, "pane", "neighbors", "paneMap")
    if neighbors_payload is None:
        neighbors_payload = []
    if not isinstance(neighbors_payload, list):
        raise CorruptDataError("paneMap: neighbors must be a list")
    neighbors = []
    for item in neighbors_payload:
        neighbor_pane, neighbor_line = _pair(item, "pane", "line", "paneMap neighbor")
        neighbors.append(
            NeighborRecord(_pane_ref(neighbor_pane, "paneMap neighbor"), _line_record(neighbor_line, "paneMap neighbor"))
        )
    return PaneMapRecord(_pane_ref(pane_payload, "paneMap"), neighbors)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_puzzle(puzzle: Puzzle) -> PuzzleRecord:
    """Flatten ``puzzle`` into a :class:`PuzzleRecord`.

    Dots are indexed by their position in ``puzzle.dots``; panes by their first
    appearance as a ``pane_map`` key. Lookups are by identity, so two distinct
    dots with identical coordinates keep distinct indices.

    Raises
    ------
    CorruptDataError
        If any reference points outside ``puzzle.dots`` or the pane map.
    """

    dot_index: Dict[int, int] = {}
    for position, dot in enumerate(puzzle.dots):
        dot_index.setdefault(id(dot), position)

    panes: List[Pane] = []
    pane_index: Dict[int, int] = {}
    for pane, _ in puzzle.pane_map:
        if id(pane) not in pane_index:
            pane_index[id(pane)] = len(panes)
            panes.append(pane)

    def dot_ref(dot: Dot, where: str) -> int:
        try:
            return dot_index[id(dot)]
        except KeyError:
            raise CorruptDataError(f"{where} references a dot that is not in puzzle.dots") from None

    def line_ref(line: Line, where: str) -> LineRecord:
        return LineRecord(dot_ref(line.dot1, where), dot_ref(line.dot2, where))

    def pane_ref(pane: Pane, where: str) -> PaneRef:
        try:
            return PaneRef(pane_index[id(pane)])
        except KeyError:
            raise CorruptDataError(f"{where} references a pane that is not a paneMap key") from None

    def colored_ref(item: ColoredPane, where: str) -> ColoredPaneRecord:
        return ColoredPaneRecord(pane_ref(item.pane, where).ind, item.color.tag)

    complexity = puzzle.complexity
    return PuzzleRecord(
        id=puzzle.id,
        start_dots=[dot_ref(dot, "startDots") for dot in puzzle.start_dots],
        end_dots=[dot_ref(dot, "endDots") for dot in puzzle.end_dots],
        dots=[PointRecord(dot.x, dot.y) for dot in puzzle.dots],
        lines=[line_ref(line, "lines") for line in puzzle.lines],
        panes=[PointRecord(pane.x, pane.y) for pane in panes],
        pane_map=[
            PaneMapRecord(
                pane_ref(pane, "paneMap"),
                [NeighborRecord(pane_ref(other, "paneMap"), line_ref(line, "paneMap")) for other, line in neighbors],
            )
            for pane, neighbors in puzzle.pane_map
        ],
        complexity=ComplexityRecord(
            black_dots_on_dot=[dot_ref(dot, "blackDotsOnDot") for dot in complexity.black_dots_on_dot],
            black_dots_on_line=[line_ref(line, "blackDotsOnLine") for line in complexity.black_dots_on_line],
            line_breaks=[line_ref(line, "lineBreaks") for line in complexity.line_breaks],
            suns=[colored_ref(item, "suns") for item in complexity.suns],
            squares=[colored_ref(item, "squares") for item in complexity.squares],
        ),
    )


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode_record(record: PuzzleRecord, verbose: bool = True) -> Puzzle:
    """Rebuild a :class:`Puzzle` from ``record`` with fresh dots and panes.

    Lines referenced by the pane map or by constraints resolve to the matching
    object in the decoded ``lines`` when that dot pair exists there, so the
    decoded graph shares line objects the same way the encoded one did. Such an
    edge takes the orientation of the ``lines`` entry, so an edge recorded as
    ``(3, 0)`` against a stored ``(0, 3)`` line re-encodes as ``(0, 3)``.

    Raises
    ------
    CorruptDataError
        On any out-of-range index, a line joining a dot to itself, or a dot
        pair listed twice in ``lines``.
    """

    dots = [Dot(point.x, point.y) for point in record.dots]
    panes = [Pane(point.x, point.y) for point in record.panes]

    def dot_at(index: int, where: str) -> Dot:
        if not 0 <= index < len(dots):
            raise CorruptDataError(f"{where}: dot index {index} out of range for {len(dots)} dots")
        return dots[index]

    def pane_at(index: int, where: str) -> Pane:
        if not 0 <= index < len(panes):
            raise CorruptDataError(f"{where}: pane index {index} out of range for {len(panes)} panes")
        return panes[index]

    def build_line(item: LineRecord, where: str) -> Line:
        if item.dot1 == item.dot2:
            raise CorruptDataError(f"{where}: line joins dot {item.dot1} to itself")
        return Line(dot_at(item.dot1, where), dot_at(item.dot2, where))

    lines: List[Line] = []
    by_pair: Dict[FrozenSet[int], Line] = {}
    for item in record.lines:
        line = build_line(item, "lines")
        key = frozenset((item.dot1, item.dot2))
        if key in by_pair:
            raise CorruptDataError(f"lines: dot pair ({item.dot1}, {item.dot2}) listed twice")
        by_pair[key] = line
        lines.append(line)

    def line_at(item: LineRecord, where: str) -> Line:
        existing = by_pair.get(frozenset((item.dot1, item.dot2)))
        if existing is not None:
            return existing
        return build_line(item, where)

    def colored_at(item: ColoredPaneRecord, where: str) -> ColoredPane:
        color = PuzzleColor.from_tag(item.color)
        if color is None:
            color = PuzzleColor.fallback()
            if verbose:
                warn(f"puzzle {record.id}: unknown {where} colour {item.color!r}, using {color.tag!r}")
        return ColoredPane(pane_at(item.ind, where), color)

    pane_map: List[PaneEntry] = []
    for entry in record.pane_map:
        neighbors: List[Neighbor] = [
            (pane_at(neighbor.pane.ind, "paneMap"), line_at(neighbor.line, "paneMap")) for neighbor in entry.neighbors
        ]
        pane_map.append((pane_at(entry.pane.ind, "paneMap"), neighbors))

    complexity = record.complexity
    return Puzzle(
        id=record.id,
        start_dots=[dot_at(index, "startDots") for index in record.start_dots],
        end_dots=[dot_at(index, "endDots") for index in record.end_dots],
        dots=dots,
        lines=lines,
        pane_map=pane_map,
        complexity=Complexity(
            black_dots_on_dot=[dot_at(index, "blackDotsOnDot") for index in complexity.black_dots_on_dot],
            black_dots_on_line=[line_at(item, "blackDotsOnLine") for item in complexity.black_dots_on_line],
            line_breaks=[line_at(item, "lineBreaks") for item in complexity.line_breaks],
            suns=[colored_at(item, "suns") for item in complexity.suns],
            squares=[colored_at(item, "squares") for item in complexity.squares],
        ),
    )


# ---------------------------------------------------------------------------
# Convenience wrappers
# ---------------------------------------------------------------------------


def copy_puzzle(puzzle: Puzzle) -> Puzzle:
    """Return an independent deep copy of ``puzzle`` via an encode/decode trip."""

    return decode_record(encode_puzzle(puzzle))


def puzzle_to_json(puzzle: Puzzle) -> JsonDict:
    return encode_puzzle(puzzle).to_json()


def puzzle_from_json(payload: Any, verbose: bool = True) -> Puzzle:
    return decode_record(PuzzleRecord.from_json(payload), verbose=verbose)


def puzzles_to_json(puzzles: Sequence[Puzzle]) -> List[JsonDict]:
    return [puzzle_to_json(puzzle) for puzzle in puzzles]


def describe_record(payload: Any) -> Optional[int]:
    """Best-effort id of a raw record, for error reports on unparseable data."""

    if isinstance(payload, dict):
        for key in ("id", "name"):
            value = payload.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
    return None


__all__ = [
    "PointRecord",
    "LineRecord",
    "PaneRef",
    "ColoredPaneRecord",
    "NeighborRecord",
    "PaneMapRecord",
    "ComplexityRecord",
    "PuzzleRecord",
    "encode_puzzle",
    "decode_record",
    "copy_puzzle",
    "puzzle_to_json",
    "puzzle_from_json",
    "puzzles_to_json",
    "describe_record",
]
