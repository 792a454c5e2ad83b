"""witness_editor.puzzle
=======================

The puzzle aggregate: the graph of dots, lines and panes plus the constraint
annotations ("complexity") an editor places on top of it.

All membership tests go through the identity semantics defined in
:mod:`witness_editor.geometry`, so removing a dot from a constraint list removes
that exact vertex even when another dot shares its coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import FALLBACK_COLOR_TAG
from .errors import CorruptDataError
from .geometry import Dot, Line, Pane


class PuzzleColor(Enum):
    """Closed palette for sun and square constraints.

    Each member carries the stable tag written to disk and its display colour.
    The tag, never the member position, is what gets persisted.
    """

    BLACK = ("black", (0, 0, 0))
    WHITE = ("white", (255, 255, 255))
    RED = ("red", (255, 0, 0))
    GREEN = ("green", (0, 255, 0))
    BLUE = ("blue", (0, 0, 255))

    def __init__(self, tag: str, rgb: Tuple[int, int, int]) -> None:
        self.tag = tag
        self.rgb = rgb

    @classmethod
    def from_tag(cls, tag: object) -> Optional["PuzzleColor"]:
        """Return the member whose tag is ``tag`` or ``None`` if unknown."""

        for member in cls:
            if member.tag == tag:
                return member
        return None

    @classmethod
    def fallback(cls) -> "PuzzleColor":
        """Colour substituted for tags this version does not recognise."""

        return cls.from_tag(FALLBACK_COLOR_TAG)  # type: ignore[return-value]


@dataclass(frozen=True)
class ColoredPane:
    """A pane reference paired with the colour of the constraint it carries."""

    pane: Pane
    color: PuzzleColor


Neighbor = Tuple[Pane, Line]
PaneEntry = Tuple[Pane, List[Neighbor]]


@dataclass
class Complexity:
    """Solvability constraints overlaid on the base graph.

    Every collection holds references into the owning puzzle. A pane carries at
    most one sun-or-square constraint; :meth:`set_sun` and :meth:`set_square`
    clear whatever the pane held before adding the new entry.
    """

    black_dots_on_dot: List[Dot] = field(default_factory=list)
    black_dots_on_line: List[Line] = field(default_factory=list)
    line_breaks: List[Line] = field(default_factory=list)
    suns: List[ColoredPane] = field(default_factory=list)
    squares: List[ColoredPane] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Complexity":
        return cls()

    def is_empty(self) -> bool:
        return not (
            self.black_dots_on_dot or self.black_dots_on_line or self.line_breaks or self.suns or self.squares
        )

    # ------------------------------------------------------------------
    # Dots and lines
    # ------------------------------------------------------------------
    def add_black_dot_on_dot(self, dot: Dot) -> bool:
        """Place an obstacle on ``dot``; returns ``False`` if already present."""

        return _add_once(self.black_dots_on_dot, dot)

    def remove_black_dot_on_dot(self, dot: Dot) -> bool:
        return _remove_all(self.black_dots_on_dot, dot)

    def add_black_dot_on_line(self, line: Line) -> bool:
        return _add_once(self.black_dots_on_line, line)

    def remove_black_dot_on_line(self, line: Line) -> bool:
        return _remove_all(self.black_dots_on_line, line)

    def add_line_break(self, line: Line) -> bool:
        return _add_once(self.line_breaks, line)

    def remove_line_break(self, line: Line) -> bool:
        return _remove_all(self.line_breaks, line)

    # ------------------------------------------------------------------
    # Coloured pane constraints
    # ------------------------------------------------------------------
    def colored_at(self, pane: Pane) -> Optional[Tuple[str, ColoredPane]]:
        """Return ``("sun" | "square", entry)`` for ``pane`` if it has one."""

        for entry in self.suns:
            if entry.pane is pane:
                return "sun", entry
        for entry in self.squares:
            if entry.pane is pane:
                return "square", entry
        return None

    def clear_pane(self, pane: Pane) -> bool:
        """Drop every sun and square placed on ``pane``."""

        before = len(self.suns) + len(self.squares)
        self.suns = [entry for entry in self.suns if entry.pane is not pane]
        self.squares = [entry for entry in self.squares if entry.pane is not pane]
        return len(self.suns) + len(self.squares) != before

    def set_sun(self, pane: Pane, color: PuzzleColor) -> None:
        self.clear_pane(pane)
        self.suns.append(ColoredPane(pane, color))

    def set_square(self, pane: Pane, color: PuzzleColor) -> None:
        self.clear_pane(pane)
        self.squares.append(ColoredPane(pane, color))


def _add_once(items: list, item: object) -> bool:
    if item in items:
        return False
    items.append(item)
    return True


def _remove_all(items: list, item: object) -> bool:
    before = len(items)
    items[:] = [existing for existing in items if existing != item]
    return len(items) != before


@dataclass(eq=False)
class Puzzle:
    """Aggregate root of a single puzzle.

    Parameters
    ----------
    id:
        Identifier unique inside a saved collection. Uniqueness is enforced by
        :class:`~witness_editor.storage.PuzzleCollection`, not here.
    start_dots, end_dots:
        Entry and exit vertices; both reference members of ``dots``.
    dots:
        Every vertex. Its order is the canonical index space used on disk.
    lines:
        Every traversable edge, referencing members of ``dots``.
    pane_map:
        For each pane, its neighbouring ``(pane, shared_line)`` pairs. The
        first elements, in order, define the pane index space.
    complexity:
        Constraint annotations.
    """

    id: int
    start_dots: List[Dot]
    end_dots: List[Dot]
    dots: List[Dot]
    lines: List[Line]
    pane_map: List[PaneEntry]
    complexity: Complexity = field(default_factory=Complexity.empty)

    @property
    def panes(self) -> List[Pane]:
        return [pane for pane, _ in self.pane_map]

    def neighbors_of(self, pane: Pane) -> List[Neighbor]:
        for candidate, neighbors in self.pane_map:
            if candidate is pane:
                return neighbors
        raise CorruptDataError("Pane is not part of this puzzle")

    def index_of_dot(self, dot: Dot) -> int:
        return _index_by_identity(self.dots, dot)

    def index_of_pane(self, pane: Pane) -> int:
        return _index_by_identity(self.panes, pane)

    def find_line(self, a: Dot, b: Dot) -> Optional[Line]:
        """Return the line of ``lines`` joining ``a`` and ``b`` if one exists."""

        for line in self.lines:
            if line.connects(a, b):
                return line
        return None

    def validate(self) -> None:
        """Raise :class:`CorruptDataError` if any structural invariant fails."""

        dot_ids = {id(dot) for dot in self.dots}
        pane_ids = {id(pane) for pane in self.panes}

        def require_dots(dots: Iterable[Dot], where: str) -> None:
            for dot in dots:
                if id(dot) not in dot_ids:
                    raise CorruptDataError(f"{where} references a dot outside the puzzle")

        def require_lines(lines: Iterable[Line], where: str) -> None:
            for line in lines:
                require_dots((line.dot1, line.dot2), where)

        def require_panes(panes: Iterable[Pane], where: str) -> None:
            for pane in panes:
                if id(pane) not in pane_ids:
                    raise CorruptDataError(f"{where} references a pane outside the puzzle")

        require_dots(self.start_dots, "startDots")
        require_dots(self.end_dots, "endDots")
        require_lines(self.lines, "lines")
        require_dots(self.complexity.black_dots_on_dot, "blackDotsOnDot")
        require_lines(self.complexity.black_dots_on_line, "blackDotsOnLine")
        require_lines(self.complexity.line_breaks, "lineBreaks")
        require_panes((entry.pane for entry in self.complexity.suns), "suns")
        require_panes((entry.pane for entry in self.complexity.squares), "squares")

        if len(set(self.lines)) != len(self.lines):
            raise CorruptDataError("lines contains the same dot pair twice")

        if len(pane_ids) != len(self.pane_map):
            raise CorruptDataError("paneMap lists the same pane twice")
        adjacency: Dict[int, List[Neighbor]] = {id(pane): neighbors for pane, neighbors in self.pane_map}
        for pane, neighbors in self.pane_map:
            require_panes((other for other, _ in neighbors), "paneMap")
            require_lines((line for _, line in neighbors), "paneMap")
            for other, line in neighbors:
                mirrored = any(back is pane and back_line == line for back, back_line in adjacency[id(other)])
                if not mirrored:
                    raise CorruptDataError("paneMap adjacency is not symmetric")


def _index_by_identity(items: List, target: object) -> int:
    for index, item in enumerate(items):
        if item is target:
            return index
    raise CorruptDataError("Reference is not part of this puzzle")


__all__ = [
    "PuzzleColor",
    "ColoredPane",
    "Complexity",
    "Puzzle",
    "Neighbor",
    "PaneEntry",
]
