"""witness_editor.geometry
=========================

Geometry primitives for the puzzle graph. Coordinates live in the normalised
``[0, 1]`` puzzle square.

Dots and panes compare by *identity*: two dots sharing coordinates are still two
different vertices unless they are the same object. Lines compare by the
identities of their endpoints, so a freshly built ``Line(a, b)`` equals an
existing ``Line(b, a)`` when both join the same two dot objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidInputError


@dataclass(eq=False)
class Dot:
    """A vertex of the puzzle graph."""

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(eq=False)
class Pane:
    """Label position of a face of the puzzle graph.

    The pane is not the polygon itself; it marks where the fill region and any
    region constraint icon are drawn.
    """

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(eq=False)
class Line:
    """An edge between two distinct :class:`Dot` objects."""

    dot1: Dot
    dot2: Dot

    def __post_init__(self) -> None:
        if self.dot1 is self.dot2:
            raise InvalidInputError("A line must join two distinct dots")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.connects(other.dot1, other.dot2)

    def __hash__(self) -> int:
        return hash(frozenset((id(self.dot1), id(self.dot2))))

    @property
    def x(self) -> float:
        """Midpoint x, used to place constraints drawn on the line."""

        return (self.dot1.x + self.dot2.x) / 2

    @property
    def y(self) -> float:
        return (self.dot1.y + self.dot2.y) / 2

    def connects(self, a: Dot, b: Dot) -> bool:
        """Return ``True`` when this line joins exactly ``a`` and ``b``."""

        return (self.dot1 is a and self.dot2 is b) or (self.dot1 is b and self.dot2 is a)

    def other(self, dot: Dot) -> Dot:
        """Return the endpoint opposite ``dot``."""

        if dot is self.dot1:
            return self.dot2
        if dot is self.dot2:
            return self.dot1
        raise InvalidInputError("Dot is not an endpoint of this line")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"Line({self.dot1.as_tuple()} -> {self.dot2.as_tuple()})"


__all__ = ["Dot", "Pane", "Line"]
