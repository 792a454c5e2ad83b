"""witness_editor.generators
===========================

Procedural construction of puzzles. The rectangular generator lays out a
``(size + 1) x (size + 1)`` lattice of dots inside the padded unit square,
joins every orthogonally adjacent pair, adds one exit stub leaving the grid at a
chosen vertex, and builds the dual graph of panes (one per cell).

Line order is deterministic: every horizontal line (column-major), then every
vertical line, then the exit line. Dots follow the same column-major order with
the exit dot last. The order matters because it is the index space on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .constants import DEFAULT_END_DOT_VECTOR, DEFAULT_PADDING, DEFAULT_SIZE, END_DOT_LENGTH
from .errors import InvalidInputError
from .geometry import Dot, Line, Pane
from .puzzle import Complexity, Neighbor, PaneEntry, Puzzle
from .types import GridPos, Vector


@dataclass
class RectPuzzleConfig:
    """Configuration knobs for :func:`generate_rect_puzzle`."""

    size: int = DEFAULT_SIZE
    padding: float = DEFAULT_PADDING
    end_dot_pos: Optional[GridPos] = None
    end_dot_vector: Vector = DEFAULT_END_DOT_VECTOR

    def __post_init__(self) -> None:
        if self.end_dot_pos is None:
            self.end_dot_pos = (self.size, self.size)


def _unit_vector(vector: Vector) -> np.ndarray:
    direction = np.asarray(vector, dtype=float)
    if direction.shape != (2,) or not np.all(np.isfinite(direction)):
        raise InvalidInputError(f"end_dot_vector must be a finite 2D vector, got {vector!r}")
    length = float(np.linalg.norm(direction))
    if length == 0.0:
        raise InvalidInputError("end_dot_vector must not be the zero vector")
    return direction / length


def _check_params(size: int, padding: float, end_dot_pos: GridPos) -> None:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
        raise InvalidInputError(f"size must be a positive integer, got {size!r}")
    if not 0.0 <= padding < 0.5:
        raise InvalidInputError(f"padding must lie in [0, 0.5), got {padding!r}")
    col, row = end_dot_pos
    if not (0 <= col <= size and 0 <= row <= size):
        raise InvalidInputError(f"end_dot_pos {end_dot_pos!r} lies outside a {size}x{size} grid")


def generate_rect_puzzle(
    size: int = DEFAULT_SIZE,
    padding: float = DEFAULT_PADDING,
    end_dot_pos: Optional[GridPos] = None,
    end_dot_vector: Vector = DEFAULT_END_DOT_VECTOR,
) -> Puzzle:
    """Build a rectangular grid puzzle with an empty :class:`Complexity`.

    Parameters
    ----------
    size:
        Number of cells per side. The grid has ``size + 1`` dots per side.
    padding:
        Margin between the unit square border and the outermost dots.
    end_dot_pos:
        Grid coordinate ``(column, row)`` of the vertex hosting the exit.
        Defaults to the far corner ``(size, size)``.
    end_dot_vector:
        Direction of the exit stub. It is normalised, then scaled by
        :data:`~witness_editor.constants.END_DOT_LENGTH`.

    Raises
    ------
    InvalidInputError
        For a non-positive ``size``, out-of-range ``padding`` or
        ``end_dot_pos``, or a zero-length ``end_dot_vector``.
    """

    if end_dot_pos is None:
        end_dot_pos = (size, size)
    _check_params(size, padding, end_dot_pos)
    direction = _unit_vector(end_dot_vector)

    count = size + 1
    coords = np.linspace(padding, 1.0 - padding, count)
    dist = float(coords[1] - coords[0])

    dots2d: List[List[Dot]] = [[Dot(float(coords[x]), float(coords[y])) for y in range(count)] for x in range(count)]
    x_lines = [[Line(dots2d[x][y], dots2d[x + 1][y]) for y in range(count)] for x in range(count - 1)]
    y_lines = [[Line(dots2d[x][y], dots2d[x][y + 1]) for y in range(count - 1)] for x in range(count)]

    dots = [dot for column in dots2d for dot in column]
    lines = [line for column in x_lines for line in column] + [line for column in y_lines for line in column]

    anchor = dots2d[end_dot_pos[0]][end_dot_pos[1]]
    exit_x, exit_y = np.array(anchor.as_tuple()) + END_DOT_LENGTH * direction
    exit_dot = Dot(float(exit_x), float(exit_y))
    dots.append(exit_dot)
    lines.append(Line(anchor, exit_dot))

    panes2d = [
        [Pane(dots2d[x][y].x + dist / 2, dots2d[x][y].y + dist / 2) for y in range(count - 1)]
        for x in range(count - 1)
    ]
    pane_map: List[PaneEntry] = []
    for x in range(count - 1):
        for y in range(count - 1):
            near: List[Neighbor] = []
            if x != 0:
                near.append((panes2d[x - 1][y], y_lines[x][y]))
            if x != count - 2:
                near.append((panes2d[x + 1][y], y_lines[x + 1][y]))
            if y != 0:
                near.append((panes2d[x][y - 1], x_lines[x][y]))
            if y != count - 2:
                near.append((panes2d[x][y + 1], x_lines[x][y + 1]))
            pane_map.append((panes2d[x][y], near))

    return Puzzle(
        id=0,
        start_dots=[dots2d[0][0]],
        end_dots=[exit_dot],
        dots=dots,
        lines=lines,
        pane_map=pane_map,
        complexity=Complexity.empty(),
    )


def generate_from_config(config: RectPuzzleConfig) -> Puzzle:
    """Convenience wrapper turning a :class:`RectPuzzleConfig` into a puzzle."""

    return generate_rect_puzzle(config.size, config.padding, config.end_dot_pos, config.end_dot_vector)


__all__ = ["RectPuzzleConfig", "generate_rect_puzzle", "generate_from_config"]
