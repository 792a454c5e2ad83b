"""witness_editor.editing
========================

Click semantics of the puzzle editor, expressed as plain functions over a
:class:`~witness_editor.puzzle.Puzzle`. A front-end resolves the hovered dot,
line or pane to its index and calls the matching ``toggle_*`` helper with the
currently selected tool; the helpers mutate ``puzzle.complexity`` in place.

Clicking an element that already carries a constraint removes it whatever the
selected tool is; otherwise the selected tool decides what gets added.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .errors import InvalidInputError
from .puzzle import Puzzle, PuzzleColor


class Tool(Enum):
    """Constraint kinds selectable in the editor palette."""

    BLACK_DOT = "black_dot"
    LINE_BREAK = "line_break"
    SUN = "sun"
    SQUARE = "square"

    @property
    def is_colored(self) -> bool:
        return self in (Tool.SUN, Tool.SQUARE)


def toggle_dot(puzzle: Puzzle, dot_index: int, tool: Optional[Tool]) -> bool:
    """Toggle a black dot on ``puzzle.dots[dot_index]``.

    Returns ``True`` when the puzzle changed.
    """

    dot = puzzle.dots[dot_index]
    complexity = puzzle.complexity
    if dot in complexity.black_dots_on_dot:
        return complexity.remove_black_dot_on_dot(dot)
    if tool is Tool.BLACK_DOT:
        return complexity.add_black_dot_on_dot(dot)
    return False


def toggle_line(puzzle: Puzzle, line_index: int, tool: Optional[Tool]) -> bool:
    """Toggle a black dot or a break on ``puzzle.lines[line_index]``."""

    line = puzzle.lines[line_index]
    complexity = puzzle.complexity
    if line in complexity.black_dots_on_line:
        return complexity.remove_black_dot_on_line(line)
    if line in complexity.line_breaks:
        return complexity.remove_line_break(line)
    if tool is Tool.BLACK_DOT:
        return complexity.add_black_dot_on_line(line)
    if tool is Tool.LINE_BREAK:
        return complexity.add_line_break(line)
    return False


def toggle_pane(
    puzzle: Puzzle,
    pane_index: int,
    tool: Optional[Tool],
    color: Optional[PuzzleColor] = None,
) -> bool:
    """Toggle a sun or square on the ``pane_index``-th pane.

    A pane already holding a constraint of ``color`` is cleared. Otherwise a
    colour tool replaces whatever the pane held with a new constraint, so the
    pane never carries more than one.
    """

    pane = puzzle.pane_map[pane_index][0]
    complexity = puzzle.complexity
    current = complexity.colored_at(pane)
    if current is not None and current[1].color is color:
        return complexity.clear_pane(pane)
    if tool is None or not tool.is_colored:
        return False
    if color is None:
        raise InvalidInputError(f"{tool.value} needs a colour")
    if tool is Tool.SUN:
        complexity.set_sun(pane, color)
    else:
        complexity.set_square(pane, color)
    return True


__all__ = ["Tool", "toggle_dot", "toggle_line", "toggle_pane"]
