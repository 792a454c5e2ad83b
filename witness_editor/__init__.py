"""Public package interface for the puzzle editor core."""

from .cli import main
from .codec import PuzzleRecord, copy_puzzle, decode_record, encode_puzzle
from .errors import CorruptDataError, InvalidInputError, PuzzleEditorError
from .generators import RectPuzzleConfig, generate_rect_puzzle
from .geometry import Dot, Line, Pane
from .puzzle import ColoredPane, Complexity, Puzzle, PuzzleColor
from .storage import PuzzleCollection, load_puzzles, read_collection, save_puzzles

__all__ = [
    "main",
    "PuzzleRecord",
    "encode_puzzle",
    "decode_record",
    "copy_puzzle",
    "CorruptDataError",
    "InvalidInputError",
    "PuzzleEditorError",
    "RectPuzzleConfig",
    "generate_rect_puzzle",
    "Dot",
    "Line",
    "Pane",
    "ColoredPane",
    "Complexity",
    "Puzzle",
    "PuzzleColor",
    "PuzzleCollection",
    "load_puzzles",
    "read_collection",
    "save_puzzles",
]
