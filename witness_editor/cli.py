"""witness_editor.cli
====================

Command-line front-end over a saved puzzle collection. It covers the menu
actions of the graphical editor (create, renumber, delete, duplicate) so
collections can be maintained from scripts.
"""

from __future__ import annotations

import argparse
import json

from .codec import puzzle_to_json
from .constants import DEFAULT_END_DOT_VECTOR, DEFAULT_PADDING, DEFAULT_SIZE, FAIL_LOG, SAVE_PATH
from .errors import CorruptDataError, InvalidInputError
from .generators import RectPuzzleConfig
from .storage import PuzzleCollection


def _summary(puzzle) -> str:
    complexity = puzzle.complexity
    return (
        f"id={puzzle.id} dots={len(puzzle.dots)} lines={len(puzzle.lines)} panes={len(puzzle.pane_map)} "
        f"black_dots={len(complexity.black_dots_on_dot) + len(complexity.black_dots_on_line)} "
        f"breaks={len(complexity.line_breaks)} suns={len(complexity.suns)} squares={len(complexity.squares)}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("witness-editor", description="Manage a saved puzzle collection")
    parser.add_argument("--path", default=SAVE_PATH, help="Collection JSON file")
    parser.add_argument("--fail-log", default=FAIL_LOG, help="JSONL file receiving skipped records")
    parser.add_argument("--quiet", action="store_true", help="Suppress load warnings")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List stored puzzles")

    new = sub.add_parser("new", help="Append a generated rectangular puzzle")
    new.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Cells per side")
    new.add_argument("--padding", type=float, default=DEFAULT_PADDING, help="Margin inside the unit square")
    new.add_argument("--end-pos", type=int, nargs=2, metavar=("COL", "ROW"), default=None, help="Exit vertex")
    new.add_argument(
        "--end-vector",
        type=float,
        nargs=2,
        metavar=("DX", "DY"),
        default=list(DEFAULT_END_DOT_VECTOR),
        help="Exit stub direction",
    )

    set_id = sub.add_parser("set-id", help="Change the id of the puzzle at INDEX")
    set_id.add_argument("index", type=int)
    set_id.add_argument("new_id")

    delete = sub.add_parser("delete", help="Remove the puzzle at INDEX")
    delete.add_argument("index", type=int)

    copy = sub.add_parser("copy", help="Duplicate the puzzle at INDEX under the next free id")
    copy.add_argument("index", type=int)

    show = sub.add_parser("show", help="Print the stored record of the puzzle at INDEX")
    show.add_argument("index", type=int)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the selected command."""

    parser = build_parser()
    args = parser.parse_args(argv)

    collection = PuzzleCollection(args.path, fail_log=args.fail_log)
    try:
        collection.load(verbose=not args.quiet)
    except CorruptDataError as exc:
        parser.error(str(exc))

    if args.command in ("set-id", "delete", "copy", "show") and not 0 <= args.index < len(collection):
        parser.error(f"index {args.index} out of range for {len(collection)} puzzles")

    try:
        if args.command == "list":
            for index, puzzle in enumerate(collection.puzzles):
                print(f"[{index}] {_summary(puzzle)}")
            if collection.failures:
                print(f"{len(collection.failures)} record(s) could not be loaded")
        elif args.command == "new":
            config = RectPuzzleConfig(
                size=args.size,
                padding=args.padding,
                end_dot_pos=tuple(args.end_pos) if args.end_pos else None,
                end_dot_vector=tuple(args.end_vector),
            )
            puzzle = collection.add_new(config)
            print(f"Created puzzle {_summary(puzzle)}")
        elif args.command == "set-id":
            old_id = collection[args.index].id
            collection.change_id(args.index, args.new_id)
            print(f"Renumbered puzzle {old_id} -> {args.new_id}")
        elif args.command == "delete":
            removed = collection.delete(args.index)
            print(f"Deleted puzzle {removed.id}")
        elif args.command == "copy":
            source_id = collection[args.index].id
            duplicate = collection.duplicate(args.index)
            print(f"Copied puzzle {source_id} as {duplicate.id}")
        elif args.command == "show":
            print(json.dumps(puzzle_to_json(collection[args.index]), indent=2))
    except InvalidInputError as exc:
        parser.error(str(exc))


__all__ = ["main", "build_parser"]
