from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from witness_editor.codec import (
    LineRecord,
    PuzzleRecord,
    copy_puzzle,
    decode_record,
    encode_puzzle,
    puzzle_from_json,
    puzzle_to_json,
)
from witness_editor.errors import CorruptDataError
from witness_editor.generators import generate_rect_puzzle
from witness_editor.geometry import Dot, Line, Pane
from witness_editor.puzzle import Puzzle, PuzzleColor


def decorated_puzzle() -> Puzzle:
    puzzle = generate_rect_puzzle(3)
    puzzle.id = 7
    complexity = puzzle.complexity
    complexity.add_black_dot_on_dot(puzzle.dots[5])
    complexity.add_black_dot_on_line(puzzle.lines[2])
    complexity.add_line_break(puzzle.lines[10])
    complexity.set_sun(puzzle.panes[0], PuzzleColor.RED)
    complexity.set_square(puzzle.panes[4], PuzzleColor.BLUE)
    return puzzle


def small_payload() -> dict:
    """Five dots in a square with a centre dot, one pane pair."""

    return {
        "id": 3,
        "startDots": [0],
        "endDots": [4],
        "dots": [
            {"x": 0.1, "y": 0.1},
            {"x": 0.9, "y": 0.1},
            {"x": 0.1, "y": 0.9},
            {"x": 0.9, "y": 0.9},
            {"x": 0.5, "y": 0.5},
        ],
        "lines": [
            {"dot1": 0, "dot2": 1},
            {"dot1": 0, "dot2": 2},
            {"dot1": 1, "dot2": 3},
            {"dot1": 2, "dot2": 3},
            {"dot1": 0, "dot2": 3},
        ],
        "panes": [{"x": 0.7, "y": 0.3}, {"x": 0.3, "y": 0.7}],
        "paneMap": [
            {"pane": {"ind": 0}, "neighbors": [{"pane": {"ind": 1}, "line": {"dot1": 0, "dot2": 3}}]},
            {"pane": {"ind": 1}, "neighbors": [{"pane": {"ind": 0}, "line": {"dot1": 3, "dot2": 0}}]},
        ],
        "complexity": {
            "blackDotsOnDot": [4],
            "blackDotsOnLine": [{"dot1": 1, "dot2": 0}],
            "lineBreaks": [{"dot1": 2, "dot2": 3}],
            "suns": [{"ind": 0, "color": "green"}],
            "squares": [{"ind": 1, "color": "black"}],
        },
    }


def test_round_trip_is_structurally_equal():
    puzzle = decorated_puzzle()
    record = encode_puzzle(puzzle)
    decoded = decode_record(record)
    assert encode_puzzle(decoded) == record
    assert decoded.id == 7
    assert [dot.as_tuple() for dot in decoded.dots] == [dot.as_tuple() for dot in puzzle.dots]
    assert decoded.complexity.suns[0].color is PuzzleColor.RED


def test_round_trip_shares_no_allocation():
    puzzle = decorated_puzzle()
    decoded = copy_puzzle(puzzle)
    original_ids = {id(obj) for obj in puzzle.dots + puzzle.panes + puzzle.lines}
    decoded_ids = {id(obj) for obj in decoded.dots + decoded.panes + decoded.lines}
    assert original_ids.isdisjoint(decoded_ids)
    assert decoded.complexity is not puzzle.complexity


def test_decode_restores_reference_sharing():
    decoded = copy_puzzle(decorated_puzzle())
    assert decoded.start_dots[0] is decoded.dots[0]
    assert decoded.end_dots[0] is decoded.dots[-1]
    assert decoded.lines[0].dot1 is decoded.dots[0]
    assert decoded.complexity.black_dots_on_dot[0] is decoded.dots[5]
    assert decoded.complexity.black_dots_on_line[0] is decoded.lines[2]
    assert decoded.complexity.suns[0].pane is decoded.pane_map[0][0]
    for pane, neighbors in decoded.pane_map:
        for other, line in neighbors:
            assert any(other is candidate for candidate in decoded.panes)
            assert any(line is candidate for candidate in decoded.lines)
    decoded.validate()


def test_encode_is_idempotent():
    puzzle = decorated_puzzle()
    assert encode_puzzle(puzzle) == encode_puzzle(puzzle)
    assert puzzle_to_json(puzzle) == puzzle_to_json(puzzle)


def test_encode_uses_identity_not_coordinates():
    a, b = Dot(0.5, 0.5), Dot(0.5, 0.5)
    c = Dot(0.9, 0.5)
    puzzle = Puzzle(0, [a], [c], [a, b, c], [Line(a, c), Line(b, c)], [])
    record = encode_puzzle(puzzle)
    assert [(line.dot1, line.dot2) for line in record.lines] == [(0, 2), (1, 2)]
    decoded = decode_record(record)
    assert decoded.lines[0].dot1 is not decoded.lines[1].dot1


def test_encode_rejects_foreign_references():
    puzzle = generate_rect_puzzle(2)
    puzzle.complexity.black_dots_on_dot.append(Dot(0.0, 0.0))
    with pytest.raises(CorruptDataError):
        encode_puzzle(puzzle)
    puzzle = generate_rect_puzzle(2)
    puzzle.complexity.set_sun(Pane(0.5, 0.5), PuzzleColor.RED)
    with pytest.raises(CorruptDataError):
        encode_puzzle(puzzle)


def test_json_layout_matches_file_format():
    payload = puzzle_to_json(decorated_puzzle())
    assert set(payload) == {"id", "startDots", "endDots", "dots", "lines", "panes", "paneMap", "complexity"}
    assert set(payload["complexity"]) == {"blackDotsOnDot", "blackDotsOnLine", "lineBreaks", "suns", "squares"}
    assert payload["dots"][0] == {"x": pytest.approx(0.18), "y": pytest.approx(0.18)}
    assert payload["complexity"]["suns"] == [{"ind": 0, "color": "red"}]
    assert payload["complexity"]["squares"] == [{"ind": 4, "color": "blue"}]
    entry = payload["paneMap"][0]
    assert entry["pane"] == {"ind": 0}
    assert set(entry["neighbors"][0]) == {"pane", "line"}
    json.dumps(payload)


def test_decode_hand_built_record():
    puzzle = puzzle_from_json(small_payload())
    assert puzzle.id == 3
    assert len(puzzle.dots) == 5
    assert puzzle.complexity.black_dots_on_dot == [puzzle.dots[4]]
    assert puzzle.complexity.black_dots_on_line[0] is puzzle.lines[0]
    assert puzzle.complexity.line_breaks[0] is puzzle.lines[3]
    diagonal = puzzle.lines[4]
    assert puzzle.pane_map[0][1][0][1] is diagonal
    assert puzzle.pane_map[1][1][0][1] is diagonal
    assert puzzle.complexity.suns[0].color is PuzzleColor.GREEN
    puzzle.validate()


def test_reversed_edges_take_stored_line_orientation():
    record = encode_puzzle(puzzle_from_json(small_payload()))
    assert record.pane_map[1].neighbors[0].line == LineRecord(0, 3)
    assert record.complexity.black_dots_on_line == [LineRecord(0, 1)]
    assert record.complexity.line_breaks == [LineRecord(2, 3)]


def test_missing_optional_fields_default_to_empty():
    payload = small_payload()
    del payload["complexity"]["lineBreaks"]
    assert puzzle_from_json(payload).complexity.line_breaks == []

    payload = small_payload()
    del payload["complexity"]
    del payload["startDots"]
    puzzle = puzzle_from_json(payload)
    assert puzzle.complexity.is_empty()
    assert puzzle.start_dots == []


def test_unknown_fields_are_ignored():
    payload = small_payload()
    payload["author"] = "someone"
    payload["complexity"]["triangles"] = [{"ind": 0, "count": 2}]
    assert puzzle_from_json(payload).id == 3


@pytest.mark.parametrize("key", ["dots", "lines", "panes", "paneMap"])
def test_missing_required_field_is_corrupt(key):
    payload = small_payload()
    del payload[key]
    with pytest.raises(CorruptDataError):
        PuzzleRecord.from_json(payload)


@pytest.mark.parametrize("key", ["dots", "lines", "panes", "paneMap"])
def test_null_required_field_is_corrupt(key):
    payload = small_payload()
    payload[key] = None
    with pytest.raises(CorruptDataError):
        PuzzleRecord.from_json(payload)


def test_out_of_range_index_is_corrupt():
    payload = small_payload()
    payload["lines"][0]["dot1"] = 999
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)


def test_negative_index_is_corrupt():
    payload = small_payload()
    payload["complexity"]["suns"][0]["ind"] = -1
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)


def test_duplicate_or_degenerate_lines_are_corrupt():
    payload = small_payload()
    payload["lines"].append({"dot1": 1, "dot2": 0})
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)
    payload = small_payload()
    payload["lines"][0] = {"dot1": 2, "dot2": 2}
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)


def test_wrong_types_are_corrupt():
    payload = small_payload()
    payload["dots"][0]["x"] = "left"
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)
    payload = small_payload()
    payload["startDots"] = [True]
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)


@pytest.mark.parametrize("value", [10**400, float("nan"), float("inf")])
def test_unrepresentable_coordinates_are_corrupt(value):
    payload = small_payload()
    payload["panes"][1]["y"] = value
    with pytest.raises(CorruptDataError):
        puzzle_from_json(payload)


def test_unknown_color_falls_back(capsys):
    payload = small_payload()
    payload["complexity"]["suns"] = [{"ind": 0, "color": "magenta"}]
    puzzle = puzzle_from_json(payload)
    assert puzzle.complexity.suns[0].color is PuzzleColor.WHITE
    assert "magenta" in capsys.readouterr().out


def test_legacy_keys_are_understood():
    payload = small_payload()
    payload["name"] = payload.pop("id")
    payload["complexityJson"] = payload.pop("complexity")
    payload["paneMap"] = [
        {"first": {"ind": 0}, "second": [{"first": {"ind": 1}, "second": {"dot1": 0, "dot2": 3}}]},
        {"first": {"ind": 1}, "second": [{"first": {"ind": 0}, "second": {"dot1": 0, "dot2": 3}}]},
    ]
    puzzle = puzzle_from_json(payload)
    assert puzzle.id == 3
    assert puzzle.complexity.suns[0].color is PuzzleColor.GREEN
    assert puzzle.pane_map[0][1][0][0] is puzzle.panes[1]


def test_missing_id_defaults_to_minus_one():
    payload = small_payload()
    del payload["id"]
    assert puzzle_from_json(payload).id == -1


def test_copy_is_independent():
    puzzle = decorated_puzzle()
    copy = copy_puzzle(puzzle)
    copy.complexity.add_black_dot_on_dot(copy.dots[0])
    copy.complexity.set_sun(copy.panes[0], PuzzleColor.GREEN)
    copy.dots[1].x = 0.0
    assert len(puzzle.complexity.black_dots_on_dot) == 1
    assert puzzle.complexity.suns[0].color is PuzzleColor.RED
    assert puzzle.dots[1].x != 0.0


def test_color_persisted_by_tag_through_text():
    text = json.dumps(puzzle_to_json(decorated_puzzle()))
    assert '"color": "red"' in text
    restored = puzzle_from_json(json.loads(text))
    assert restored.complexity.squares[0].color is PuzzleColor.BLUE
