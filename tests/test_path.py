"""Tests for PathCommands: construction, round trips and update propagation."""

from __future__ import annotations

import json
import math

import pytest

from pathedit.commands import CubicBezier, LineTo
from pathedit.common import Gesture
from pathedit.errors import InvariantViolation, MalformedCommandError, PathSyntaxError
from pathedit.geom import Point
from pathedit.path import PathCommands
from pathedit.path_support import FormatOptions, Guide
from pathedit.svgpath import SvgPathParser

ALL_COMMANDS_DEFS = [
    ("M", Point(0, 0)),
    ("l", Point(10, 0)),
    ("H", 25.0),
    ("v", -3.0),
    ("C", Point(1, 2), Point(3.5, 4), Point(5, 6)),
    ("s", Point(7, 8), Point(9, -10.25)),
    ("S", Point(1, 1), Point(2, 2)),
    ("L", Point(0.1, 0.3)),
    ("z",),
]


###############################################################################
# Construction
###############################################################################


class TestConstruction:
    """Tests for creating paths."""

    def test_from_defs(self):
        """from_defs creates one segment per definition."""
        path = PathCommands.from_defs(ALL_COMMANDS_DEFS)
        assert len(path) == len(ALL_COMMANDS_DEFS)
        assert path.first is path[0]

    def test_first_command_must_be_move_to(self):
        """A path starting with anything but M/m is malformed."""
        with pytest.raises(MalformedCommandError):
            PathCommands.from_defs([("L", Point(1, 1))])

    def test_empty_defs(self):
        """A path needs at least one command."""
        with pytest.raises(MalformedCommandError):
            PathCommands.from_defs([])

    def test_string_is_not_a_definition_list(self):
        """Strings are refused by from_defs."""
        with pytest.raises(MalformedCommandError):
            PathCommands.from_defs("M 0 0")

    def test_malformed_command_names_position(self):
        """The error tells which command is malformed."""
        with pytest.raises(MalformedCommandError, match="Command 2"):
            PathCommands.from_defs([("M", Point(0, 0)), ("L", Point(1, 1)), ("H", Point(1, 1))])

    def test_single_move_to(self):
        """A lone MoveTo is a valid path."""
        path = PathCommands.from_defs([("m", Point(3, 4))])
        assert path.absolute_ends() == [Point(3, 4)]
        assert path.serialize() == "m 3 4"

    def test_not_a_sequence(self):
        """Anything but a sequence of definitions is malformed."""
        with pytest.raises(MalformedCommandError):
            PathCommands.from_defs(None)
        with pytest.raises(MalformedCommandError):
            PathCommands.from_defs(5)

    @pytest.mark.parametrize(
        "defs",
        [
            [("M", Point(0, 0)), ("L", Point(math.inf, 1))],
            [("M", Point(math.nan, 0))],
            [("M", Point(0, 0)), ("h", -math.inf)],
            [("M", Point(0, 0)), ("C", Point(0, 0), Point(1, math.nan), Point(2, 2))],
        ],
    )
    def test_non_finite_geometry(self, defs):
        """inf and nan have no path-string form and are refused."""
        with pytest.raises(MalformedCommandError):
            PathCommands.from_defs(defs)

    def test_from_string(self):
        """from_string parses the path string."""
        path = PathCommands.from_string("M 10 10 L 5 5 l 1 1")
        assert path.absolute_ends() == [Point(10, 10), Point(5, 5), Point(6, 6)]

    def test_from_string_syntax_error(self):
        """Parse errors are passed on."""
        with pytest.raises(PathSyntaxError):
            PathCommands.from_string("M 1 2 H 3 4")

    def test_commands_returns_copy(self):
        """Changing the returned list does not change the path."""
        path = PathCommands.from_string("M 0 0 L 1 1")
        path.commands.clear()
        assert len(path) == 2


###############################################################################
# Serialization
###############################################################################


class TestRoundTrip:
    """Tests for lossless round trips."""

    def test_to_defs_roundtrip(self):
        """from_defs(d).to_defs() == d"""
        assert PathCommands.from_defs(ALL_COMMANDS_DEFS).to_defs() == ALL_COMMANDS_DEFS

    def test_serialize_parse_roundtrip(self):
        """parse(from_defs(d).serialize()) == d"""
        path_string = PathCommands.from_defs(ALL_COMMANDS_DEFS).serialize()
        assert SvgPathParser.parse(path_string) == ALL_COMMANDS_DEFS

    def test_serialize(self):
        """Segments are joined by single spaces."""
        path = PathCommands.from_defs(ALL_COMMANDS_DEFS)
        assert path.serialize() == (
            "M 0 0 l 10 0 H 25 v -3 C 1 2, 3.5 4, 5 6 s 7 8, 9 -10.25 S 1 1, 2 2 L 0.1 0.3 z"
        )
        assert str(path) == path.serialize()

    def test_serialize_with_format_options(self):
        """Format options given at construction are used by serialize()."""
        path = PathCommands.from_string(
            "M 0 0 C 1.23456 2, 3 4, 5 6", format_options=FormatOptions(point_separator=" ", precision=1)
        )
        assert path.serialize() == "M 0 0 C 1.2 2 3 4 5 6"
        assert path.serialize(FormatOptions()) == "M 0 0 C 1.23456 2, 3 4, 5 6"

    def test_json_roundtrip(self):
        """to_json is plain JSON data which from_json reads back."""
        path = PathCommands.from_defs(ALL_COMMANDS_DEFS)
        data = json.loads(json.dumps(path.to_json()))
        assert data[0] == ["M", {"x": 0, "y": 0}]
        assert data[2] == ["H", 25.0]
        assert PathCommands.from_json(data).to_defs() == ALL_COMMANDS_DEFS

    def test_roundtrip_after_editing(self):
        """Edited geometry survives a round trip through the path string."""
        path = PathCommands.from_string("M 0 0 c 1 1, 2 2, 3 3")
        path.apply_delta(1, "end", Point(0.1, 0.2), "up")
        assert PathCommands.from_string(path.serialize()).to_defs() == path.to_defs()


###############################################################################
# Propagation
###############################################################################


class TestPropagation:
    """Tests for updates reaching all dependent segments."""

    def test_relative_successors_follow(self):
        """Mutating segment 1 moves the absolute positions of segments 2 and 3."""
        path = PathCommands.from_string("M 0 0 l 10 0 l 0 10 l 5 5")
        path.apply_delta(1, "end", Point(5, 5))
        points = path.interaction_points()
        assert points[1].positions["end"] == Point(15, 5)
        assert points[2].positions["end"] == Point(15, 15)
        assert points[3].positions["end"] == Point(20, 20)
        assert path.absolute_ends() == [Point(0, 0), Point(15, 5), Point(15, 15), Point(20, 20)]

    def test_move_to_drags_relative_path(self):
        """Dragging the start moves a fully relative path as a whole."""
        path = PathCommands.from_string("M 0 0 l 10 0 h 5 v 5 z")
        path.apply_delta(0, "end", Point(1, 2))
        assert path.absolute_ends() == [Point(1, 2), Point(11, 2), Point(16, 2), Point(16, 7), Point(16, 7)]

    def test_reflected_guide_follows_previous_curve(self):
        """Dragging control2 of a C moves the reflected control point of the following S."""
        path = PathCommands.from_string("M 0 0 C 0 10 10 10 10 0 S 20 -10 20 0")
        path.apply_delta(1, "control2", Point(2, 0))
        smooth = path.interaction_points()[2]
        assert smooth.positions["control1"] == Point(8, -10)
        assert smooth.guides[0].end == Point(8, -10)

    def test_reflected_guide_follows_previous_end(self):
        """Dragging the end of a C moves both its control2 and the reflection."""
        path = PathCommands.from_string("M 0 0 C 0 10 10 10 10 0 s 10 -10 10 0")
        path.apply_delta(1, "end", Point(0, 5))
        smooth = path.interaction_points()[2]
        # control2 (10, 15) reflected through end (10, 5)
        assert smooth.positions["control1"] == Point(10, -5)
        assert smooth.positions["end"] == Point(20, 5)

    def test_absolute_cubic_control1_follows_start(self):
        """The first control point of an absolute C follows its start point."""
        path = PathCommands.from_string("M 0 0 L 10 0 C 10 10, 20 10, 20 0")
        path.apply_delta(1, "end", Point(0, 5))
        assert path[2].control1 == Point(10, 15)
        assert path.interaction_points()[2].guides[0] == Guide(Point(10, 5), Point(10, 15))
        path.apply_delta(1, "end", Point(0, 0))
        assert path[2].control1 == Point(10, 10)

    def test_relative_cubic_control1_moves_with_start(self):
        """A relative C keeps its stored control1; its absolute position moves."""
        path = PathCommands.from_string("M 0 0 l 10 0 c 0 10, 10 10, 10 0")
        path.apply_delta(1, "end", Point(0, 5))
        assert path[2].control1 == Point(0, 10)
        assert path.interaction_points()[2].positions["control1"] == Point(10, 15)

    def test_interaction_points_of_every_segment(self):
        """There is one entry per segment."""
        path = PathCommands.from_defs(ALL_COMMANDS_DEFS)
        assert len(path.interaction_points()) == len(path)
        assert path.interaction_points()[-1].handles == {}

    def test_helpers(self):
        """helpers lists all handles and guides."""
        path = PathCommands.from_string("M 0 0 C 0 10 10 10 10 0")
        assert len(path.helpers) == 1 + 3 + 2

    def test_bounding_box(self):
        """The bounding box spans all handles including control points."""
        path = PathCommands.from_string("M 0 0 C 0 10 15 10 10 0 L 5 -3")
        assert path.bounding_box().extent == (0.0, -3.0, 15.0, 10.0)


###############################################################################
# Gestures
###############################################################################


class TestGestures:
    """Tests for move/up handling and baselines."""

    def test_move_does_not_commit(self):
        """Deltas during a gesture are taken from the gesture start."""
        path = PathCommands.from_string("M 0 0 L 10 0")
        path.apply_delta(1, "end", Point(5, 0), "move")
        path.apply_delta(1, "end", Point(1, 0), "move")
        assert path[1].end == Point(11, 0)

    def test_up_commits_baseline(self):
        """After "up" the next gesture starts from the committed geometry."""
        path = PathCommands.from_string("M 0 0 L 10 0")
        path.apply_delta(1, "end", Point(5, 0), Gesture.UP)
        path.apply_delta(1, "end", Point(1, 0), Gesture.MOVE)
        assert path[1].end == Point(16, 0)

    def test_zero_delta_gesture_is_noop(self):
        """A drag that ends where it started leaves the path unchanged."""
        path = PathCommands.from_defs(ALL_COMMANDS_DEFS)
        path.apply_delta(4, "end", Point(3, 3), "move")
        path.apply_delta(4, "end", Point(0, 0), "up")
        assert path.to_defs() == ALL_COMMANDS_DEFS

    def test_zero_delta_keeps_absolute_ends(self):
        """A zero delta does not change any absolute position."""
        path = PathCommands.from_defs(ALL_COMMANDS_DEFS)
        before = path.absolute_ends()
        for index, points in enumerate(path.interaction_points()):
            for name in points.interactive_names:
                path.apply_delta(index, name, Point(0, 0))
        assert path.absolute_ends() == before

    def test_follow_after_commit(self):
        """The control point follow-up starts from the committed start point."""
        path = PathCommands.from_string("M 0 0 L 10 0 C 10 10, 20 10, 20 0")
        path.apply_delta(1, "end", Point(0, 5), "up")
        path.apply_delta(1, "end", Point(0, 1), "move")
        assert path[2].control1 == Point(10, 16)

    def test_on_update_callback(self):
        """The callback receives the gesture and the path."""
        calls = []
        path = PathCommands.from_string(
            "M 0 0 L 10 0", on_update=lambda gesture, p: calls.append((gesture, p.serialize()))
        )
        path.apply_delta(1, "end", Point(1, 0))
        path.apply_delta(1, "end", Point(2, 0), "up")
        assert calls == [(Gesture.MOVE, "M 0 0 L 11 0"), (Gesture.UP, "M 0 0 L 12 0")]

    def test_returns_interaction_points(self):
        """apply_delta returns the updated interaction points."""
        path = PathCommands.from_string("M 0 0 L 10 0")
        points = path.apply_delta(1, "end", Point(1, 1))
        assert points[1].positions["end"] == Point(11, 1)

    def test_non_finite_delta(self):
        """A non-finite delta is refused before anything changes."""
        path = PathCommands.from_string("M 0 0 L 10 0")
        with pytest.raises(ValueError):
            path.apply_delta(1, "end", Point(math.inf, 0))
        assert path.serialize() == "M 0 0 L 10 0"
        assert SvgPathParser.is_valid(path.serialize())

    def test_unknown_gesture(self):
        """Only "move" and "up" are gestures."""
        path = PathCommands.from_string("M 0 0 L 10 0")
        with pytest.raises(ValueError):
            path.apply_delta(1, "end", Point(1, 1), "down")

    def test_invalid_index_or_handle(self):
        """Unknown segments and handles are invariant violations."""
        path = PathCommands.from_string("M 0 0 L 10 0 Z")
        with pytest.raises(InvariantViolation):
            path.apply_delta(3, "end", Point(1, 1))
        with pytest.raises(InvariantViolation):
            path.apply_delta(-1, "end", Point(1, 1))
        with pytest.raises(InvariantViolation):
            path.apply_delta(2, "end", Point(1, 1))
        assert path.serialize() == "M 0 0 L 10 0 Z"


###############################################################################
# Propagation cost
###############################################################################


def count_resolve_end(monkeypatch, cls):
    """Record the index of every segment of class _cls_ whose end is resolved."""
    calls = []
    resolve_end = cls.resolve_end

    def counting_resolve_end(self, start):
        calls.append(self.index)
        return resolve_end(self, start)

    monkeypatch.setattr(cls, "resolve_end", counting_resolve_end)
    return calls


def test_move_resolves_each_end_once(monkeypatch):
    """A drag on a long relative path resolves every segment end exactly once."""
    path = PathCommands.from_string("M 0 0 " + "l 1 1 " * 500)
    calls = count_resolve_end(monkeypatch, LineTo)

    points = path.apply_delta(1, "end", Point(1, 0))

    assert sorted(calls) == list(range(1, 501))
    assert points[500].positions["end"] == Point(501, 500)


def test_commit_resolves_each_end_once(monkeypatch):
    """Committing a long chain of relative curves needs a single forward pass."""
    path = PathCommands.from_string("M 0 0 " + "c 0 1, 1 1, 1 0 " * 300 + "s 1 -1, 1 0")
    calls = count_resolve_end(monkeypatch, CubicBezier)

    points = path.apply_delta(300, "end", Point(0, 2), "up")

    assert sorted(calls) == list(range(1, 301))
    assert points[300].positions["end"] == Point(300, 2)
    assert points[301].positions["control1"] == Point(300, 1)
