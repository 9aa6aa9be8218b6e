"""Concrete path segments: move, line, horizontal/vertical line, cubic curves and close."""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Dict, Optional, Sequence, Tuple, Type

from pathedit.command import Command, CommandArg
from pathedit.common import is_relative_letter
from pathedit.errors import InvariantViolation, MalformedCommandError
from pathedit.geom import ORIGIN, Point, is_number, reflect_point
from pathedit.path_support import Guide, Handle, InteractionPoints, command_info

###############################################################################
# MoveTo / LineTo
###############################################################################


class MoveLineTo(Command):
    """Common part of MoveTo and LineTo: a single end point."""

    HANDLES = ("end",)

    def __init__(self, relative: bool, end: Point):
        super().__init__(relative)
        self.end = end
        self.initial_end = end

    @property
    def is_anchor(self) -> bool:
        return not self.relative

    def resolve_end(self, start: Optional[Point]) -> Point:
        self._check_start(start)
        if self.relative and start is not None:
            return self.end + start
        return self.end

    def args(self) -> Tuple[CommandArg, ...]:
        return (self.end,)

    def _interaction_points(self, ends: Sequence[Point]) -> InteractionPoints:
        return InteractionPoints(handles={"end": Handle("end", ends[self.index])})

    def _apply_delta(self, name: str, delta: Point) -> None:
        self.end = self.initial_end + delta

    def commit(self) -> None:
        self.initial_end = self.end


class MoveTo(MoveLineTo):
    """M / m - start the path at the end point. The first MoveTo is always absolute."""

    LETTER = "M"
    STARTS_PATH = True


class LineTo(MoveLineTo):
    """L / l - straight line to the end point."""

    LETTER = "L"


###############################################################################
# HorizontalLine / VerticalLine
###############################################################################


class StraightLine(Command):
    """Common part of HorizontalLine and VerticalLine: a single coordinate called length."""

    HANDLES = ("end",)

    def __init__(self, relative: bool, length: float):
        super().__init__(relative)
        self.length = length
        self.initial_length = length

    def resolve_end(self, start: Optional[Point]) -> Point:
        if start is None:
            raise self._missing_start()
        return self.resolve_end_from(start)

    @abstractmethod
    def resolve_end_from(self, start: Point) -> Point:
        """Absolute end when starting at the absolute point _start_."""

    def args(self) -> Tuple[CommandArg, ...]:
        return (self.length,)

    def _interaction_points(self, ends: Sequence[Point]) -> InteractionPoints:
        return InteractionPoints(handles={"end": Handle("end", ends[self.index])})

    def commit(self) -> None:
        self.initial_length = self.length


class HorizontalLine(StraightLine):
    """H / h - horizontal line, y stays unchanged."""

    LETTER = "H"

    def resolve_end_from(self, start: Point) -> Point:
        return Point((start.x if self.relative else 0.0) + self.length, start.y)

    def _apply_delta(self, name: str, delta: Point) -> None:
        # the y component of a drag is locked
        self.length = self.initial_length + delta.x


class VerticalLine(StraightLine):
    """V / v - vertical line, x stays unchanged."""

    LETTER = "V"

    def resolve_end_from(self, start: Point) -> Point:
        return Point(start.x, (start.y if self.relative else 0.0) + self.length)

    def _apply_delta(self, name: str, delta: Point) -> None:
        self.length = self.initial_length + delta.y


###############################################################################
# CubicBezier / SmoothCubicBezier
###############################################################################


class CubicBezier(Command):
    """C / c - cubic Bezier curve with two control points.

    Dragging the end moves control2 along, keeping the outgoing tangent.
    For an absolute curve, control1 follows the start point (the predecessor's
    end) when that one moves during a gesture.
    """

    LETTER = "C"
    HANDLES = ("control1", "control2", "end")

    def __init__(self, relative: bool, control1: Point, control2: Point, end: Point):
        super().__init__(relative)
        self.control1 = control1
        self.control2 = control2
        self.end = end
        self.initial_control1 = control1
        self.initial_control2 = control2
        self.initial_end = end
        self._control1_delta = ORIGIN
        self._initial_start: Optional[Point] = None

    @property
    def is_anchor(self) -> bool:
        return not self.relative

    def resolve_end(self, start: Optional[Point]) -> Point:
        self._check_start(start)
        if self.relative and start is not None:
            return self.end + start
        return self.end

    def args(self) -> Tuple[CommandArg, ...]:
        return (self.control1, self.control2, self.end)

    def _interaction_points(self, ends: Sequence[Point]) -> InteractionPoints:
        start = self.start_in(ends)
        control1 = self.resolve(self.control1, start)
        control2 = self.resolve(self.control2, start)
        end = ends[self.index]
        return InteractionPoints(
            handles={
                "control1": Handle("control1", control1),
                "control2": Handle("control2", control2),
                "end": Handle("end", end),
            },
            guides=(Guide(start, control1), Guide(end, control2)),
        )

    def _start_shift(self, start: Optional[Point]) -> Point:
        if self.relative or self._initial_start is None or start is None:
            return ORIGIN
        return start - self._initial_start

    def _update_control1(self, start: Optional[Point]) -> None:
        self.control1 = self.initial_control1 + self._control1_delta + self._start_shift(start)

    def _current_start(self) -> Optional[Point]:
        # only absolute curves track their start
        if self.relative or self.prev is None:
            return None
        return self.start()

    def _apply_delta(self, name: str, delta: Point) -> None:
        if name == "control1":
            self._control1_delta = delta
            self._update_control1(self._current_start())
        elif name == "control2":
            self.control2 = self.initial_control2 + delta
        else:
            self.end = self.initial_end + delta
            self.control2 = self.initial_control2 + delta

    def on_path_update(self, ends: Sequence[Point]) -> None:
        self._update_control1(None if self.prev is None else self.start_in(ends))

    def commit(self) -> None:
        self.initial_control1 = self.control1
        self.initial_control2 = self.control2
        self.initial_end = self.end
        self._control1_delta = ORIGIN
        self._initial_start = self._current_start()


class SmoothCubicBezier(Command):
    """S / s - cubic Bezier curve whose first control point mirrors the previous curve's second one."""

    LETTER = "S"
    HANDLES = ("control2", "end")

    def __init__(self, relative: bool, control2: Point, end: Point):
        super().__init__(relative)
        self.control2 = control2
        self.end = end
        self.initial_control2 = control2
        self.initial_end = end

    @property
    def is_anchor(self) -> bool:
        return not self.relative

    def resolve_end(self, start: Optional[Point]) -> Point:
        self._check_start(start)
        if self.relative and start is not None:
            return self.end + start
        return self.end

    def reflected_control1(self, ends: Optional[Sequence[Point]] = None) -> Point:
        """The effective (read-only) first control point in absolute coordinates.

        Reflection of the predecessor's second control point through the
        predecessor's end if the predecessor is a curve, else the predecessor's
        end itself. _ends_ are the absolute segment ends of the path, resolved
        if not given.
        """
        prev = self.prev
        if prev is None:
            raise self._missing_start()
        if ends is None:
            ends = self.resolve_ends()
        prev_end = ends[prev.index]
        if prev.info.is_curve:
            prev_start = None if prev.prev_index is None else ends[prev.prev_index]
            return reflect_point(prev.resolve(prev.control2, prev_start), prev_end)
        return prev_end

    def args(self) -> Tuple[CommandArg, ...]:
        return (self.control2, self.end)

    def _interaction_points(self, ends: Sequence[Point]) -> InteractionPoints:
        start = self.start_in(ends)
        control1 = self.reflected_control1(ends)
        control2 = self.resolve(self.control2, start)
        end = ends[self.index]
        return InteractionPoints(
            handles={
                "control2": Handle("control2", control2),
                "end": Handle("end", end),
                "control1": Handle("control1", control1, interactive=False),
            },
            guides=(Guide(start, control1, interactive=False), Guide(end, control2)),
        )

    def _apply_delta(self, name: str, delta: Point) -> None:
        if name == "control2":
            self.control2 = self.initial_control2 + delta
        else:
            self.end = self.initial_end + delta
            self.control2 = self.initial_control2 + delta

    def commit(self) -> None:
        self.initial_control2 = self.control2
        self.initial_end = self.end


###############################################################################
# ClosePath
###############################################################################


class ClosePath(Command):
    """Z / z - close the path; ends where the predecessor ends."""

    LETTER = "Z"

    def resolve_end(self, start: Optional[Point]) -> Point:
        if start is None:
            raise self._missing_start()
        return start

    def args(self) -> Tuple[CommandArg, ...]:
        return ()

    def _interaction_points(self, ends: Sequence[Point]) -> InteractionPoints:
        return InteractionPoints()

    def _apply_delta(self, name: str, delta: Point) -> None:
        raise InvariantViolation("ClosePath has no geometry to drag")

    def commit(self) -> None:
        pass


###############################################################################
# Instantiation
###############################################################################

COMMAND_CLASSES: Dict[str, Type[Command]] = {
    cls.LETTER: cls
    for cls in (MoveTo, LineTo, HorizontalLine, VerticalLine, CubicBezier, SmoothCubicBezier, ClosePath)
}


def is_move_to(definition: Any) -> bool:
    """Return True if the command definition starts with an M or m."""
    return (
        isinstance(definition, Sequence)
        and not isinstance(definition, str)
        and len(definition) > 0
        and isinstance(definition[0], str)
        and definition[0].upper() == "M"
    )


def instantiate_command(definition: Sequence) -> Command:
    """Create the segment described by _definition_ = (letter, *args).

    Points may be given as Point, {"x": .., "y": ..} or (x, y).

    Raises:
        MalformedCommandError: If the letter is unknown or the arguments do not match it.
    """
    if isinstance(definition, (str, bytes)) or not isinstance(definition, Sequence) or not definition:
        raise MalformedCommandError(f"A command definition must be a non-empty sequence, got {definition!r}")

    letter, *args = definition
    info = command_info(letter)
    if info is None:
        raise MalformedCommandError(f"Unknown command letter {letter!r}")
    if len(args) != info.arity:
        raise MalformedCommandError(f"Command '{letter}' expects {info.arity} argument(s) but got {len(args)}")

    values = []
    for position, (kind, arg) in enumerate(zip(info.arg_kinds, args), start=1):
        if kind == "point":
            if not Point.is_point(arg):
                raise MalformedCommandError(
                    f"Argument {position} of command '{letter}' must be a point with finite coordinates, got {arg!r}"
                )
            values.append(Point.coerce(arg))
        else:
            if not is_number(arg):
                raise MalformedCommandError(
                    f"Argument {position} of command '{letter}' must be a finite number, got {arg!r}"
                )
            values.append(float(arg))

    return COMMAND_CLASSES[letter.upper()](is_relative_letter(letter), *values)
