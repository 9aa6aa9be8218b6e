"""Supporting metadata, configuration and helper types for the path commands.

This module contains command metadata, serialization options, and the
types describing what an editor has to draw for a segment (handles and
guides). They are used by the command and path implementations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple

from pathedit.geom import Point

###############################################################################
# CommandInfo
###############################################################################

ArgKind = Literal["point", "number"]


@dataclass(frozen=True)
class CommandInfo:
    """Metadata for SVG path commands.

    Attributes:
        name: Human readable name of the command
        arg_kinds: Kinds of the arguments following the letter in a command definition
        is_curve: Whether this command represents a curve
    """

    name: str
    arg_kinds: Tuple[ArgKind, ...]
    is_curve: bool = False

    @property
    def arity(self) -> int:
        """Number of arguments in a command definition."""
        return len(self.arg_kinds)

    @property
    def consumes_numbers(self) -> int:
        """Number of numeric tokens the command takes in a path string."""
        return sum(2 if kind == "point" else 1 for kind in self.arg_kinds)


# Command registry with metadata, keyed by the absolute (uppercase) letter
COMMAND_INFO: Dict[str, CommandInfo] = {
    "M": CommandInfo("MoveTo", ("point",)),
    "L": CommandInfo("LineTo", ("point",)),
    "H": CommandInfo("HorizontalLine", ("number",)),
    "V": CommandInfo("VerticalLine", ("number",)),
    "C": CommandInfo("CubicBezier", ("point", "point", "point"), is_curve=True),
    "S": CommandInfo("SmoothCubicBezier", ("point", "point"), is_curve=True),
    "Z": CommandInfo("ClosePath", ()),
}


def command_info(letter: str) -> Optional[CommandInfo]:
    """Return the metadata for _letter_ (either case) or None if unknown."""
    if not isinstance(letter, str) or len(letter) != 1:
        return None
    return COMMAND_INFO.get(letter.upper())


###############################################################################
# FormatOptions
###############################################################################


@dataclass(frozen=True)
class FormatOptions:
    """Options controlling the textual serialization of a path.

    Attributes:
        point_separator: Separator between the points of one command.
        precision: Number of decimals to round to. None keeps full precision (lossless).
    """

    point_separator: str = ", "
    precision: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert options to a dictionary for serialization."""
        return {
            "point_separator": self.point_separator,
            "precision": self.precision,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FormatOptions:
        """Create FormatOptions from a dictionary."""
        return cls(
            point_separator=data.get("point_separator", ", "),
            precision=data.get("precision"),
        )


DEFAULT_FORMAT = FormatOptions()


def format_number(value: float, precision: Optional[int] = None) -> str:
    """Format _value_ for a path string: integral values without decimals, others by repr()."""
    value = float(value)
    if precision is not None:
        value = round(value, precision)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_point(point: Point, precision: Optional[int] = None) -> str:
    """Format _point_ as "x y"."""
    return f"{format_number(point.x, precision)} {format_number(point.y, precision)}"


###############################################################################
# Handles and guides
###############################################################################


@dataclass(frozen=True)
class Handle:
    """A named control point an editor draws as a marker.

    Attributes:
        name: Handle name passed back to apply_delta()
        position: Absolute position
        interactive: False for derived points that must not be dragged
    """

    name: str
    position: Point
    interactive: bool = True


@dataclass(frozen=True)
class Guide:
    """A line an editor draws to show a control-point relationship."""

    start: Point
    end: Point
    interactive: bool = True


@dataclass(frozen=True)
class InteractionPoints:
    """Handles and guides of one segment, all in absolute coordinates."""

    handles: Dict[str, Handle] = field(default_factory=dict)
    guides: Tuple[Guide, ...] = ()

    @property
    def positions(self) -> Dict[str, Point]:
        """Mapping of handle name to absolute position."""
        return {name: handle.position for name, handle in self.handles.items()}

    @property
    def interactive_names(self) -> Tuple[str, ...]:
        """Names of the handles which accept a drag."""
        return tuple(name for name, handle in self.handles.items() if handle.interactive)
