"""Central module containing types and constants for the path-segment model."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

###############################################################################
# Types
###############################################################################


PathCmdLetter = Literal[  # Type-Definition for SvgPath-Commands handled by the editor
    # MoveTo (2) - start the path and move the current point to (x,y)
    "M",
    "m",
    # LineTo (2) - draw a straight line from the current point to (x,y)
    "L",
    "l",
    # Horizontal LineTo (1) - draw a horizontal line to the given x coordinate (y stays unchanged)
    "H",
    "h",
    # Vertical LineTo (1) - draw a vertical line to the given y coordinate (x stays unchanged)
    "V",
    "v",
    # Cubic Bezier To (6) - draw a cubic Bezier curve with two control points and an endpoint (x,y)
    "C",
    "c",
    # Smooth cubic Bezier To (4) - cubic curve to (x,y) using the reflection of the previous control point
    "S",
    "s",
    # ClosePath (0) - close the path by drawing a line back
    "Z",
    "z",
]

# Uppercase = absolute coordinates; lowercase = relative.
COMMAND_LETTERS: str = "MmLlHhVvCcSsZz"


###############################################################################
# Enums and Consts
###############################################################################


class Gesture(Enum):
    """Phase of a drag gesture that triggered a path update."""

    MOVE = "move"
    UP = "up"

    @classmethod
    def coerce(cls, value: Union[Gesture, str]) -> Gesture:
        """Return the Gesture for an enum member or its string value ("move" / "up")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise ValueError(f"Unknown gesture {value!r}, expected 'move' or 'up'") from e


def is_relative_letter(letter: str) -> bool:
    """Return True if the command letter selects relative coordinates."""
    return letter.islower()
