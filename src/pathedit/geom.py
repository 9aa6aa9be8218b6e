"""Handling geometries: points and boxes"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray


def is_number(value: Any) -> bool:
    """Return True if _value_ is a finite real number (bool, inf and nan excluded)."""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


###############################################################################
# Point
###############################################################################
@dataclass(frozen=True)
class Point:
    """
    An immutable 2D point (or vector).

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return add_points(self, other)

    def __sub__(self, other: Point) -> Point:
        return subtract_points(self, other)

    def __iter__(self):
        yield self.x
        yield self.y

    @staticmethod
    def is_point(value: Any) -> bool:
        """Return True if _value_ can be converted by Point.coerce()."""
        if isinstance(value, Point):
            return is_number(value.x) and is_number(value.y)
        if isinstance(value, Mapping):
            return is_number(value.get("x")) and is_number(value.get("y"))
        if isinstance(value, Sequence) and not isinstance(value, str):
            return len(value) == 2 and is_number(value[0]) and is_number(value[1])
        return False

    @classmethod
    def coerce(cls, value: Any) -> Point:
        """
        Convert _value_ into a Point.

        Accepts a Point, a mapping with "x" and "y" keys or a sequence (x, y).

        Raises:
            ValueError: If _value_ does not describe a point.
        """
        if not cls.is_point(value):
            raise ValueError(f"Cannot convert {value!r} into a Point")
        if isinstance(value, Point):
            return value
        if isinstance(value, Mapping):
            return cls(float(value["x"]), float(value["y"]))
        return cls(float(value[0]), float(value[1]))

    def to_dict(self) -> dict:
        """Convert the point to a dictionary {"x": .., "y": ..}."""
        return {"x": self.x, "y": self.y}


ORIGIN = Point(0.0, 0.0)


def add_points(a: Point, b: Optional[Point] = None) -> Point:
    """Elementwise sum a + b; a missing _b_ counts as the origin."""
    if b is None:
        b = ORIGIN
    return Point(a.x + b.x, a.y + b.y)


def subtract_points(a: Point, b: Optional[Point] = None) -> Point:
    """Elementwise difference a - b; a missing _b_ counts as the origin."""
    if b is None:
        b = ORIGIN
    return Point(a.x - b.x, a.y - b.y)


def reflect_point(point: Point, about: Point) -> Point:
    """Return the point symmetric to _point_ through _about_, i.e. 2*about - point."""
    return Point(about.x + (about.x - point.x), about.y + (about.y - point.y))


###############################################################################
# Box
###############################################################################
@dataclass
class Box:
    """
    Represents an axis-aligned rectangular box.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        """Initialize Box with coordinates.

        Args:
            xmin: The minimum x-coordinate
            ymin: The minimum y-coordinate
            xmax: The maximum x-coordinate
            ymax: The maximum y-coordinate
        """
        self._xmin = xmin
        self._ymin = ymin
        self._xmax = xmax
        self._ymax = ymax

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Box:
        """
        Create the smallest Box containing all given _points_.

        Raises:
            ValueError: If _points_ is empty.
        """
        arr: NDArray[np.float64] = np.array([(p.x, p.y) for p in points], dtype=np.float64)
        if arr.shape[0] == 0:
            raise ValueError("Cannot compute a bounding box of zero points")
        xmin, ymin = arr.min(axis=0)
        xmax, ymax = arr.max(axis=0)
        return cls(float(xmin), float(ymin), float(xmax), float(ymax))

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self._xmin, self._ymin, self._xmax, self._ymax

    @property
    def width(self) -> float:
        """float: The width of the box."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box."""
        return self._ymax - self._ymin

