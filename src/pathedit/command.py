"""Abstract path segment shared by all SVG path commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Sequence, Tuple, Union

from pathedit.errors import InvariantViolation
from pathedit.geom import Point
from pathedit.path_support import (
    COMMAND_INFO,
    DEFAULT_FORMAT,
    CommandInfo,
    FormatOptions,
    InteractionPoints,
    format_number,
    format_point,
)

CommandArg = Union[Point, float]
CommandDef = Tuple  # (letter, *args), e.g. ("C", Point, Point, Point)


###############################################################################
# Command
###############################################################################


class Command(ABC):
    """One live segment of a path.

    A segment stores its geometry as given by its definition (absolute or
    relative to the previous segment's end) together with the baseline of the
    current drag gesture (the ``initial_*`` values). The predecessor is not
    referenced directly: the owning path attaches its segment list (arena) and
    the segment's index in it, the predecessor being ``arena[index - 1]``.
    """

    LETTER: ClassVar[str] = ""
    HANDLES: ClassVar[Tuple[str, ...]] = ()  # names accepted by apply_delta()
    STARTS_PATH: ClassVar[bool] = False  # may be the first segment of a path

    def __init__(self, relative: bool):
        self._relative = bool(relative)
        self._arena: Optional[Sequence[Command]] = None
        self._index = 0

    ###########################################################################
    # Identity and linkage
    ###########################################################################

    @property
    def relative(self) -> bool:
        """True if the geometry is relative to the previous segment's end."""
        return self._relative

    @property
    def letter(self) -> str:
        """The command letter, lowercase iff relative."""
        return self.LETTER.lower() if self._relative else self.LETTER

    @property
    def info(self) -> CommandInfo:
        """Metadata of this command type."""
        return COMMAND_INFO[self.LETTER]

    @property
    def index(self) -> int:
        """Position of this segment inside its path (0 when standalone)."""
        return self._index

    @property
    def prev_index(self) -> Optional[int]:
        """Index of the predecessor or None for the first / a standalone segment."""
        if self._arena is None or self._index == 0:
            return None
        return self._index - 1

    @property
    def prev(self) -> Optional[Command]:
        """The preceding segment in the owning path, if any."""
        prev_index = self.prev_index
        if prev_index is None:
            return None
        return self._arena[prev_index]

    def attach(self, arena: Sequence[Command], index: int) -> None:
        """Link this segment into the segment list _arena_ of a path at _index_."""
        if not 0 <= index < len(arena) or arena[index] is not self:
            raise InvariantViolation(f"{self.info.name} is not located at index {index} of its path")
        self._arena = arena
        self._index = index

    ###########################################################################
    # Absolute positions
    ###########################################################################

    @abstractmethod
    def resolve_end(self, start: Optional[Point]) -> Point:
        """Absolute end of this segment given the absolute end _start_ of its predecessor.

        _start_ is None for a segment without predecessor.
        """

    @property
    def is_anchor(self) -> bool:
        """True if the absolute end does not depend on any predecessor."""
        return False

    def _missing_start(self) -> InvariantViolation:
        return InvariantViolation(f"{self.info.name} '{self.letter}' at index {self._index} has no predecessor")

    def _check_start(self, start: Optional[Point]) -> None:
        # start is None either for the head of a walk-back chain or for a segment without predecessor
        if start is None and self.prev is None and not self.STARTS_PATH:
            raise self._missing_start()

    def absolute_end(self) -> Point:
        """The absolute point this segment moves the cursor to.

        Resolved through the chain of predecessors back to the closest segment
        with an absolute end (no caching, every call reflects the current geometry).
        """
        if self._arena is None:
            return self.resolve_end(None)

        first = self._index
        while first > 0 and not self._arena[first].is_anchor:
            first -= 1

        end: Optional[Point] = None
        for segment in self._arena[first : self._index + 1]:
            end = segment.resolve_end(end)
        return end

    def start(self) -> Point:
        """Absolute end of the predecessor, i.e. where this segment starts drawing."""
        prev = self.prev
        if prev is None:
            raise self._missing_start()
        return prev.absolute_end()

    def absolute(self, point: Point) -> Point:
        """Resolve a stored _point_ of this segment into absolute coordinates."""
        prev = self.prev
        if prev is None:
            if not self.STARTS_PATH:
                raise self._missing_start()
            return point
        if not self._relative:
            return point
        return self.resolve(point, prev.absolute_end())

    def resolve(self, point: Point, start: Optional[Point]) -> Point:
        """Absolute position of a stored _point_ given the absolute _start_ of this segment."""
        if self._relative and start is not None:
            return point + start
        return point

    def resolve_ends(self) -> List[Point]:
        """Absolute ends of all segments up to and including this one, in a single forward pass."""
        if self._arena is None:
            return [self.resolve_end(None)]
        ends: List[Point] = []
        end: Optional[Point] = None
        for segment in self._arena[: self._index + 1]:
            end = segment.resolve_end(end)
            ends.append(end)
        return ends

    def start_in(self, ends: Sequence[Point]) -> Point:
        """Where this segment starts drawing, looked up in the absolute _ends_ of its path."""
        prev_index = self.prev_index
        if prev_index is None:
            raise self._missing_start()
        return ends[prev_index]

    ###########################################################################
    # Serialization
    ###########################################################################

    @abstractmethod
    def args(self) -> Tuple[CommandArg, ...]:
        """The stored geometry in definition order."""

    def to_def(self) -> CommandDef:
        """The command definition (letter, *args)."""
        return (self.letter, *self.args())

    def to_json(self) -> List:
        """The command definition as JSON-compatible list, points as {"x", "y"} dictionaries."""
        return [self.letter, *(arg.to_dict() if isinstance(arg, Point) else arg for arg in self.args())]

    def serialize(self, options: FormatOptions = DEFAULT_FORMAT) -> str:
        """The command in path-string notation, e.g. "C 1 2, 3 4, 5 6"."""
        parts = [
            format_point(arg, options.precision) if isinstance(arg, Point) else format_number(arg, options.precision)
            for arg in self.args()
        ]
        if not parts:
            return self.letter
        return f"{self.letter} {options.point_separator.join(parts)}"

    def __str__(self):
        return self.serialize()

    def __repr__(self):
        return f"{type(self).__name__}({self.serialize()!r})"

    ###########################################################################
    # Interaction
    ###########################################################################

    def interaction_points(self, ends: Optional[Sequence[Point]] = None) -> InteractionPoints:
        """Handles and guides an editor should draw for this segment.

        Args:
            ends: Absolute ends of the segments of the owning path, at least up
                to this one, as computed by PathCommands.absolute_ends(). Resolved
                through the predecessors if not given.
        """
        if ends is None:
            ends = self.resolve_ends()
        return self._interaction_points(ends)

    @abstractmethod
    def _interaction_points(self, ends: Sequence[Point]) -> InteractionPoints:
        """Variant specific part of interaction_points()."""

    def apply_delta(self, name: str, delta: Point) -> None:
        """Set the geometry named _name_ to its gesture baseline moved by _delta_.

        Raises:
            InvariantViolation: If _name_ is not a draggable handle of this segment.
        """
        if name not in self.HANDLES:
            raise InvariantViolation(
                f"{self.info.name} '{self.letter}' at index {self._index} has no draggable handle {name!r}"
            )
        self._apply_delta(name, delta)

    @abstractmethod
    def _apply_delta(self, name: str, delta: Point) -> None:
        """Variant specific part of apply_delta()."""

    @abstractmethod
    def commit(self) -> None:
        """Take the current geometry as baseline for the next gesture."""

    def on_path_update(self, ends: Sequence[Point]) -> None:
        """Hook called by the path for every segment after any segment changed.

        _ends_ are the absolute ends of all segments of the path.
        """
