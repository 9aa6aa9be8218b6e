"""The editable path: an ordered list of linked segments with update propagation."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, Optional, Sequence, Union

from pathedit.command import Command, CommandDef
from pathedit.commands import MoveTo, instantiate_command, is_move_to
from pathedit.common import Gesture
from pathedit.errors import InvariantViolation, MalformedCommandError
from pathedit.geom import Box, Point
from pathedit.path_support import DEFAULT_FORMAT, FormatOptions, Guide, Handle, InteractionPoints
from pathedit.svgpath import SvgPathParser

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[Gesture, "PathCommands"], None]


###############################################################################
# PathCommands
###############################################################################


class PathCommands:
    """A single SVG path made of segments, the first one always a MoveTo.

    The path owns its segments. Each segment knows its predecessor by index
    only; after any change the path runs a forward pass over all segments so
    that dependent geometry (e.g. reflected control points or absolute
    positions of relative segments) is up to date before anybody looks at it.

    Attributes:
        _commands: The segments, linked by index
        _interaction_points: Handles and guides per segment as of the last update
        _on_update: Optional callback receiving (gesture, path) after each update
        _format_options: Options used by serialize()
    """

    def __init__(
        self,
        defs: Sequence[CommandDef],
        on_update: Optional[UpdateCallback] = None,
        format_options: Optional[FormatOptions] = None,
    ):
        """
        Initialize the path from command definitions.

        Args:
            defs: Sequence of (letter, *args) definitions, starting with a MoveTo.
            on_update: Called with (Gesture.MOVE, path) for live preview and with
                (Gesture.UP, path) once a gesture is committed.
            format_options: Options for serialize(). Defaults to lossless output.

        Raises:
            MalformedCommandError: If _defs_ is empty, does not start with a MoveTo
                or contains a malformed command.
        """
        self._commands: List[Command] = self.instantiate_commands(defs)
        self._on_update = on_update
        self._format_options = format_options if format_options is not None else DEFAULT_FORMAT
        self._interaction_points: List[InteractionPoints] = []
        self.update()
        logger.debug("Created path with %d segments: %s", len(self._commands), self.serialize())

    @staticmethod
    def instantiate_commands(defs: Sequence[CommandDef]) -> List[Command]:
        """Create and link the segments for _defs_ (all or nothing)."""
        if isinstance(defs, (str, bytes)):
            raise MalformedCommandError("Command definitions must be a sequence, use from_string() for path strings")
        if not isinstance(defs, Sequence):
            raise MalformedCommandError(f"Command definitions must be a sequence, got {type(defs).__name__}")
        defs = list(defs)
        if not defs:
            raise MalformedCommandError("A path needs at least one command")
        if not is_move_to(defs[0]):
            raise MalformedCommandError(f"The first command of a path must be a MoveTo, got {defs[0]!r}")

        commands: List[Command] = []
        for position, definition in enumerate(defs):
            try:
                commands.append(instantiate_command(definition))
            except MalformedCommandError as e:
                raise MalformedCommandError(f"Command {position}: {e}") from e

        for index, command in enumerate(commands):
            command.attach(commands, index)
        for command in commands:
            command.commit()

        return commands

    @classmethod
    def from_defs(cls, defs: Sequence[CommandDef], **kwargs) -> PathCommands:
        """Create a path from command definitions, see __init__()."""
        return cls(defs, **kwargs)

    @classmethod
    def from_string(cls, path_string: str, **kwargs) -> PathCommands:
        """Create a path from an SVG path string like "M 0 0 L 10 10".

        Raises:
            PathSyntaxError: If _path_string_ cannot be parsed.
        """
        return cls(SvgPathParser.parse(path_string), **kwargs)

    @classmethod
    def from_json(cls, data: Sequence[Sequence], **kwargs) -> PathCommands:
        """Create a path from the JSON form produced by to_json()."""
        return cls(data, **kwargs)

    ###########################################################################
    # Sequence protocol
    ###########################################################################

    @property
    def commands(self) -> List[Command]:
        """The segments of this path (a copy of the list)."""
        return list(self._commands)

    @property
    def first(self) -> MoveTo:
        """The MoveTo starting this path."""
        return self._commands[0]

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands)

    def __getitem__(self, index: int) -> Command:
        return self._commands[index]

    ###########################################################################
    # Serialization
    ###########################################################################

    def to_defs(self) -> List[CommandDef]:
        """The command definitions of this path, ready for from_defs()."""
        return [command.to_def() for command in self._commands]

    def to_json(self) -> List[list]:
        """The command definitions as JSON-compatible data."""
        return [command.to_json() for command in self._commands]

    def serialize(self, options: Optional[FormatOptions] = None) -> str:
        """The path string (d attribute), segments joined by single spaces."""
        if options is None:
            options = self._format_options
        return " ".join(command.serialize(options) for command in self._commands)

    def __str__(self):
        return self.serialize()

    def __repr__(self):
        return f"PathCommands({self.serialize()!r})"

    ###########################################################################
    # Absolute positions
    ###########################################################################

    def absolute_ends(self) -> List[Point]:
        """Absolute end of every segment, computed in a single forward pass."""
        ends: List[Point] = []
        end: Optional[Point] = None
        for command in self._commands:
            end = command.resolve_end(end)
            ends.append(end)
        return ends

    def interaction_points(self) -> List[InteractionPoints]:
        """Handles and guides of every segment as of the last update."""
        return list(self._interaction_points)

    @property
    def helpers(self) -> List[Union[Handle, Guide]]:
        """All handles and guides of the path in segment order."""
        helpers: List[Union[Handle, Guide]] = []
        for points in self._interaction_points:
            helpers.extend(points.handles.values())
            helpers.extend(points.guides)
        return helpers

    def bounding_box(self) -> Box:
        """The box around all handle positions (end and control points)."""
        return Box.from_points(
            handle.position for points in self._interaction_points for handle in points.handles.values()
        )

    ###########################################################################
    # Mutation
    ###########################################################################

    def apply_delta(
        self,
        index: int,
        name: str,
        delta: Point,
        gesture: Union[Gesture, str] = Gesture.MOVE,
    ) -> List[InteractionPoints]:
        """Drag handle _name_ of segment _index_ by _delta_ from where the gesture started.

        All segments are updated before this returns. On Gesture.UP the current
        geometry becomes the baseline of the next gesture.

        Args:
            index: Index of the segment
            name: Handle name as reported by interaction_points()
            delta: Pointer position minus pointer position at the start of the gesture
            gesture: "move" for live feedback, "up" to commit

        Returns:
            List[InteractionPoints]: the recomputed handles and guides of all segments

        Raises:
            InvariantViolation: If there is no such segment or handle.
        """
        gesture = Gesture.coerce(gesture)
        if not 0 <= index < len(self._commands):
            raise InvariantViolation(f"Path has no segment at index {index} (length {len(self._commands)})")

        self._commands[index].apply_delta(name, Point.coerce(delta))
        self.update()

        if gesture is Gesture.UP:
            self.commit()
        if self._on_update is not None:
            self._on_update(gesture, self)

        return self.interaction_points()

    def update(self) -> None:
        """Propagate the current geometry to all dependent values of all segments."""
        ends = self.absolute_ends()
        for command in self._commands:
            command.on_path_update(ends)
        self._interaction_points = [command.interaction_points(ends) for command in self._commands]

    def commit(self) -> None:
        """Take the current geometry of every segment as baseline for the next gesture."""
        for command in self._commands:
            command.commit()
        logger.debug("Committed path: %s", self.serialize())
