"""Drag handling between a pointer-driven editor and a PathCommands model."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from pathedit.command import CommandDef
from pathedit.common import Gesture
from pathedit.errors import InvariantViolation
from pathedit.geom import Point
from pathedit.path import PathCommands

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DragState:
    """The handle being dragged and the pointer position where the drag started."""

    index: int
    name: str
    origin: Point


class PathEditor:
    """Turns pointer positions into apply_delta() calls on a path.

    The delta passed to the path is always measured from the pointer position
    of press(), so every move recomputes the geometry from the gesture baseline.
    After each move the path string is handed to _on_preview_; after release the
    command definitions are handed to _on_commit_ to be persisted.
    """

    def __init__(
        self,
        path: PathCommands,
        on_preview: Optional[Callable[[str], None]] = None,
        on_commit: Optional[Callable[[List[CommandDef]], None]] = None,
    ):
        self._path = path
        self._on_preview = on_preview
        self._on_commit = on_commit
        self._drag: Optional[DragState] = None
        self._last_delta = Point(0.0, 0.0)

    @property
    def path(self) -> PathCommands:
        """The edited path."""
        return self._path

    @property
    def dragging(self) -> Optional[DragState]:
        """The active drag or None."""
        return self._drag

    def press(self, index: int, name: str, pointer: Point) -> None:
        """Start dragging handle _name_ of segment _index_ with the pointer at _pointer_.

        Raises:
            InvariantViolation: If the handle does not exist or is not draggable,
                or another drag is still active.
        """
        if self._drag is not None:
            raise InvariantViolation(f"Handle {self._drag.name!r} of segment {self._drag.index} is still dragged")
        if not 0 <= index < len(self._path):
            raise InvariantViolation(f"Path has no segment at index {index}")
        handle = self._path.interaction_points()[index].handles.get(name)
        if handle is None or not handle.interactive:
            raise InvariantViolation(f"Segment {index} has no draggable handle {name!r}")

        self._drag = DragState(index, name, Point.coerce(pointer))
        self._last_delta = Point(0.0, 0.0)
        logger.debug("Drag of %r on segment %d started at %s", name, index, self._drag.origin)

    def move(self, pointer: Point) -> str:
        """Move the dragged handle with the pointer; returns the path string for live preview."""
        self._apply(pointer, Gesture.MOVE)
        path_string = self._path.serialize()
        if self._on_preview is not None:
            self._on_preview(path_string)
        return path_string

    def release(self, pointer: Optional[Point] = None) -> List[CommandDef]:
        """Finish the drag at _pointer_ (or at the last moved position); returns the committed definitions."""
        drag = self._active()
        if pointer is None:
            pointer = drag.origin + self._last_delta
        self._apply(pointer, Gesture.UP)
        self._drag = None
        logger.debug("Drag of %r on segment %d committed with delta %s", drag.name, drag.index, self._last_delta)

        defs = self._path.to_defs()
        if self._on_commit is not None:
            self._on_commit(defs)
        return defs

    def _active(self) -> DragState:
        if self._drag is None:
            raise InvariantViolation("No handle is being dragged")
        return self._drag

    def _apply(self, pointer: Point, gesture: Gesture) -> None:
        drag = self._active()
        self._last_delta = Point.coerce(pointer) - drag.origin
        self._path.apply_delta(drag.index, drag.name, self._last_delta, gesture)
