"""Exceptions raised by the path-segment model."""

from __future__ import annotations


class MalformedCommandError(ValueError):
    """A command definition has an unknown letter or does not match its letter's arity."""


class PathSyntaxError(ValueError):
    """A textual path description could not be parsed."""


class InvariantViolation(AssertionError):
    """The path structure or the handle contract was broken by the caller.

    Raised e.g. when a non-MoveTo segment has no predecessor or an unknown
    handle name is dragged. Not meant to be recovered from.
    """
