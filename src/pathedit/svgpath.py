"""Parsing SVG path strings into command definitions"""

from __future__ import annotations

import re
from typing import ClassVar, List, Tuple

from pathedit.common import COMMAND_LETTERS
from pathedit.errors import PathSyntaxError
from pathedit.geom import Point
from pathedit.path_support import command_info

Token = Tuple[str, str, int]  # (kind, text, position)


class SvgPathParser:
    """
    This class provides static methods to read SVG path strings.
    A SVG path string is a sequence of commands, each a letter followed by its numbers.
    Commands (command : number of values : command-character):
        MoveTo:           2: Mm
        LineTo:           2: Ll   1: Hh(x)   1:Vv(y)
        CubicBezier:      6: Cc   4: Ss
        ClosePath:        0: Zz
    Numbers are separated by whitespace and/or commas. A sign or a second
    decimal point starts a new number, e.g. "10-5" and "0.5.5" are two numbers each.
    """

    # Command letters:
    SVG_CMDS: ClassVar[str] = COMMAND_LETTERS
    # Definition of a number:
    SVG_ARGS: ClassVar[str] = r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"

    _TOKEN_RE: ClassVar[re.Pattern] = re.compile(
        rf"(?P<number>{SVG_ARGS})|(?P<letter>[A-Za-z])|(?P<separator>[\s,]+)|(?P<other>.)", re.DOTALL
    )

    @classmethod
    def tokenize(cls, path_string: str) -> List[Token]:
        """
        Split _path_string_ into letter and number tokens; separators are dropped.

        Raises:
            PathSyntaxError: If a character is neither part of a number, a letter nor a separator.
        """
        tokens: List[Token] = []
        for match in cls._TOKEN_RE.finditer(path_string):
            kind = match.lastgroup
            if kind == "separator":
                continue
            if kind == "other":
                raise PathSyntaxError(f"Unexpected character {match.group()!r} at position {match.start()}")
            tokens.append((kind, match.group(), match.start()))
        return tokens

    @classmethod
    def parse(cls, path_string: str) -> List[tuple]:
        """
        Parse _path_string_ into a list of command definitions (letter, *args).

        Each command must be followed by exactly the number of values it takes,
        pairs of values are collapsed into Points.

        Args:
            path_string (str): a SVG path string, e.g. "M 10 10 C 20 20, 40 20, 50 10"

        Returns:
            List[tuple]: command definitions, e.g. [("M", Point(10, 10)), ...]

        Raises:
            PathSyntaxError: If the path does not start with M/m, contains an unknown
                command letter or a command has the wrong number of values.
        """
        if not isinstance(path_string, str):
            raise PathSyntaxError(f"A path string is required, got {type(path_string).__name__}")

        # Group the tokens into (letter, position, values)
        groups: List[Tuple[str, int, List[float]]] = []
        for kind, text, position in cls.tokenize(path_string):
            if kind == "letter":
                groups.append((text, position, []))
            elif not groups:
                raise PathSyntaxError(f"Path must start with a MoveTo command, found number {text!r}")
            else:
                groups[-1][2].append(float(text))

        if not groups:
            raise PathSyntaxError("Path must start with a MoveTo command, found an empty path")
        if groups[0][0] not in "Mm":
            raise PathSyntaxError(f"Path must start with a MoveTo command, found {groups[0][0]!r}")

        return [cls._build_command(letter, position, values) for letter, position, values in groups]

    @classmethod
    def _build_command(cls, letter: str, position: int, values: List[float]) -> tuple:
        info = command_info(letter) if letter in cls.SVG_CMDS else None
        if info is None:
            raise PathSyntaxError(f"Unknown command {letter!r} at position {position}")
        if len(values) != info.consumes_numbers:
            raise PathSyntaxError(
                f"Command {letter!r} at position {position} takes {info.consumes_numbers} value(s) "
                f"but got {len(values)}"
            )

        args = []
        idx = 0
        for kind in info.arg_kinds:
            if kind == "point":
                args.append(Point(values[idx], values[idx + 1]))
                idx += 2
            else:
                args.append(values[idx])
                idx += 1
        return (letter, *args)

    @classmethod
    def is_valid(cls, path_string: str) -> bool:
        """Return True if _path_string_ can be parsed."""
        try:
            cls.parse(path_string)
        except PathSyntaxError:
            return False
        return True

