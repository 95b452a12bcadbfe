# Copyright (c) Microsoft. All rights reserved.

"""Helpers shared by the stack trace grammars."""

from __future__ import annotations

import re
from typing import List, Optional, Protocol

from xraycause.ids import new_segment_id
from xraycause.types.xray import XRayException

__all__ = [
    "StackTraceParser",
    "LineReader",
    "parse_int",
    "append_cause",
]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class StackTraceParser(Protocol):
    """Signature shared by all `fill_*_stacktrace` functions.

    The parser reads `stacktrace`, appends frames to the exceptions it owns and
    appends new exceptions for nested causes. `exceptions[0]` is the top-level
    exception, already created from the event's type and message.
    """

    def __call__(self, stacktrace: str, exceptions: List[XRayException]) -> List[XRayException]: ...


class LineReader:
    """Read a stack trace one line at a time.

    Lines are split on `\\n` and lose a trailing `\\r`. A trailing newline does not
    produce an extra empty line at the end.
    """

    def __init__(self, text: str) -> None:
        self._lines = text.split("\n")
        if self._lines and self._lines[-1] == "":
            self._lines.pop()
        self._position = 0

    def readline(self) -> Optional[str]:
        """Return the next line, or None once the text is exhausted."""
        if self._position >= len(self._lines):
            return None
        line = self._lines[self._position]
        self._position += 1
        if line.endswith("\r"):
            line = line[:-1]
        return line


def parse_int(text: str) -> int:
    """Parse a plain decimal integer, returning 0 for anything else.

    Whitespace, underscores and non-ASCII digits are not accepted.
    """
    if not _INTEGER_RE.fullmatch(text):
        return 0
    return int(text)


def append_cause(exceptions: List[XRayException], active: int, exception_type: str, message: str) -> int:
    """Append a new exception and link it as the cause of `exceptions[active]`.

    Returns:
        Index of the new exception, which becomes the active one.
    """
    exceptions.append(XRayException(id=new_segment_id(), type=exception_type, message=message))
    new_index = len(exceptions) - 1
    exceptions[active].cause = exceptions[new_index].id
    return new_index
