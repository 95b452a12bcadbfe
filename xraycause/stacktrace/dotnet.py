# Copyright (c) Microsoft. All rights reserved.

""".NET stack traces, as returned by `Exception.ToString()`.

```
System.InvalidOperationException: Sequence contains no elements
	at System.Linq.Enumerable.First[TSource](IEnumerable`1 source)
	at Sample.Program.Main(String[] args) in C:\\src\\Program.cs:line 12
```
"""

from __future__ import annotations

from typing import List, Optional

from xraycause.types.xray import StackFrame, XRayException

from .base import LineReader, parse_int

__all__ = ["fill_dotnet_stacktrace"]

_FRAME_PREFIX = "\tat "
_LOCATION_SEPARATOR = " in "


def _parse_frame(line: str) -> Optional[StackFrame]:
    if _LOCATION_SEPARATOR in line:
        parts = line.split(_LOCATION_SEPARATOR)
        label = parts[0][len(_FRAME_PREFIX) :]
        path = parts[1]
        line_number = 0

        colon_idx = path.rfind(":")
        if colon_idx >= 0:
            line_str = path[colon_idx + 1 :]
            if line_str.startswith("line"):
                line_str = line_str[len("line ") :]
            path = path[:colon_idx]
            line_number = parse_int(line_str)

        return StackFrame(path=path, label=label, line=line_number)

    # No source information, typically frames from framework assemblies.
    paren_idx = line.rfind(")")
    if paren_idx >= 0:
        return StackFrame(label=line[len(_FRAME_PREFIX) : paren_idx + 1])
    return None


def fill_dotnet_stacktrace(stacktrace: str, exceptions: List[XRayException]) -> List[XRayException]:
    """Parse a .NET stack trace into the frames of `exceptions[0]`.

    Inner exceptions are not split out.
    """
    reader = LineReader(stacktrace)

    # The first line repeats the top-level exception and message.
    reader.readline()
    exception = exceptions[0]

    line = reader.readline()
    while line is not None:
        if line.startswith(_FRAME_PREFIX):
            frame = _parse_frame(line)
            if frame is not None:
                exception.stack.append(frame)
        line = reader.readline()

    return exceptions
