# Copyright (c) Microsoft. All rights reserved.

"""JavaScript (V8) stack traces.

```
TypeError: Cannot read properties of undefined
    at handler (/app/index.js:12:5)
    at /app/router.js:40:3
    at Array.forEach (native)
```

There is no standard way to print nested causes, so all frames belong to the
top-level exception.
"""

from __future__ import annotations

from typing import List

from xraycause.types.xray import StackFrame, XRayException

from .base import LineReader, parse_int

__all__ = ["fill_javascript_stacktrace"]

_FRAME_PREFIX = "    at "


def _parse_frame(line: str) -> StackFrame:
    label = ""
    path = ""
    line_number = 0

    paren_idx = line.find("(")
    if paren_idx >= 0 and line.endswith(")"):
        label = line[len(_FRAME_PREFIX) : paren_idx]
        path = line[paren_idx + 1 : -1]
    elif paren_idx < 0:
        path = line[len(_FRAME_PREFIX) :]

    # `path:line:column`
    colon_first_idx = path.find(":")
    colon_second_idx = path.find(":", colon_first_idx + 1) if colon_first_idx >= 0 else -1
    if colon_first_idx >= 0 and colon_second_idx >= 0:
        line_number = parse_int(path[colon_first_idx + 1 : colon_second_idx])
        path = path[:colon_first_idx]
    elif colon_first_idx < 0 and "native" in path:
        path = "native"

    return StackFrame(path=path, label=label, line=line_number)


def fill_javascript_stacktrace(stacktrace: str, exceptions: List[XRayException]) -> List[XRayException]:
    """Parse a V8 stack trace into the frames of `exceptions[0]`.

    Frames where path, label and line all come out empty are dropped.
    """
    reader = LineReader(stacktrace)

    # The first line repeats the top-level exception and message.
    reader.readline()
    exception = exceptions[0]

    line = reader.readline()
    while line is not None:
        if line.startswith(_FRAME_PREFIX):
            frame = _parse_frame(line)
            if frame.path or frame.label or frame.line != 0:
                exception.stack.append(frame)
        line = reader.readline()

    return exceptions
