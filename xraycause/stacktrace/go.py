# Copyright (c) Microsoft. All rights reserved.

"""Go stack traces, as printed by `runtime/debug.Stack`.

```
panic: something went wrong
goroutine 1 [running]:
main.handler(0x1)
	/app/main.go:12 +0x1d
main.main()
	/app/main.go:20 +0x25
```

After the optional goroutine header, lines come in pairs: the function, then its
`file:line` location.
"""

from __future__ import annotations

import logging
import re
from typing import List

from xraycause.types.xray import StackFrame, XRayException

from .base import LineReader, parse_int

logger = logging.getLogger(__name__)

__all__ = ["fill_go_stacktrace"]

_GOROUTINE_HEADER_RE = re.compile(r"^goroutine.*\brunning\b.*:$", re.ASCII)
_LOCATION_RE = re.compile(r"([^:\s]+):(\d+)", re.ASCII)


def fill_go_stacktrace(
    stacktrace: str, exceptions: List[XRayException], reset_unmatched: bool = False
) -> List[XRayException]:
    """Parse a Go stack trace into the frames of `exceptions[0]`.

    Every function/location pair yields one frame. When the location line cannot be
    parsed, the frame keeps the path and line of the previous frame, unless
    `reset_unmatched` is set, in which case they are left empty.

    Args:
        stacktrace: The raw stack trace.
        exceptions: Exceptions list whose first element receives the frames.
        reset_unmatched: Do not carry the previous location into unparsable frames.
    """
    reader = LineReader(stacktrace)

    # The first line repeats the top-level exception and message.
    reader.readline()
    exception = exceptions[0]
    path = ""
    line_number = 0

    line = reader.readline()
    while line is not None:
        if _GOROUTINE_HEADER_RE.search(line):
            line = reader.readline() or ""

        label = line
        location = reader.readline() or ""

        match = _LOCATION_RE.search(location)
        if match:
            path = match.group(1)
            line_number = parse_int(match.group(2))
        elif reset_unmatched:
            path = ""
            line_number = 0
        else:
            logger.debug("Go frame %r has no location, reusing %s:%d", label, path, line_number)

        exception.stack.append(StackFrame(path=path, label=label, line=line_number))
        line = reader.readline()

    return exceptions
