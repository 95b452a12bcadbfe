# Copyright (c) Microsoft. All rights reserved.

"""Java stack traces, as printed by `Throwable.printStackTrace`.

```
java.lang.IllegalStateException: state is bad
	at com.example.Foo.bar(Foo.java:42)
	at java.base/java.lang.Thread.run(Thread.java:834)
Caused by: java.io.IOException: disk full
	at com.example.Disk.write(Disk.java:7)
	... 1 more
```

PHP SDKs produce the same format.
"""

from __future__ import annotations

import logging
from typing import List

from xraycause.types.xray import StackFrame, XRayException

from .base import LineReader, append_cause, parse_int

logger = logging.getLogger(__name__)

__all__ = ["fill_java_stacktrace"]

_FRAME_PREFIX = "\tat "
_CAUSED_BY_PREFIX = "Caused by: "


def _is_frame(line: str) -> bool:
    return line.startswith(_FRAME_PREFIX) and "(" in line and line.endswith(")")


def _parse_frame(line: str) -> StackFrame:
    paren_idx = line.index("(")
    label = line[len(_FRAME_PREFIX) : paren_idx]
    slash_idx = label.find("/")
    if slash_idx >= 0:
        # Class loader or Java module prefix
        label = label[slash_idx + 1 :]

    path = line[paren_idx + 1 : -1]
    line_number = 0
    colon_idx = path.find(":")
    if colon_idx >= 0:
        line_number = parse_int(path[colon_idx + 1 :])
        path = path[:colon_idx]

    return StackFrame(path=path, label=label, line=line_number)


def fill_java_stacktrace(stacktrace: str, exceptions: List[XRayException]) -> List[XRayException]:
    """Parse a Java stack trace into `exceptions`.

    Every `Caused by:` section becomes a new exception linked from the previous one.
    Frames that follow it belong to the new exception. `... n more` and `Suppressed:`
    lines are ignored.
    """
    reader = LineReader(stacktrace)

    # The first line repeats the top-level exception and message.
    reader.readline()
    active = 0
    line = reader.readline()

    while line is not None:
        if _is_frame(line):
            exceptions[active].stack.append(_parse_frame(line))
        elif line.startswith(_CAUSED_BY_PREFIX):
            cause_type = line[len(_CAUSED_BY_PREFIX) :]
            cause_message = ""
            colon_idx = cause_type.find(":")
            if colon_idx >= 0:
                # Skip the space after the colon too.
                cause_message = cause_type[colon_idx + 2 :]
                cause_type = cause_type[:colon_idx]

            # The message may span several lines, up to the first frame.
            line = reader.readline()
            while line is not None and not _is_frame(line):
                cause_message += line
                line = reader.readline()

            active = append_cause(exceptions, active, cause_type, cause_message)
            logger.debug("Found Java cause %r, now %d exceptions", cause_type, len(exceptions))
            # `line` is already the next frame (or the end of the trace).
            continue

        line = reader.readline()

    return exceptions
