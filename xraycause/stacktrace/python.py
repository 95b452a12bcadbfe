# Copyright (c) Microsoft. All rights reserved.

"""Python tracebacks, as formatted by `traceback.format_exception`.

```
Traceback (most recent call last):
  File "main.py", line 3, in handle
    parse(payload)
KeyError: 'id'

During handling of the above exception, another exception occurred:

Traceback (most recent call last):
  File "main.py", line 5, in handle
    raise ValueError("bad payload")
ValueError: bad payload
```

The exception being reported comes last, so the traceback is read bottom-up. Each
"During handling" section introduces the exception that was being handled, which
is linked as the cause of the one below it.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from xraycause.types.xray import StackFrame, XRayException

from .base import append_cause, parse_int

logger = logging.getLogger(__name__)

__all__ = ["fill_python_stacktrace"]

_FRAME_PREFIX = "  File "
_DURING_HANDLING = "During handling of the above exception, another exception occurred:"


def _parse_frame(line: str) -> Optional[StackFrame]:
    parts = line.split(",")
    if len(parts) != 3:
        return None

    file_part, line_part, label_part = parts
    # Strip `  File "` and the closing quote.
    path = file_part[len(_FRAME_PREFIX) + 1 : -1]
    line_number = 0
    if line_part.startswith(" line "):
        line_number = parse_int(line_part[len(" line ") :])
    label = ""
    if label_part.startswith(" in "):
        label = label_part[len(" in ") :]
    return StackFrame(path=path, label=label, line=line_number)


def fill_python_stacktrace(stacktrace: str, exceptions: List[XRayException]) -> List[XRayException]:
    """Parse a Python traceback into `exceptions`.

    Frames are collected in reverse order of appearance. A malformed
    "During handling" section stops the parse, keeping what was found so far.
    """
    # Python tracebacks always use "\n", no reader needed to walk them backwards.
    lines = stacktrace.split("\n")

    # Skip the last line with the top-level exception and message.
    line_idx = len(lines) - 2
    if line_idx < 0:
        return exceptions
    active = 0

    while line_idx >= 0:
        line = lines[line_idx]
        if line.startswith(_FRAME_PREFIX):
            frame = _parse_frame(line)
            if frame is not None:
                exceptions[active].stack.append(frame)
        elif line.startswith(_DURING_HANDLING):
            next_file_line_idx = line_idx - 1
            while next_file_line_idx >= 0 and not lines[next_file_line_idx].startswith(_FRAME_PREFIX):
                next_file_line_idx -= 1
            if next_file_line_idx < 0:
                logger.debug("No frame found above line %d of Python traceback, stopping.", line_idx)
                return exceptions

            # The handled exception starts two lines below its last frame (after the
            # source line) and ends two lines above the sentinel (before the blank line).
            message = "\n".join(lines[next_file_line_idx + 2 : line_idx - 1])
            colon_idx = message.find(":")
            if colon_idx < 0:
                logger.debug("Handled exception %r has no message separator, stopping.", message)
                return exceptions

            active = append_cause(exceptions, active, message[:colon_idx], message[colon_idx + 2 :])
            # Resume on the frame line that was just located.
            line_idx = next_file_line_idx
            continue

        line_idx -= 1

    return exceptions
