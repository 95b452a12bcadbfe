# Copyright (c) Microsoft. All rights reserved.

"""Turn one exception event into a chain of X-Ray exceptions."""

from __future__ import annotations

import functools
import logging
from typing import Dict, List, Union

from xraycause.ids import new_segment_id
from xraycause.semconv import StackTraceLanguage
from xraycause.stacktrace import (
    StackTraceParser,
    fill_dotnet_stacktrace,
    fill_go_stacktrace,
    fill_java_stacktrace,
    fill_javascript_stacktrace,
    fill_python_stacktrace,
)
from xraycause.types.xray import XRayException

logger = logging.getLogger(__name__)

__all__ = ["parse_exception", "get_stacktrace_parser"]


def _skip_stacktrace(stacktrace: str, exceptions: List[XRayException]) -> List[XRayException]:
    return exceptions


_STACKTRACE_PARSERS: Dict[StackTraceLanguage, StackTraceParser] = {
    StackTraceLanguage.JAVA: fill_java_stacktrace,
    StackTraceLanguage.PHP: fill_java_stacktrace,
    StackTraceLanguage.PYTHON: fill_python_stacktrace,
    StackTraceLanguage.JAVASCRIPT: fill_javascript_stacktrace,
    StackTraceLanguage.DOTNET: fill_dotnet_stacktrace,
    StackTraceLanguage.GO: fill_go_stacktrace,
    StackTraceLanguage.UNKNOWN: _skip_stacktrace,
}


def get_stacktrace_parser(
    language: Union[StackTraceLanguage, str], *, strict_go_frames: bool = False
) -> StackTraceParser:
    """Return the grammar for stack traces of `language`.

    Languages without a grammar get a parser that leaves the exceptions untouched.
    """
    language = StackTraceLanguage.from_sdk_language(language)
    if language is StackTraceLanguage.GO and strict_go_frames:
        return functools.partial(fill_go_stacktrace, reset_unmatched=True)
    return _STACKTRACE_PARSERS[language]


def parse_exception(
    exception_type: str,
    message: str,
    stacktrace: str,
    language: Union[StackTraceLanguage, str],
    *,
    strict_go_frames: bool = False,
) -> List[XRayException]:
    """Build the exceptions described by one exception event.

    The first exception always carries `exception_type` and `message`. Nested
    causes found in the stack trace follow it, each linked from its predecessor.

    Args:
        exception_type: Value of `exception.type`.
        message: Value of `exception.message`.
        stacktrace: Value of `exception.stacktrace`. Nothing is parsed when empty.
        language: SDK language of the span, selecting the stack trace grammar.
        strict_go_frames: Do not reuse the previous location for unparsable Go frames.

    Returns:
        At least one exception.
    """
    exceptions = [XRayException(id=new_segment_id(), type=exception_type, message=message)]
    if not stacktrace:
        return exceptions

    parser = get_stacktrace_parser(language, strict_go_frames=strict_go_frames)
    exceptions = parser(stacktrace, exceptions)
    logger.debug(
        "Parsed %s stack trace of %r into %d exception(s)",
        StackTraceLanguage.from_sdk_language(language).name,
        exception_type,
        len(exceptions),
    )
    return exceptions
