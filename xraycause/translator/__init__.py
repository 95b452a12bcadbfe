# Copyright (c) Microsoft. All rights reserved.

from .cause import make_cause
from .classify import classify_http_status, get_http_status_code, get_status_message, is_error_status
from .events import extract_exception_triples, fallback_message, find_exception_events, resolve_language
from .exception import get_stacktrace_parser, parse_exception

__all__ = [
    "make_cause",
    "classify_http_status",
    "get_http_status_code",
    "get_status_message",
    "is_error_status",
    "find_exception_events",
    "extract_exception_triples",
    "resolve_language",
    "fallback_message",
    "parse_exception",
    "get_stacktrace_parser",
]
