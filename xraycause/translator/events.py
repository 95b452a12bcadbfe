# Copyright (c) Microsoft. All rights reserved.

"""Collect exception data from span events, resources and legacy attributes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from xraycause.semconv import (
    EXCEPTION_EVENT_NAME,
    EXCEPTION_MESSAGE,
    EXCEPTION_STACKTRACE,
    EXCEPTION_TYPE,
    HTTP_STATUS_TEXT,
    TELEMETRY_SDK_LANGUAGE,
    StackTraceLanguage,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ExceptionTriple",
    "find_exception_events",
    "extract_exception_triples",
    "resolve_language",
    "fallback_message",
]

ExceptionTriple = Tuple[str, str, str]
"""`(exception.type, exception.message, exception.stacktrace)` of one exception event."""


class _HasAttributes(Protocol):
    @property
    def attributes(self) -> Optional[Mapping[str, Any]]: ...


class _EventLike(_HasAttributes, Protocol):
    @property
    def name(self) -> str: ...


def _get_str(attributes: Optional[Mapping[str, Any]], key: str) -> str:
    if not attributes:
        return ""
    value = attributes.get(key)
    return value if isinstance(value, str) else ""


def find_exception_events(events: Iterable[_EventLike]) -> List[_EventLike]:
    """Return the events recorded by `record_exception`, in order."""
    return [event for event in events if event.name == EXCEPTION_EVENT_NAME]


def extract_exception_triples(events: Iterable[_EventLike]) -> List[ExceptionTriple]:
    """Read type, message and stack trace from each exception event.

    Missing or non-string attributes read as empty strings.
    """
    return [
        (
            _get_str(event.attributes, EXCEPTION_TYPE),
            _get_str(event.attributes, EXCEPTION_MESSAGE),
            _get_str(event.attributes, EXCEPTION_STACKTRACE),
        )
        for event in events
    ]


def resolve_language(resource: Optional[_HasAttributes], default: Optional[str] = None) -> StackTraceLanguage:
    """Find the stack trace language of a span from its resource.

    Args:
        resource: The span's resource. May be None.
        default: Language to assume when the resource does not report one.
    """
    attributes = resource.attributes if resource is not None else None
    language = _get_str(attributes, TELEMETRY_SDK_LANGUAGE)
    if not language and default:
        logger.debug("Resource reports no SDK language, assuming %r", default)
        language = default
    return StackTraceLanguage.from_sdk_language(language)


def fallback_message(status_message: str, attributes: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Pick the cause message of a failed span without exception events.

    The status message wins. Otherwise the legacy `http.status_text` attribute is
    used, as OpenCensus exporters did.

    Returns:
        The message (possibly empty) and a new attribute dict without `http.status_text`.
    """
    message = status_message
    filtered: Dict[str, Any] = {}
    for key, value in attributes.items():
        if key == HTTP_STATUS_TEXT:
            if not message:
                message = value if isinstance(value, str) else ""
        else:
            filtered[key] = value
    return message, filtered
