# Copyright (c) Microsoft. All rights reserved.

"""Decide whether a span failed and how X-Ray should classify the failure."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from opentelemetry.trace.status import Status as OtelStatus

from xraycause.semconv import HTTP_RESPONSE_STATUS_CODE, HTTP_STATUS_CODE
from xraycause.types.tracer import TraceStatus
from xraycause.types.xray import CauseFlags

logger = logging.getLogger(__name__)

__all__ = [
    "is_error_status",
    "get_status_message",
    "get_http_status_code",
    "classify_http_status",
]

StatusLike = Union[OtelStatus, TraceStatus]


def is_error_status(status: StatusLike) -> bool:
    """Whether the span status is `ERROR`.

    Works for both `StatusCode` enums and the status names stored in
    [`TraceStatus`][xraycause.TraceStatus].
    """
    code: Any = status.status_code
    return getattr(code, "name", code) == "ERROR"


def get_status_message(status: StatusLike) -> str:
    return status.description or ""


def get_http_status_code(span_attributes: Mapping[str, Any]) -> Optional[int]:
    """Look up the HTTP response status code of a span.

    The legacy `http.status_code` key wins over `http.response.status_code`.
    A value that is not an integer counts as status code 0.

    Returns:
        The status code, or None when the span has neither attribute.
    """
    for key in (HTTP_STATUS_CODE, HTTP_RESPONSE_STATUS_CODE):
        if key not in span_attributes:
            continue
        value = span_attributes[key]
        if isinstance(value, bool) or not isinstance(value, int):
            logger.debug("Ignoring non-integer %s value %r", key, value)
            return 0
        return value
    return None


def classify_http_status(span_attributes: Mapping[str, Any]) -> CauseFlags:
    """Map the HTTP status code of a failed span to X-Ray flags.

    4xx responses are client errors (429 is also a throttle). Anything else,
    including spans without a status code, is a fault. The mapping applies to
    every failed span, whether or not it describes an HTTP call.
    """
    code = get_http_status_code(span_attributes)
    if code is not None and 400 <= code <= 499:
        return CauseFlags(is_error=True, is_throttle=code == 429)
    return CauseFlags(is_fault=True)
