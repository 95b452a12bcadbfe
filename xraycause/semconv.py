# Copyright (c) Microsoft. All rights reserved.

"""Semantic conventions consumed while building X-Ray causes.

Exception and telemetry keys come from OpenTelemetry's official semantic conventions.
Only keys that have no stable counterpart there are spelled out in this file.
"""

from __future__ import annotations

from enum import Enum

from opentelemetry.semconv.attributes import exception_attributes, http_attributes, telemetry_attributes

__all__ = [
    "EXCEPTION_EVENT_NAME",
    "EXCEPTION_TYPE",
    "EXCEPTION_MESSAGE",
    "EXCEPTION_STACKTRACE",
    "TELEMETRY_SDK_LANGUAGE",
    "HTTP_STATUS_CODE",
    "HTTP_RESPONSE_STATUS_CODE",
    "HTTP_STATUS_TEXT",
    "StackTraceLanguage",
]

EXCEPTION_EVENT_NAME = "exception"
"""Name of the span event recorded by `Span.record_exception`."""

EXCEPTION_TYPE = exception_attributes.EXCEPTION_TYPE
EXCEPTION_MESSAGE = exception_attributes.EXCEPTION_MESSAGE
EXCEPTION_STACKTRACE = exception_attributes.EXCEPTION_STACKTRACE

TELEMETRY_SDK_LANGUAGE = telemetry_attributes.TELEMETRY_SDK_LANGUAGE
"""Resource attribute naming the language of the SDK that produced the span."""

HTTP_STATUS_CODE = "http.status_code"
"""Legacy span attribute for the HTTP response status code.

Older instrumentations still emit it, so it is looked up first.
"""

HTTP_RESPONSE_STATUS_CODE = http_attributes.HTTP_RESPONSE_STATUS_CODE
"""Stable span attribute for the HTTP response status code."""

HTTP_STATUS_TEXT = "http.status_text"
"""OpenCensus-era span attribute holding the HTTP reason phrase.

Used as the cause message when a failed span records no exception events.
"""


class StackTraceLanguage(str, Enum):
    """Languages whose stack trace format can be parsed.

    Values are the `telemetry.sdk.language` strings reported by the SDKs.
    """

    JAVA = "java"
    PHP = "php"
    """The PHP SDK formats stack traces exactly like Java would."""
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    DOTNET = "dotnet"
    GO = "go"
    UNKNOWN = ""
    """Any other language. Only the top-level exception is reported."""

    @classmethod
    def from_sdk_language(cls, value: str) -> "StackTraceLanguage":
        for member in cls:
            if member.value == value:
                return member
        return cls.UNKNOWN
