# Copyright (c) Microsoft. All rights reserved.

"""Span data accepted by the cause translator.

The translator reads spans straight from the OpenTelemetry SDK (`ReadableSpan`) as well as
from the pydantic models below, which are convenient for spans that were stored or shipped
as JSON before being exported.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Union

from opentelemetry import trace as trace_api
from opentelemetry.sdk.resources import Resource as OtelResource
from opentelemetry.sdk.trace import Event as OtelEvent
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.trace.status import Status as OtelStatus
from pydantic import BaseModel

__all__ = [
    "AttributeValue",
    "Attributes",
    "TraceStatus",
    "Event",
    "Resource",
    "Span",
    "SpanLike",
    "ResourceLike",
]


def convert_timestamp(timestamp: Optional[int]) -> Optional[float]:
    """Convert timestamp from nanoseconds to seconds if needed.

    Auto-detects format: if > 1e12, assumes nanoseconds; otherwise seconds.
    """
    if not timestamp:
        return None
    return timestamp / 1_000_000_000 if timestamp > 1e12 else timestamp


AttributeValue = Union[
    str,
    bool,
    int,
    float,
    Sequence[str],
    Sequence[bool],
    Sequence[int],
    Sequence[float],
]
Attributes = Dict[str, AttributeValue]


class TraceStatus(BaseModel):
    """Corresponding to opentelemetry.trace.Status"""

    status_code: str
    """Name of the status code: `UNSET`, `OK` or `ERROR`."""
    description: Optional[str] = None

    @classmethod
    def from_opentelemetry(cls, src: OtelStatus) -> "TraceStatus":
        return cls(status_code=src.status_code.name, description=src.description)


class Event(BaseModel):
    """Corresponding to opentelemetry.trace.Event"""

    name: str
    attributes: Attributes
    timestamp: Optional[float] = None

    @classmethod
    def from_opentelemetry(cls, src: OtelEvent) -> "Event":
        return cls(
            name=src.name,
            attributes=dict(src.attributes) if src.attributes else {},
            timestamp=convert_timestamp(src.timestamp),
        )


class Resource(BaseModel):
    """Corresponding to opentelemetry.sdk.resources.Resource"""

    attributes: Attributes
    schema_url: str = ""

    @classmethod
    def from_opentelemetry(cls, src: OtelResource) -> "Resource":
        return cls(
            attributes=dict(src.attributes) if src.attributes else {},
            schema_url=src.schema_url if src.schema_url else "",
        )


class Span(BaseModel):
    """A finished span, reduced to the fields the cause translator reads.

    Corresponding to `opentelemetry.sdk.trace.ReadableSpan`.
    """

    trace_id: str
    """The trace ID of the span, formatted via `trace_api.format_trace_id`."""
    span_id: str
    """The span ID of the span, formatted via `trace_api.format_span_id`."""
    name: str
    status: TraceStatus
    attributes: Attributes
    events: List[Event]
    resource: Resource

    @classmethod
    def from_opentelemetry(cls, src: ReadableSpan) -> "Span":
        """Convert an OpenTelemetry `ReadableSpan` into a [`Span`][xraycause.Span].

        Args:
            src: The OpenTelemetry ReadableSpan to convert.
        """
        context = src.get_span_context()
        if context is None:
            trace_id = span_id = 0
        else:
            trace_id = context.trace_id
            span_id = context.span_id
        return cls(
            trace_id=trace_api.format_trace_id(trace_id),
            span_id=trace_api.format_span_id(span_id),
            name=src.name,
            status=TraceStatus.from_opentelemetry(src.status),
            attributes=dict(src.attributes) if src.attributes else {},
            events=[Event.from_opentelemetry(event) for event in src.events] if src.events else [],
            resource=(
                Resource.from_opentelemetry(src.resource) if src.resource is not None else Resource(attributes={})
            ),
        )


SpanLike = Union[ReadableSpan, Span]
ResourceLike = Union[OtelResource, Resource]
