# Copyright (c) Microsoft. All rights reserved.

"""Build the X-Ray `cause` of a failed span."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from xraycause.env_var import CauseEnvVar, resolve_bool_env_var, resolve_str_env_var
from xraycause.ids import new_segment_id
from xraycause.types.tracer import ResourceLike, SpanLike
from xraycause.types.xray import CauseData, CauseResult, XRayException

from .classify import classify_http_status, get_status_message, is_error_status
from .events import extract_exception_triples, fallback_message, find_exception_events, resolve_language
from .exception import parse_exception

logger = logging.getLogger(__name__)

__all__ = ["make_cause"]


def make_cause(
    span: SpanLike,
    attributes: Optional[Mapping[str, Any]] = None,
    resource: Optional[ResourceLike] = None,
    *,
    copy_attributes: Optional[bool] = None,
    strict_go_frames: Optional[bool] = None,
    default_language: Optional[str] = None,
) -> CauseResult:
    """Translate a span into X-Ray error flags and cause.

    Spans whose status is not `ERROR` have no cause; nothing else is inspected.

    For failed spans, every `exception` event yields an exception chain parsed from
    its stack trace. Without exception events, a single exception is made from the
    status message, or failing that from the legacy `http.status_text` attribute,
    which is then dropped from the returned attributes. If neither is set the span
    still counts as failed but has no cause.

    Args:
        span: An OpenTelemetry `ReadableSpan` or a [`Span`][xraycause.Span].
        attributes: The attributes the exporter is about to map. Defaults to the span's.
        resource: The resource of the span. Defaults to `span.resource`.
        copy_attributes: Always return a copy of `attributes`. Overrides
            `XRAY_CAUSE_COPY_ATTRIBUTES`.
        strict_go_frames: Overrides `XRAY_CAUSE_STRICT_GO_FRAMES`.
        default_language: Overrides `XRAY_CAUSE_DEFAULT_LANGUAGE`.

    Returns:
        The flags, the attributes left for the exporter and the cause (None when there is none).
        When the span is not failed, or has exception events, `filtered_attributes` is
        `attributes` itself unless copying was requested.
    """
    if attributes is None:
        attributes = span.attributes or {}
    if resource is None:
        resource = span.resource

    status = span.status
    if not is_error_status(status):
        return CauseResult(filtered_attributes=attributes)

    filtered: Mapping[str, Any] = attributes
    cause: Optional[CauseData] = None

    exception_events = find_exception_events(span.events or ())
    if exception_events:
        language = resolve_language(
            resource,
            default=resolve_str_env_var(CauseEnvVar.XRAY_CAUSE_DEFAULT_LANGUAGE, override=default_language),
        )
        strict = resolve_bool_env_var(CauseEnvVar.XRAY_CAUSE_STRICT_GO_FRAMES, override=strict_go_frames, fallback=False)

        exceptions: List[XRayException] = []
        for exception_type, message, stacktrace in extract_exception_triples(exception_events):
            exceptions.extend(parse_exception(exception_type, message, stacktrace, language, strict_go_frames=strict))
        cause = CauseData(exceptions=exceptions)

        if resolve_bool_env_var(CauseEnvVar.XRAY_CAUSE_COPY_ATTRIBUTES, override=copy_attributes, fallback=False):
            filtered = dict(attributes)
    else:
        # No exception events: keep the OpenCensus behavior to ease migration.
        message, filtered = fallback_message(get_status_message(status), attributes)
        if message:
            cause = CauseData(exceptions=[XRayException(id=new_segment_id(), message=message)])
        else:
            logger.debug("Failed span %r has no exception events and no message, no cause recorded.", span.name)

    flags = classify_http_status(span.attributes or {})
    return CauseResult(
        is_error=flags.is_error,
        is_fault=flags.is_fault,
        is_throttle=flags.is_throttle,
        filtered_attributes=filtered,
        cause=cause,
    )
