# Copyright (c) Microsoft. All rights reserved.

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import pytest
from opentelemetry.sdk.resources import Resource as OtelResource
from opentelemetry.sdk.trace import Event as OtelEvent
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.trace import Status, StatusCode

from xraycause import make_cause
from xraycause.ids import RandomSegmentIdGenerator, set_id_generator
from xraycause.types.tracer import Span
from xraycause.types.xray import CauseResult, StackFrame

JAVA_TRACE = "E\n\tat a.b.c(File.java:10)\nCaused by: X: y\n\tat a.b.c(File.java:20)\n"


def _exception_event(exception_type: str = "E", message: str = "m", stacktrace: Optional[str] = None) -> OtelEvent:
    attributes: Dict[str, Any] = {"exception.type": exception_type, "exception.message": message}
    if stacktrace is not None:
        attributes["exception.stacktrace"] = stacktrace
    return OtelEvent("exception", attributes)


def _make_span(
    status: Status = Status(StatusCode.ERROR),
    attributes: Optional[Dict[str, Any]] = None,
    events: Sequence[OtelEvent] = (),
    language: Optional[str] = None,
) -> ReadableSpan:
    resource = OtelResource({"telemetry.sdk.language": language} if language else {})
    return ReadableSpan(
        name="GET /orders",
        attributes=attributes or {},
        events=events,
        status=status,
        resource=resource,
    )


def _strip_ids(result: CauseResult) -> List[Dict[str, Any]]:
    assert result.cause is not None
    return [exception.model_dump(exclude={"id", "cause"}) for exception in result.cause.exceptions]


@pytest.mark.parametrize("status", [Status(StatusCode.OK), Status(StatusCode.UNSET)])
def test_successful_span_has_no_cause(status: Status) -> None:
    attributes = {"http.status_code": 500, "http.status_text": "Internal Server Error"}
    span = _make_span(status=status, attributes=attributes, events=[_exception_event(stacktrace=JAVA_TRACE)])

    result = make_cause(span, attributes)

    assert (result.is_error, result.is_fault, result.is_throttle) == (False, False, False)
    assert result.filtered_attributes is attributes
    assert result.cause is None


@pytest.mark.parametrize(
    ("status_code", "flags"),
    [
        (404, (True, False, False)),
        (429, (True, False, True)),
        (503, (False, True, False)),
        (None, (False, True, False)),
    ],
)
def test_flags_follow_http_status_code(status_code: Optional[int], flags: Any) -> None:
    attributes = {"http.status_code": status_code} if status_code is not None else {}
    span = _make_span(status=Status(StatusCode.ERROR, "failed"), attributes=attributes)

    result = make_cause(span, attributes)

    assert (result.is_error, result.is_fault, result.is_throttle) == flags


def test_exception_event_with_caused_by() -> None:
    attributes = {"http.status_code": 500}
    span = _make_span(
        attributes=attributes,
        events=[_exception_event("java.lang.RuntimeException", "wrapped", JAVA_TRACE)],
        language="java",
    )

    result = make_cause(span, attributes)

    assert result.cause is not None
    first, second = result.cause.exceptions
    assert first.type == "java.lang.RuntimeException"
    assert first.message == "wrapped"
    assert first.cause == second.id
    assert first.stack == [StackFrame(path="File.java", label="a.b.c", line=10)]
    assert second.type == "X"
    assert second.message == "y"
    assert second.cause is None
    # Attributes are handed back untouched when exception events exist.
    assert result.filtered_attributes is attributes


def test_status_message_fallback() -> None:
    span = _make_span(status=Status(StatusCode.ERROR, "boom"))

    result = make_cause(span)

    assert result.cause is not None
    assert len(result.cause.exceptions) == 1
    exception = result.cause.exceptions[0]
    assert exception.message == "boom"
    assert exception.type == ""
    assert exception.stack == []
    assert exception.cause is None


def test_status_text_fallback_is_consumed() -> None:
    attributes = {"http.status_text": "Not Found", "http.status_code": 404, "http.method": "GET"}
    span = _make_span(attributes=attributes)

    result = make_cause(span, attributes)

    assert result.cause is not None
    assert result.cause.exceptions[0].message == "Not Found"
    assert "http.status_text" not in result.filtered_attributes
    assert result.filtered_attributes == {"http.status_code": 404, "http.method": "GET"}
    assert result.filtered_attributes is not attributes
    assert "http.status_text" in attributes
    assert (result.is_error, result.is_fault, result.is_throttle) == (True, False, False)


def test_status_text_is_dropped_even_when_status_message_wins() -> None:
    attributes = {"http.status_text": "Not Found"}
    span = _make_span(status=Status(StatusCode.ERROR, "boom"), attributes=attributes)

    result = make_cause(span, attributes)

    assert result.cause is not None
    assert result.cause.exceptions[0].message == "boom"
    assert result.filtered_attributes == {}


def test_failed_span_without_message_has_no_cause() -> None:
    span = _make_span()

    result = make_cause(span)

    assert result.cause is None
    assert (result.is_error, result.is_fault, result.is_throttle) == (False, True, False)


def test_multiple_exception_events_are_concatenated() -> None:
    python_trace = (
        "Traceback (most recent call last):\n"
        '  File "app.py", line 2, in load\n'
        '    return data["id"]\n'
        "KeyError: 'id'\n"
        "\n"
        "During handling of the above exception, another exception occurred:\n"
        "\n"
        "Traceback (most recent call last):\n"
        '  File "app.py", line 4, in handle\n'
        "    load()\n"
        "ValueError: bad payload\n"
    )
    span = _make_span(
        events=[
            _exception_event("ValueError", "bad payload", python_trace),
            OtelEvent("log", {"message": "retrying"}),
            _exception_event("TimeoutError", "too slow"),
        ],
        language="python",
    )

    result = make_cause(span)

    assert result.cause is not None
    exceptions = result.cause.exceptions
    assert [e.type for e in exceptions] == ["ValueError", "KeyError", "TimeoutError"]
    assert [e.id for e in exceptions] == ["0000000000000001", "0000000000000002", "0000000000000003"]
    assert exceptions[0].cause == exceptions[1].id
    assert exceptions[1].cause is None
    assert exceptions[2].cause is None
    assert exceptions[2].stack == []


def test_unknown_language_keeps_top_exception_only() -> None:
    span = _make_span(events=[_exception_event(stacktrace=JAVA_TRACE)], language="rust")

    result = make_cause(span)

    assert result.cause is not None
    assert len(result.cause.exceptions) == 1
    assert result.cause.exceptions[0].stack == []


def test_default_language_applies_without_resource_language(monkeypatch: pytest.MonkeyPatch) -> None:
    span = _make_span(events=[_exception_event(stacktrace=JAVA_TRACE)])

    assert make_cause(span).cause.exceptions[0].stack == []  # type: ignore[union-attr]
    assert len(make_cause(span, default_language="java").cause.exceptions) == 2  # type: ignore[union-attr]

    monkeypatch.setenv("XRAY_CAUSE_DEFAULT_LANGUAGE", "php")
    assert len(make_cause(span).cause.exceptions) == 2  # type: ignore[union-attr]


def test_explicit_resource_overrides_span_resource() -> None:
    span = _make_span(events=[_exception_event(stacktrace=JAVA_TRACE)], language="go")

    result = make_cause(span, resource=OtelResource({"telemetry.sdk.language": "java"}))

    assert result.cause is not None
    assert len(result.cause.exceptions) == 2


def test_copy_attributes(monkeypatch: pytest.MonkeyPatch) -> None:
    attributes = {"http.status_code": 500}
    span = _make_span(attributes=attributes, events=[_exception_event()])

    copied = make_cause(span, attributes, copy_attributes=True)
    assert copied.filtered_attributes == attributes
    assert copied.filtered_attributes is not attributes

    monkeypatch.setenv("XRAY_CAUSE_COPY_ATTRIBUTES", "yes")
    assert make_cause(span, attributes).filtered_attributes is not attributes
    assert make_cause(span, attributes, copy_attributes=False).filtered_attributes is attributes


def test_strict_go_frames_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    trace = "panic: boom\nmain.a()\n\t/app/a.go:3 +0x1\nmain.b()\n\t???\n"
    span = _make_span(events=[_exception_event("panic", "boom", trace)], language="go")

    lenient = make_cause(span)
    assert lenient.cause is not None
    assert lenient.cause.exceptions[0].stack[1] == StackFrame(path="/app/a.go", label="main.b()", line=3)

    monkeypatch.setenv("XRAY_CAUSE_STRICT_GO_FRAMES", "1")
    strict = make_cause(span)
    assert strict.cause is not None
    assert strict.cause.exceptions[0].stack[1] == StackFrame(path="", label="main.b()", line=0)


def test_invalid_boolean_environment_value_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    span = _make_span(events=[_exception_event()])
    monkeypatch.setenv("XRAY_CAUSE_COPY_ATTRIBUTES", "sometimes")

    with pytest.raises(ValueError):
        make_cause(span)


def test_stored_span_translates_like_readable_span() -> None:
    readable = _make_span(
        attributes={"http.status_code": 429},
        events=[_exception_event("java.lang.RuntimeException", "wrapped", JAVA_TRACE)],
        language="java",
    )
    stored = Span.model_validate_json(Span.from_opentelemetry(readable).model_dump_json())

    from_readable = make_cause(readable)
    from_stored = make_cause(stored)

    assert _strip_ids(from_readable) == _strip_ids(from_stored)
    assert (from_stored.is_error, from_stored.is_fault, from_stored.is_throttle) == (True, False, True)


def test_translation_is_idempotent_apart_from_ids() -> None:
    span = _make_span(
        attributes={"http.status_code": 502},
        events=[_exception_event("E", "m", JAVA_TRACE), _exception_event("F", "n", JAVA_TRACE)],
        language="java",
    )

    first = make_cause(span)
    second = make_cause(span)

    assert _strip_ids(first) == _strip_ids(second)
    assert first.cause is not None and second.cause is not None
    assert {e.id for e in first.cause.exceptions}.isdisjoint({e.id for e in second.cause.exceptions})


def test_random_ids_are_unique_across_concurrent_translations() -> None:
    set_id_generator(RandomSegmentIdGenerator())
    span = _make_span(events=[_exception_event("E", "m", JAVA_TRACE)] * 3, language="java")

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(lambda _: make_cause(span), range(64)))

    ids: List[str] = []
    for result in results:
        assert result.cause is not None
        assert len(result.cause.exceptions) == 6
        ids.extend(exception.id for exception in result.cause.exceptions)
    assert len(ids) == len(set(ids))
    assert all(len(exception_id) == 16 for exception_id in ids)
