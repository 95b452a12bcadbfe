# Copyright (c) Microsoft. All rights reserved.

"""Identifiers for exceptions in a cause record.

X-Ray exception IDs have the same shape as segment IDs: 16 lowercase hex digits.
A single process-wide generator is used by every translation. It can be swapped
(for example, to make tests deterministic) with [`set_id_generator`][xraycause.set_id_generator].

Generators must be safe to call from several threads at once, because exporters
translate the spans of a batch concurrently and each translation may ask for
several identifiers.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

from opentelemetry import trace as trace_api
from opentelemetry.sdk.trace.id_generator import RandomIdGenerator

logger = logging.getLogger(__name__)

__all__ = [
    "SegmentIdGenerator",
    "RandomSegmentIdGenerator",
    "get_id_generator",
    "set_id_generator",
    "new_segment_id",
]


@runtime_checkable
class SegmentIdGenerator(Protocol):
    """Source of fresh 16 hex digit identifiers."""

    def new_segment_id(self) -> str: ...


class RandomSegmentIdGenerator:
    """Random identifiers backed by OpenTelemetry's span ID generator.

    `RandomIdGenerator` never returns the invalid all-zero span ID and relies on
    `random.getrandbits`, which is safe to call concurrently.
    """

    def __init__(self) -> None:
        self._id_generator = RandomIdGenerator()

    def new_segment_id(self) -> str:
        return trace_api.format_span_id(self._id_generator.generate_span_id())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


_id_generator_lock = threading.Lock()
_id_generator: SegmentIdGenerator = RandomSegmentIdGenerator()


def get_id_generator() -> SegmentIdGenerator:
    """Return the generator currently used for new exception IDs."""
    return _id_generator


def set_id_generator(generator: SegmentIdGenerator) -> SegmentIdGenerator:
    """Install a new process-wide ID generator.

    Args:
        generator: Object with a thread-safe `new_segment_id()` method.

    Returns:
        The generator that was installed before, so callers can restore it.

    Raises:
        TypeError: If the object has no `new_segment_id` method.
    """
    global _id_generator

    if not isinstance(generator, SegmentIdGenerator):
        raise TypeError(f"Expected an object with a new_segment_id() method, got: {type(generator)}.")

    with _id_generator_lock:
        previous = _id_generator
        _id_generator = generator
    logger.debug("Segment ID generator switched from %r to %r", previous, generator)
    return previous


def new_segment_id() -> str:
    """Produce a fresh exception ID from the current generator."""
    return _id_generator.new_segment_id()
