# Copyright (c) Microsoft. All rights reserved.

"""X-Ray cause records produced by the translator."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, SkipValidation

__all__ = [
    "StackFrame",
    "XRayException",
    "CauseData",
    "CauseFlags",
    "CauseResult",
]


class StackFrame(BaseModel):
    """One location in a captured stack trace."""

    path: str = ""
    """Source file or module. Empty when the trace does not say."""
    label: str = ""
    """Function, method or class name."""
    line: int = 0
    """Line number, 0 when unknown."""

    def to_document(self) -> Dict[str, Any]:
        return {"path": self.path, "label": self.label, "line": self.line}


class XRayException(BaseModel):
    """One exception in a cause chain.

    `cause` holds the `id` of the exception this one was caused by (or, for Python,
    the one being handled when this one was raised). It is only ever set after that
    exception has been created.
    """

    id: str
    """16 hex digit identifier, unique within a cause record."""
    type: str = ""
    message: str = ""
    stack: List[StackFrame] = Field(default_factory=list)
    """Frames in the order they appear in the original trace."""
    cause: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"id": self.id, "type": self.type, "message": self.message}
        if self.stack:
            document["stack"] = [frame.to_document() for frame in self.stack]
        if self.cause is not None:
            document["cause"] = self.cause
        return document


class CauseData(BaseModel):
    """The object variant of an X-Ray segment `cause`.

    A span without an actionable cause is represented by `None` instead.
    """

    exceptions: List[XRayException] = Field(default_factory=list)
    """Exceptions in discovery order. Chains of different exception events follow each other."""

    def to_document(self) -> Dict[str, Any]:
        return {"exceptions": [exception.to_document() for exception in self.exceptions]}


class CauseFlags(BaseModel):
    """X-Ray segment flags derived from a failed span."""

    is_error: bool = False
    """Client side failure (4xx)."""
    is_fault: bool = False
    """Server side or unknown failure."""
    is_throttle: bool = False
    """Request rejected by rate limiting (429)."""


class CauseResult(BaseModel):
    """Everything [`make_cause`][xraycause.make_cause] hands back to the exporter."""

    is_error: bool = False
    is_fault: bool = False
    is_throttle: bool = False
    filtered_attributes: SkipValidation[Mapping[str, Any]]
    """Attributes left for the exporter to map.

    This is the very object that was passed in unless the fallback message consumed
    `http.status_text` (or copying was requested), in which case it is a new dict.
    """
    cause: Optional[CauseData] = None
