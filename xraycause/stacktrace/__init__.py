# Copyright (c) Microsoft. All rights reserved.

from .base import StackTraceParser
from .dotnet import fill_dotnet_stacktrace
from .go import fill_go_stacktrace
from .java import fill_java_stacktrace
from .javascript import fill_javascript_stacktrace
from .python import fill_python_stacktrace

__all__ = [
    "StackTraceParser",
    "fill_java_stacktrace",
    "fill_python_stacktrace",
    "fill_javascript_stacktrace",
    "fill_dotnet_stacktrace",
    "fill_go_stacktrace",
]
