# Copyright (c) Microsoft. All rights reserved.

__version__ = "0.1.0"

from .env_var import *
from .ids import *
from .logging import *
from .semconv import StackTraceLanguage
from .stacktrace import *
from .translator import *
from .types import *
