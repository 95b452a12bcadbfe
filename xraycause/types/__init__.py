# Copyright (c) Microsoft. All rights reserved.

from .tracer import *
from .xray import *
