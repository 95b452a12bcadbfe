# Copyright (c) Microsoft. All rights reserved.

from __future__ import annotations

import itertools
import threading
from typing import Iterator

import pytest

from xraycause.env_var import CauseEnvVar
from xraycause.ids import set_id_generator


class SequentialIdGenerator:
    """Hands out 0000000000000001, 0000000000000002, ..."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def new_segment_id(self) -> str:
        with self._lock:
            return f"{next(self._counter):016x}"


@pytest.fixture(autouse=True)
def sequential_ids() -> Iterator[SequentialIdGenerator]:
    generator = SequentialIdGenerator()
    previous = set_id_generator(generator)
    yield generator
    set_id_generator(previous)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for env_var in CauseEnvVar:
        monkeypatch.delenv(env_var.value, raising=False)
