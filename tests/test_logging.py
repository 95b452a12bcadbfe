# Copyright (c) Microsoft. All rights reserved.

from __future__ import annotations

import logging

from xraycause import configure_logger


def test_configure_logger_installs_single_handler() -> None:
    logger = configure_logger(level=logging.DEBUG, name="xraycause.test")
    configure_logger(level=logging.DEBUG, name="xraycause.test")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.DEBUG
    assert logger.propagate is False
