# Copyright (c) Microsoft. All rights reserved.

import logging

__all__ = ["configure_logger"]


def configure_logger(level: int = logging.INFO, name: str = "xraycause") -> logging.Logger:
    """Create or reset the translator's logger with a consistent console format.

    Any handler previously attached to the logger is removed and a single
    `StreamHandler` is installed. The logger does not propagate to the root
    logger, so exporters that configure their own logging do not see every
    record twice.

    Args:
        level: Logging level applied both to the logger and the installed
            handler. Defaults to `logging.INFO`.
        name: Dotted path for the logger instance. Defaults to `"xraycause"`.

    Returns:
        Configured logger instance.

    Examples:
        ```python
        from xraycause import configure_logger

        # Show skipped stack trace sections while debugging an exporter.
        configure_logger(level=logging.DEBUG)
        ```
    """

    logger = logging.getLogger(name)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] (Process-%(process)d %(name)s)   %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
