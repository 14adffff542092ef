# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for the mail client.

The library never configures handlers, levels or formats. Applications do
that once, typically with ``logging.basicConfig()`` in their entry point.

Example:
    Typical usage in a module::

        from libmail.logger import get_logger

        logger = get_logger("libmail.transport")
        logger.debug("Connecting")
"""

import logging


def get_logger(name: str = "libmail") -> logging.Logger:
    """Retrieve a logger instance.

    Args:
        name: The logger name. Defaults to "libmail".

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name)
