# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Logging setup for the CLI.

Log records go to stderr so that command output on stdout stays clean
for piping. Set LOG_LEVEL=DEBUG (or pass --debug) to see request traces.
"""

import logging
import os
import sys


class NonBlockingStreamHandler(logging.StreamHandler):
    """
    Stream handler that writes to the current sys.stderr and ignores
    BlockingIOError from a non-blocking stream
    """

    def emit(self, record):
        self.stream = sys.stderr
        try:
            super().emit(record)
        except BlockingIOError:
            pass


def setup_logger(
    name,
    level=logging.WARNING,
    format="%(asctime)s - [in %(pathname)s:%(lineno)d] - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
):
    """
    Configure and return a logger instance

    If environment variable LOG_LEVEL is set to DEBUG, force log level to DEBUG.

    Args:
        name: Logger name
        level: Logging level, default is WARNING
        format: Log message format
        datefmt: Date format for timestamps

    Returns:
        logging.Logger: Configured logger instance
    """
    env_log_level = os.environ.get("LOG_LEVEL")
    if env_log_level and env_log_level.upper() == "DEBUG":
        level = logging.DEBUG

    logger = logging.getLogger(name)

    # Prevent adding duplicate handlers
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)
    logger.propagate = False

    handler = NonBlockingStreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format, datefmt))
    logger.addHandler(handler)

    return logger
