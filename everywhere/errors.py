# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Error types raised by the everywhere client and commands."""

from typing import Optional


class EverywhereError(Exception):
    """Base error for all failures reported by the CLI."""


class AuthenticationError(EverywhereError):
    """Missing, invalid or rejected auth token."""


class RemoteError(EverywhereError):
    """Server answered with a status outside the operation's success set."""

    def __init__(self, action: str, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{action}: {body}")


class ResponseDecodeError(RemoteError):
    """Server answered with success but the payload has an unexpected shape."""


class ExecutionError(EverywhereError):
    """Command or code ran but the server reported an error in the payload.

    ``error`` holds the server message verbatim.
    """

    def __init__(self, message: str, error: str = ""):
        self.error = error
        super().__init__(message)


class TransportError(EverywhereError):
    """Network failure or timeout before a response was received."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class FilesystemError(EverywhereError):
    """Local file or archive I/O failure."""


class ValidationError(EverywhereError):
    """Invalid user input detected before any request is sent."""
