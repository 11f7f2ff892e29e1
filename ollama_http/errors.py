"""
Error taxonomy shared by every call.

Three disjoint kinds, never wrapped in one another:
  - RequestError: a local precondition failed before any network I/O
  - ConnectionError: the server could not be reached at all
  - ResponseError: the server answered with an error (HTTP status or in-band)

DecodeError sits outside the taxonomy: it means the server sent something that
is not the JSON we expected.
"""

from __future__ import annotations

import builtins
from enum import Enum
from typing import Optional


CONNECTION_ERROR_MESSAGE = (
    "Failed to connect to Ollama. Please check that Ollama is downloaded, "
    "running and accessible. https://ollama.com/download"
)


class ErrorKind(Enum):
    """Closed set of error kinds surfaced to callers."""
    REQUEST = "request"
    CONNECTION = "connection"
    RESPONSE = "response"


class OllamaError(Exception):
    """Base class for the taxonomy; ``kind`` identifies the variant."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RequestError(OllamaError, ValueError):
    """Client-side validation failure, e.g. a missing model."""

    kind = ErrorKind.REQUEST


class ConnectionError(OllamaError, builtins.ConnectionError):  # noqa: A001 - same name as the official Python client
    """The transport could not reach the server.

    The message is always the fixed remediation text; the underlying OS error is
    only available through ``__cause__``.
    """

    kind = ErrorKind.CONNECTION

    def __init__(self, message: str = CONNECTION_ERROR_MESSAGE) -> None:
        super().__init__(message)


class ResponseError(OllamaError):
    """The server was reached but reported an error."""

    kind = ErrorKind.RESPONSE

    def __init__(self, message: str, status_code: int = -1) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code > 0:
            return f"{self.message} (status code: {self.status_code})"
        return self.message


class DecodeError(ValueError):
    """A response body or stream line was not the expected JSON document."""

    def __init__(self, message: str, doc: Optional[str] = None) -> None:
        super().__init__(message)
        self.doc = doc
