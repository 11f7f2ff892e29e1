from __future__ import annotations

"""
Classification of transport failures and error responses.

Transport failures are classified once, where they are detected: either they are
connection failures (server unreachable) or they propagate unchanged.
"""

from typing import Iterator, Set
import errno
import json
import socket

from ..errors import ResponseError


_CONNECT_ERRNOS = {errno.ECONNREFUSED, errno.ENETUNREACH, errno.EHOSTUNREACH}

# Last resort only; OS messages are locale and platform dependent.
_CONNECT_PHRASES = (
    "connection refused",
    "network is unreachable",
    "network unreachable",
    "no route to host",
    "host unreachable",
)


def response_error(status_code: int, body: bytes) -> ResponseError:
    """Build a ResponseError from an HTTP error body.

    A JSON object with a non-empty string ``error`` field supplies the message;
    otherwise the raw body text is used.
    """
    text = body.decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("error")
        if isinstance(message, str) and message:
            return ResponseError(message, status_code)
    return ResponseError(text, status_code)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk an exception graph: chained causes, wrapped args, urllib3 ``reason``."""
    pending = [exc]
    seen: Set[int] = set()
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__cause__, current.__context__, getattr(current, "reason", None)):
            if isinstance(linked, BaseException):
                pending.append(linked)
        for arg in getattr(current, "args", ()):
            if isinstance(arg, BaseException):
                pending.append(arg)


def is_timeout(exc: BaseException) -> bool:
    names = {"Timeout", "ConnectTimeout", "ReadTimeout", "ConnectTimeoutError", "ReadTimeoutError"}
    for cause in _causes(exc):
        if isinstance(cause, (TimeoutError, socket.timeout)) or type(cause).__name__ in names:
            return True
    return False


def is_connect_error(exc: BaseException) -> bool:
    """Return True when ``exc`` means the server could not be reached at all.

    Structured inspection first (refused / network unreachable / host unreachable
    errnos, DNS resolution failures), substring matching only as a fallback.
    Deadline expiry is never a connection error.
    """
    if is_timeout(exc):
        return False
    causes = list(_causes(exc))
    for cause in causes:
        if isinstance(cause, ConnectionRefusedError):
            return True
        if isinstance(cause, socket.gaierror):
            return True
        if isinstance(cause, OSError) and cause.errno in _CONNECT_ERRNOS:
            return True
    for cause in causes:
        text = str(cause).lower()
        if any(phrase in text for phrase in _CONNECT_PHRASES):
            return True
    return False
