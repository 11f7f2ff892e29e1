from __future__ import annotations

"""
Incremental NDJSON decoder over a live response body.

A Stream is forward-only and single-consumer. It must be closed explicitly (or
used as a context manager); closing is idempotent and releases the body once.
"""

from typing import Generic, Iterator, Optional, Type, TypeVar
import logging

import requests

from ..domain.models.base import Payload
from ..errors import DecodeError, ResponseError
from . import classify as _classify
from .exchange import decode_object


T = TypeVar("T", bound=Payload)


class Stream(Generic[T]):
    """
    Lazy sequence of typed values decoded one line at a time.

    - ``recv()`` returns the next value, or None at end of stream.
    - A document with a non-empty ``"error"`` string raises ResponseError with the
      stream's HTTP status; values already returned stay valid.
    - Invalid JSON raises DecodeError; the stream stays open until closed.
    - A read deadline expiring mid-body raises requests.ReadTimeout; the stream
      stays open until closed.
    - After ``close()``, ``recv()`` returns None.

    No internal locking: do not read one Stream from several threads.
    """

    def __init__(
        self,
        response: requests.Response,
        shape: Type[T],
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._response: Optional[requests.Response] = response
        self._shape = shape
        self._status_code = response.status_code
        # chunk_size=None yields each transfer chunk as it arrives instead of
        # blocking for a fixed number of bytes.
        self._chunks: Optional[Iterator[bytes]] = response.iter_content(chunk_size=None)
        self._buffer = bytearray()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def closed(self) -> bool:
        return self._response is None

    def _pull_chunk(self) -> Optional[bytes]:
        """Next transfer chunk, or None once the body is drained.

        requests surfaces an expired read deadline mid-body as its
        ConnectionError; it is re-raised as ReadTimeout and the stream stays
        open for the caller to close.
        """
        if self._chunks is None:
            return None
        try:
            return next(self._chunks, None)
        except requests.RequestException as e:
            self._chunks = None
            self._buffer.clear()
            if _classify.is_timeout(e):
                self._logger.debug(f"stream read timed out (status {self._status_code}): {e}")
                raise requests.exceptions.ReadTimeout(str(e), response=self._response) from e
            raise

    def _next_line(self) -> Optional[bytes]:
        """Return the next line without its terminator, or None once the body is drained."""
        while True:
            idx = self._buffer.find(b"\n")
            if idx >= 0:
                line = bytes(self._buffer[:idx])
                del self._buffer[: idx + 1]
                return line
            chunk = self._pull_chunk()
            if chunk is None:
                self._chunks = None
                if self._buffer:
                    line = bytes(self._buffer)
                    self._buffer.clear()
                    return line
                return None
            self._buffer.extend(chunk)

    def recv(self) -> Optional[T]:
        """Read and decode the next document; None signals end of stream."""
        if self._response is None:
            return None
        while True:
            line = self._next_line()
            if line is None:
                return None
            doc = line.decode("utf-8", errors="replace").strip()
            if not doc:
                continue
            obj = decode_object(doc)
            message = obj.get("error")
            if isinstance(message, str) and message:
                self._logger.debug(f"in-band error on stream (status {self._status_code}): {message}")
                raise ResponseError(message, self._status_code)
            try:
                return self._shape.from_dict(obj)
            except (TypeError, ValueError, AttributeError) as e:
                raise DecodeError(f"unexpected {self._shape.__name__} document: {e}", doc) from e

    def close(self) -> None:
        """Release the response body. Safe to call more than once."""
        response, self._response = self._response, None
        self._chunks = None
        self._buffer.clear()
        if response is not None:
            response.close()

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        value = self.recv()
        if value is None:
            raise StopIteration
        return value

    def __enter__(self) -> Stream[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

