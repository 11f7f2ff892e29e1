from __future__ import annotations

"""
HTTP transport wrapper around a requests.Session.

Owns the session, the default headers and the canonical base URL, and performs
exactly one HTTP exchange per call. Nothing is retried here.
"""

from typing import Any, Mapping, Optional, Tuple, Union
import logging

import requests

from ..errors import ConnectionError
from . import classify as _classify
from .networking import default_headers


TimeoutType = Optional[Union[float, Tuple[float, float]]]

# Sentinel so callers can pass timeout=None explicitly to mean "no deadline".
_DEFAULT = object()


class TransportHttpClient:
    """
    Thin wrapper around a requests.Session.
    Responsibilities:
      - Merge default headers with per-call headers (per-call wins)
      - Honor the caller's deadline (timeout) for every exchange
      - Classify unreachable-server failures as ConnectionError
      - Turn status >= 400 into ResponseError, closing the body first
      - Hand the open response to the caller on success
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: TimeoutType = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = default_headers(headers)
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self._logger = logger or logging.getLogger(__name__)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def send(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Any = _DEFAULT,
    ) -> requests.Response:
        """
        Issue one request and return the raw response.

        The response is requested with ``stream=True`` and returned unread: the
        caller owns the body and must close it. On status >= 400 the body is read,
        closed and a ResponseError is raised instead.

        Raises:
            ConnectionError: The server could not be reached.
            ResponseError: The server answered with status >= 400.
            requests.RequestException: Any other transport failure, unclassified
                (including deadline expiry).
        """
        merged = self.headers.copy()
        if headers:
            merged.update(headers)
        deadline = self.timeout if timeout is _DEFAULT else timeout
        url = self.url(path)

        try:
            response = self.session.request(
                method,
                url,
                data=body,
                headers=merged,
                timeout=deadline,
                stream=True,
            )
        except requests.RequestException as e:
            if _classify.is_connect_error(e):
                self._logger.debug(f"{method} {url} failed to connect: {e}")
                raise ConnectionError() from e
            self._logger.debug(f"{method} {url} failed: {e}")
            raise

        self._logger.debug(f"{method} {url} -> {response.status_code}")
        if response.status_code >= 400:
            try:
                raw = response.content
            finally:
                response.close()
            raise _classify.response_error(response.status_code, raw)
        return response

    def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session:
            self.session.close()
