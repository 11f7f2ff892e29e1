"""Pytest session bootstrap for this repository.

Responsibilities:
- Ensure the project root (containing the `ollama_http` package) is importable
- Keep OLLAMA_* variables from the developer's shell out of the tests
- Provide fake sessions and real `requests.Response` objects over in-memory bodies
"""

import io
import json
import os
import sys
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest
import requests

HERE = os.path.dirname(__file__)
ROOT = os.path.abspath(os.path.join(HERE, '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ollama_http.infrastructure.config.settings import ClientSettings  # noqa: E402


class TrackedResponse(requests.Response):
    """A real Response that counts close() calls."""

    def __init__(self) -> None:
        super().__init__()
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class ChunkedRaw:
    """Mimics urllib3's streaming body: yields the given chunks as they 'arrive'."""

    def __init__(self, chunks: Iterable[bytes], error: Optional[BaseException] = None) -> None:
        self._chunks = list(chunks)
        self._error = error
        self.closed = False

    def stream(self, amt=None, decode_content=None):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    def read(self, amt=None):
        return b"".join(self._chunks)

    def close(self) -> None:
        self.closed = True


def make_response(
    status: int = 200,
    body: Any = b"",
    *,
    chunks: Optional[Iterable[bytes]] = None,
    error: Optional[BaseException] = None,
    content_type: str = "application/json",
) -> TrackedResponse:
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    resp = TrackedResponse()
    resp.status_code = status
    resp.headers["Content-Type"] = content_type
    resp.raw = ChunkedRaw(chunks, error) if chunks is not None else io.BytesIO(body)
    return resp


def ndjson_response(lines: List[Any], *, trailing_newline: bool = True, status: int = 200) -> TrackedResponse:
    text = "\n".join(json.dumps(x) if not isinstance(x, str) else x for x in lines)
    if trailing_newline:
        text += "\n"
    return make_response(status, text, content_type="application/x-ndjson")


class FakeSession:
    """Stands in for requests.Session; records every call and delegates to a handler."""

    def __init__(self, handler: Optional[Callable[[Dict[str, Any]], Any]] = None) -> None:
        self.handler = handler or (lambda call: make_response(200, {}))
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self._lock = threading.Lock()

    def request(self, method, url, data=None, headers=None, timeout=None, stream=False, **kwargs):
        body = data.read() if hasattr(data, "read") else data
        call = {
            "method": method,
            "url": url,
            "body": body,
            "headers": dict(headers or {}),
            "timeout": timeout,
            "stream": stream,
        }
        with self._lock:
            self.calls.append(call)
        result = self.handler(call)
        if isinstance(result, BaseException):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


class ExplodingSession(FakeSession):
    """Fails the test if any request reaches the network layer."""

    def request(self, *args, **kwargs):
        pytest.fail("request reached the network")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("OLLAMA_HOST", "OLLAMA_BASE_URL", "OLLAMA_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def settings():
    return ClientSettings(_env_file=None)


@pytest.fixture
def make_client(settings):
    from ollama_http.client import Client

    def _make(handler=None, session=None, **kwargs):
        session = session or FakeSession(handler)
        client = Client("http://ollama.test:11434", session=session, settings=settings, **kwargs)
        return client, session
    return _make
