"""
Client facade - binds the JSON exchange and the NDJSON stream to each endpoint.
"""

from __future__ import annotations
import hashlib
import logging
import os
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar, Union

import requests

from .domain.models import (
    ChatRequest,
    ChatResponse,
    CopyRequest,
    CreateRequest,
    DeleteRequest,
    EmbeddingsRequest,
    EmbeddingsResponse,
    EmbedRequest,
    EmbedResponse,
    GenerateRequest,
    GenerateResponse,
    ListResponse,
    Message,
    Payload,
    ProcessResponse,
    ProgressResponse,
    PullRequest,
    PushRequest,
    ShowRequest,
    ShowResponse,
    StatusResponse,
)
from .domain.models.options import as_images
from .errors import ConnectionError, RequestError, ResponseError
from .infrastructure.config.settings import ClientSettings
from .transport.exchange import encode_json, ensure_model, request_json
from .transport.http import TransportHttpClient, TimeoutType, _DEFAULT
from .transport.networking import resolve_host
from .transport.stream import Stream


R = TypeVar("R", bound=Payload)
Q = TypeVar("Q", bound=Payload)

_BLOB_CHUNK = 1024 * 1024


class Client:
    """Synchronous client for the Ollama REST API.

    Safe to share across threads: configuration is immutable after construction
    and every call allocates its own request/response state. Streams returned by
    the ``*_stream`` methods belong to a single consumer and must be closed.

    Every method accepts a keyword-only ``timeout`` (seconds, or a
    ``(connect, read)`` tuple) overriding the client default for that call.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: TimeoutType = None,
        session: Optional[requests.Session] = None,
        settings: Optional[ClientSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        settings = settings or ClientSettings()
        base_url = resolve_host(host, settings)
        self._transport = TransportHttpClient(
            base_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.timeout,
            session=session,
            logger=self._logger,
        )
        self._logger.debug(f"Ollama client initialized - Host: {base_url}")

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    @property
    def headers(self) -> Mapping[str, str]:
        return self._transport.headers

    # ---------------- Internal helpers ----------------
    def _build(self, cls: Type[Q], model: str, extra: Mapping[str, Any], **fixed: Any) -> Q:
        """Build a request from the method's own arguments plus caller ``extra`` fields.

        ``extra`` may not override what the method sets itself (``stream`` on
        the streamable endpoints, ``prompt``/``messages``/``input``).
        """
        ensure_model(model)
        clash = sorted(set(extra) & set(fixed))
        if clash:
            raise RequestError(f"cannot pass {', '.join(clash)} as an extra field; the method sets it")
        fields = {**extra, **fixed}
        if fields.get("images") is not None:
            fields["images"] = as_images(fields["images"])
        if fields.get("messages") is not None:
            fields["messages"] = [Message.coerce(m) for m in fields["messages"]]
        return cls(model=model, **fields)  # type: ignore[call-arg]

    def _stream(self, path: str, request: Payload, shape: Type[R], timeout: Any) -> Stream[R]:
        body = encode_json(request)
        response = self._transport.send("POST", path, body=body, timeout=timeout)
        return Stream(response, shape, logger=self._logger)

    def _status(self, method: str, path: str, request: Payload, timeout: Any) -> StatusResponse:
        try:
            response = self._transport.send(method, path, body=encode_json(request), timeout=timeout)
        except (ResponseError, ConnectionError) as e:
            self._logger.debug(f"{method} {path} reported {e}")
            return StatusResponse(status="error")
        try:
            ok = response.status_code == 200
        finally:
            response.close()
        return StatusResponse(status="success" if ok else "error")

    # ---------------- Generation ----------------
    def generate(
        self,
        model: str = "",
        prompt: Optional[str] = None,
        *,
        timeout: Any = _DEFAULT,
        **fields: Any,
    ) -> GenerateResponse:
        """Non-streaming generation. Extra fields map onto GenerateRequest
        (suffix, system, template, context, raw, images, format, options,
        keep_alive, think)."""
        request = self._build(GenerateRequest, model, fields, stream=False, prompt=prompt)
        return request_json(self._transport, "POST", "/api/generate", request, GenerateResponse, timeout=timeout)

    def generate_stream(
        self,
        model: str = "",
        prompt: Optional[str] = None,
        *,
        timeout: Any = _DEFAULT,
        **fields: Any,
    ) -> Stream[GenerateResponse]:
        """Streaming generation; returns an open Stream of GenerateResponse chunks."""
        request = self._build(GenerateRequest, model, fields, stream=True, prompt=prompt)
        return self._stream("/api/generate", request, GenerateResponse, timeout)

    def chat(
        self,
        model: str = "",
        messages: Optional[Sequence[Union[Message, Mapping[str, Any]]]] = None,
        *,
        timeout: Any = _DEFAULT,
        **fields: Any,
    ) -> ChatResponse:
        """Non-streaming chat. Extra fields map onto ChatRequest (tools, think,
        format, options, keep_alive)."""
        request = self._build(ChatRequest, model, fields, stream=False, messages=messages)
        return request_json(self._transport, "POST", "/api/chat", request, ChatResponse, timeout=timeout)

    def chat_stream(
        self,
        model: str = "",
        messages: Optional[Sequence[Union[Message, Mapping[str, Any]]]] = None,
        *,
        timeout: Any = _DEFAULT,
        **fields: Any,
    ) -> Stream[ChatResponse]:
        """Streaming chat; returns an open Stream of ChatResponse chunks."""
        request = self._build(ChatRequest, model, fields, stream=True, messages=messages)
        return self._stream("/api/chat", request, ChatResponse, timeout)

    # ---------------- Embeddings ----------------
    def embed(
        self,
        model: str = "",
        input: Union[str, Sequence[str]] = "",
        *,
        timeout: Any = _DEFAULT,
        **fields: Any,
    ) -> EmbedResponse:
        """Batch embeddings via /api/embed."""
        if not isinstance(input, str):
            input = list(input)
        request = self._build(EmbedRequest, model, fields, input=input)
        return request_json(self._transport, "POST", "/api/embed", request, EmbedResponse, timeout=timeout)

    def embeddings(
        self,
        model: str = "",
        prompt: Optional[str] = None,
        *,
        timeout: Any = _DEFAULT,
        **fields: Any,
    ) -> EmbeddingsResponse:
        """Single embedding via the deprecated /api/embeddings endpoint."""
        request = self._build(EmbeddingsRequest, model, fields, prompt=prompt)
        return request_json(self._transport, "POST", "/api/embeddings", request, EmbeddingsResponse, timeout=timeout)

    # ---------------- Model management ----------------
    def pull(self, model: str = "", *, insecure: Optional[bool] = None, timeout: Any = _DEFAULT) -> ProgressResponse:
        """Pull a model and return the final progress snapshot."""
        request = self._build(PullRequest, model, {}, stream=False, insecure=insecure)
        return request_json(self._transport, "POST", "/api/pull", request, ProgressResponse, timeout=timeout)

    def pull_stream(self, model: str = "", *, insecure: Optional[bool] = None, timeout: Any = _DEFAULT) -> Stream[ProgressResponse]:
        request = self._build(PullRequest, model, {}, stream=True, insecure=insecure)
        return self._stream("/api/pull", request, ProgressResponse, timeout)

    def push(self, model: str = "", *, insecure: Optional[bool] = None, timeout: Any = _DEFAULT) -> ProgressResponse:
        """Push a model and return the final progress snapshot."""
        request = self._build(PushRequest, model, {}, stream=False, insecure=insecure)
        return request_json(self._transport, "POST", "/api/push", request, ProgressResponse, timeout=timeout)

    def push_stream(self, model: str = "", *, insecure: Optional[bool] = None, timeout: Any = _DEFAULT) -> Stream[ProgressResponse]:
        request = self._build(PushRequest, model, {}, stream=True, insecure=insecure)
        return self._stream("/api/push", request, ProgressResponse, timeout)

    def create(self, model: str = "", *, timeout: Any = _DEFAULT, **fields: Any) -> ProgressResponse:
        """Create a model. Extra fields map onto CreateRequest (quantize, from_,
        files, adapters, template, license, system, parameters, messages)."""
        request = self._build(CreateRequest, model, fields, stream=False)
        return request_json(self._transport, "POST", "/api/create", request, ProgressResponse, timeout=timeout)

    def create_stream(self, model: str = "", *, timeout: Any = _DEFAULT, **fields: Any) -> Stream[ProgressResponse]:
        request = self._build(CreateRequest, model, fields, stream=True)
        return self._stream("/api/create", request, ProgressResponse, timeout)

    def create_blob(self, path: Union[str, os.PathLike], *, timeout: Any = _DEFAULT) -> str:
        """Upload a file content-addressed by its SHA-256 digest.

        Returns:
            The digest, ``sha256:<hex>``.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
        """
        with open(path, "rb") as f:
            sha = hashlib.sha256()
            for chunk in iter(lambda: f.read(_BLOB_CHUNK), b""):
                sha.update(chunk)
            digest = f"sha256:{sha.hexdigest()}"
            f.seek(0)
            response = self._transport.send("POST", f"/api/blobs/{digest}", body=f, timeout=timeout)
            response.close()
        return digest

    def list(self, *, timeout: Any = _DEFAULT) -> ListResponse:
        """List installed models."""
        return request_json(self._transport, "GET", "/api/tags", None, ListResponse, timeout=timeout)

    def show(self, model: str, *, timeout: Any = _DEFAULT) -> ShowResponse:
        """Show model metadata."""
        return request_json(self._transport, "POST", "/api/show", ShowRequest(model=model), ShowResponse, timeout=timeout)

    def ps(self, *, timeout: Any = _DEFAULT) -> ProcessResponse:
        """List running models."""
        return request_json(self._transport, "GET", "/api/ps", None, ProcessResponse, timeout=timeout)

    def delete(self, model: str, *, timeout: Any = _DEFAULT) -> StatusResponse:
        """Delete a model; status is "success" only for HTTP 200."""
        return self._status("DELETE", "/api/delete", DeleteRequest(model=model), timeout)

    def copy(self, source: str, destination: str, *, timeout: Any = _DEFAULT) -> StatusResponse:
        """Copy a model; status is "success" only for HTTP 200."""
        return self._status("POST", "/api/copy", CopyRequest(source=source, destination=destination), timeout)

    # ---------------- Lifecycle ----------------
    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
