from __future__ import annotations

"""
Single-shot JSON exchange: encode a payload, send it, decode one JSON document.
"""

from typing import Any, Mapping, Optional, Type, TypeVar
import json

from ..domain.models.base import Payload, to_wire
from ..errors import DecodeError, RequestError
from .http import TransportHttpClient, _DEFAULT


T = TypeVar("T", bound=Payload)


def ensure_model(model: Optional[str]) -> None:
    """Reject an empty model locally, before any network I/O."""
    if not model:
        raise RequestError("model is required")


def encode_json(payload: Any) -> bytes:
    """Serialize a payload as compact UTF-8 JSON (no ASCII or HTML escaping)."""
    return json.dumps(to_wire(payload), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_object(doc: str) -> Mapping[str, Any]:
    try:
        obj = json.loads(doc)
    except ValueError as e:
        raise DecodeError(f"invalid JSON document: {e}", doc) from e
    if not isinstance(obj, dict):
        raise DecodeError(f"expected a JSON object, got {type(obj).__name__}", doc)
    return obj


def decode_document(raw: bytes, shape: Type[T]) -> T:
    """Decode exactly one JSON object into ``shape``."""
    doc = raw.decode("utf-8", errors="replace")
    obj = decode_object(doc)
    try:
        return shape.from_dict(obj)
    except (TypeError, ValueError, AttributeError) as e:
        raise DecodeError(f"unexpected {shape.__name__} document: {e}", doc) from e


def request_json(
    transport: TransportHttpClient,
    method: str,
    path: str,
    payload: Any,
    shape: Type[T],
    *,
    timeout: Any = _DEFAULT,
) -> T:
    """Send ``payload`` (or no body when None) and decode the response into ``shape``.

    The response body is closed on every path.
    """
    body = encode_json(payload) if payload is not None else None
    response = transport.send(method, path, body=body, timeout=timeout)
    try:
        return decode_document(response.content, shape)
    finally:
        response.close()
