"""
Model options and image inputs.
"""

from __future__ import annotations
import base64
import binascii
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from ...errors import RequestError
from .base import Payload


_IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp")


@dataclass
class Options(Payload):
    """Load-time and runtime model options; unset fields are not sent."""
    # Load-time
    numa: Optional[bool] = None
    num_ctx: Optional[int] = None
    num_batch: Optional[int] = None
    num_gpu: Optional[int] = None
    main_gpu: Optional[int] = None
    low_vram: Optional[bool] = None
    f16_kv: Optional[bool] = None
    logits_all: Optional[bool] = None
    vocab_only: Optional[bool] = None
    use_mmap: Optional[bool] = None
    use_mlock: Optional[bool] = None
    embedding_only: Optional[bool] = None
    num_thread: Optional[int] = None
    # Runtime
    num_keep: Optional[int] = None
    seed: Optional[int] = None
    num_predict: Optional[int] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None
    tfs_z: Optional[float] = None
    typical_p: Optional[float] = None
    repeat_last_n: Optional[int] = None
    temperature: Optional[float] = None
    repeat_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    mirostat: Optional[int] = None
    mirostat_tau: Optional[float] = None
    mirostat_eta: Optional[float] = None
    penalize_newline: Optional[bool] = None
    stop: Optional[List[str]] = None


@dataclass
class Image(Payload):
    """Image input given as raw bytes, a file path, or a base64 string.

    Serializes to a base64 string. Invalid input raises RequestError, which
    happens while the request body is built and therefore before any I/O.
    """
    value: Union[bytes, str, os.PathLike]

    def to_dict(self) -> Any:  # type: ignore[override]
        return self.encode()

    def encode(self) -> str:
        value = self.value
        if isinstance(value, (bytes, bytearray)):
            return base64.b64encode(bytes(value)).decode("ascii")
        if isinstance(value, os.PathLike):
            value = os.fspath(value)
        if not isinstance(value, str):
            raise RequestError("Invalid image data type")

        path = Path(value)
        try:
            is_file = path.is_file()
        except (OSError, ValueError):
            is_file = False
        if is_file:
            return base64.b64encode(path.read_bytes()).decode("ascii")
        if value.lower().endswith(_IMAGE_SUFFIXES):
            raise RequestError(f"File {value} does not exist")
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            raise RequestError("Invalid image data, expected base64 string or path to image file") from None
        return value


def as_images(images: Optional[List[Any]]) -> Optional[List[Image]]:
    if images is None:
        return None
    return [img if isinstance(img, Image) else Image(img) for img in images]
