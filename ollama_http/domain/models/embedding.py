"""
Embedding payloads for /api/embed and the deprecated /api/embeddings.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .base import Payload
from .options import Options


@dataclass
class EmbedRequest(Payload):
    model: str = ""
    input: Union[str, List[str]] = ""
    truncate: Optional[bool] = None
    options: Optional[Union[Options, Dict[str, Any]]] = None
    keep_alive: Optional[Union[float, str]] = None
    dimensions: Optional[int] = None


@dataclass
class EmbedResponse(Payload):
    model: Optional[str] = None
    embeddings: List[List[float]] = field(default_factory=list)
    total_duration: Optional[int] = None
    load_duration: Optional[int] = None
    prompt_eval_count: Optional[int] = None


@dataclass
class EmbeddingsRequest(Payload):
    """Deprecated: use EmbedRequest."""
    model: str = ""
    prompt: Optional[str] = None
    options: Optional[Union[Options, Dict[str, Any]]] = None
    keep_alive: Optional[Union[float, str]] = None


@dataclass
class EmbeddingsResponse(Payload):
    embedding: List[float] = field(default_factory=list)
