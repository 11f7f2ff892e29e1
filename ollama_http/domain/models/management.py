"""
Model management payloads: pull, push, create, list, show, ps, delete, copy.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .base import Payload
from .generation import Message


@dataclass
class PullRequest(Payload):
    model: str = ""
    stream: Optional[bool] = None
    insecure: Optional[bool] = None


@dataclass
class PushRequest(Payload):
    model: str = ""
    stream: Optional[bool] = None
    insecure: Optional[bool] = None


@dataclass
class CreateRequest(Payload):
    model: str = ""
    stream: Optional[bool] = None
    quantize: Optional[str] = None
    from_: Optional[str] = field(default=None, metadata={"wire": "from"})
    files: Optional[Dict[str, str]] = None
    adapters: Optional[Dict[str, str]] = None
    template: Optional[str] = None
    license: Optional[Union[str, List[str]]] = None
    system: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    messages: Optional[List[Message]] = None


@dataclass
class ProgressResponse(Payload):
    """Progress snapshot for pull/push/create (one per streamed line)."""
    status: Optional[str] = None
    completed: Optional[int] = None
    total: Optional[int] = None
    digest: Optional[str] = None


@dataclass
class StatusResponse(Payload):
    """Outcome of delete/copy: "success" or "error"."""
    status: Optional[str] = None


@dataclass
class ModelDetails(Payload):
    parent_model: Optional[str] = None
    format: Optional[str] = None
    family: Optional[str] = None
    families: Optional[List[str]] = None
    parameter_size: Optional[str] = None
    quantization_level: Optional[str] = None


def _details(data: Mapping[str, Any]) -> Optional[ModelDetails]:
    raw = data.get("details")
    return ModelDetails.from_dict(raw) if isinstance(raw, Mapping) else None


@dataclass
class ListModel(Payload):
    model: Optional[str] = None
    modified_at: Optional[str] = None
    digest: Optional[str] = None
    size: Optional[int] = None
    details: Optional[ModelDetails] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListModel:
        return cls(
            model=data.get("model") or data.get("name"),
            modified_at=data.get("modified_at"),
            digest=data.get("digest"),
            size=data.get("size"),
            details=_details(data),
        )


@dataclass
class ListResponse(Payload):
    models: List[ListModel] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListResponse:
        return cls(models=[ListModel.from_dict(m) for m in data.get("models") or []])


@dataclass
class ShowRequest(Payload):
    model: str = ""


@dataclass
class ShowResponse(Payload):
    modified_at: Optional[str] = None
    template: Optional[str] = None
    modelfile: Optional[str] = None
    license: Optional[str] = None
    details: Optional[ModelDetails] = None
    model_info: Optional[Dict[str, Any]] = None
    parameters: Optional[str] = None
    capabilities: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ShowResponse:
        base = super().from_dict(data)
        base.details = _details(data)
        return base


@dataclass
class ProcessModel(Payload):
    model: Optional[str] = None
    name: Optional[str] = None
    digest: Optional[str] = None
    expires_at: Optional[str] = None
    size: Optional[int] = None
    size_vram: Optional[int] = None
    details: Optional[ModelDetails] = None
    context_length: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProcessModel:
        base = super().from_dict(data)
        base.details = _details(data)
        return base


@dataclass
class ProcessResponse(Payload):
    models: List[ProcessModel] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProcessResponse:
        return cls(models=[ProcessModel.from_dict(m) for m in data.get("models") or []])


@dataclass
class DeleteRequest(Payload):
    model: str = ""


@dataclass
class CopyRequest(Payload):
    source: str = ""
    destination: str = ""
