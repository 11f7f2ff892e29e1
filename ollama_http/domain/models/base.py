"""
Shared serialization for wire payloads.
"""

from __future__ import annotations
from dataclasses import fields
from typing import Any, Dict, Mapping, Type, TypeVar


P = TypeVar("P", bound="Payload")


def to_wire(value: Any) -> Any:
    """Convert nested payloads and containers to JSON-ready values."""
    if isinstance(value, Payload):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


class Payload:
    """Mixin for dataclass payloads.

    Fields set to None are omitted on the wire. A field may declare a different
    wire name with ``field(metadata={"wire": "from"})``.
    """

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for API calls."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.metadata.get("wire", f.name)] = to_wire(value)
        return out

    @classmethod
    def from_dict(cls: Type[P], data: Mapping[str, Any]) -> P:
        """Create from a decoded JSON object; unknown keys are ignored."""
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            key = f.metadata.get("wire", f.name)
            if key in data:
                kwargs[f.name] = data[key]
        return cls(**kwargs)
