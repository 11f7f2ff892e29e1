"""
Generate and chat payloads, including tool declarations and tool calls.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .base import Payload
from .options import Image, Options, as_images


@dataclass
class ToolCallFunction(Payload):
    name: str = ""
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolCall(Payload):
    """A function call requested by the model."""
    function: ToolCallFunction = field(default_factory=ToolCallFunction)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolCall:
        return cls(function=ToolCallFunction.from_dict(data.get("function") or {}))


@dataclass
class ToolParameters(Payload):
    """JSON schema object for tool parameters; ``defs`` is sent as ``$defs``."""
    type: Optional[str] = "object"
    defs: Optional[Dict[str, Any]] = field(default=None, metadata={"wire": "$defs"})
    items: Optional[Any] = None
    required: Optional[List[str]] = None
    properties: Optional[Dict[str, Dict[str, Any]]] = None


@dataclass
class ToolFunction(Payload):
    name: Optional[str] = None
    description: Optional[str] = None
    parameters: Optional[ToolParameters] = None


@dataclass
class Tool(Payload):
    """A function the model may call."""
    type: Optional[str] = "function"
    function: Optional[ToolFunction] = None


@dataclass
class Message(Payload):
    """A chat message or streamed response fragment."""
    role: str = "user"
    content: Optional[str] = None
    thinking: Optional[str] = None
    images: Optional[List[Image]] = None
    tool_name: Optional[str] = None
    tool_calls: Optional[List[ToolCall]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        calls = data.get("tool_calls")
        images = data.get("images")
        return cls(
            role=data.get("role", "user"),
            content=data.get("content"),
            thinking=data.get("thinking"),
            images=as_images(images) if images else None,
            tool_name=data.get("tool_name"),
            tool_calls=[ToolCall.from_dict(c) for c in calls] if calls else None,
        )

    @classmethod
    def coerce(cls, value: Union[Message, Mapping[str, Any]]) -> Message:
        if isinstance(value, Message):
            return value
        return cls.from_dict(value)


@dataclass
class StreamableRequest(Payload):
    """Fields shared by every request that can stream its response."""
    model: str = ""
    stream: Optional[bool] = None
    options: Optional[Union[Options, Dict[str, Any]]] = None
    format: Optional[Union[str, Dict[str, Any]]] = None
    keep_alive: Optional[Union[float, str]] = None


@dataclass
class GenerateRequest(StreamableRequest):
    prompt: Optional[str] = None
    suffix: Optional[str] = None
    system: Optional[str] = None
    template: Optional[str] = None
    context: Optional[List[int]] = None
    raw: Optional[bool] = None
    images: Optional[List[Image]] = None
    think: Optional[Union[bool, str]] = None


@dataclass
class ChatRequest(StreamableRequest):
    messages: Optional[List[Message]] = None
    tools: Optional[List[Tool]] = None
    think: Optional[Union[bool, str]] = None


@dataclass
class GenerationMetrics(Payload):
    """Timing and token accounting metadata carried by generation responses."""
    model: Optional[str] = None
    created_at: Optional[str] = None
    done: Optional[bool] = None
    done_reason: Optional[str] = None
    total_duration: Optional[int] = None
    load_duration: Optional[int] = None
    prompt_eval_count: Optional[int] = None
    prompt_eval_duration: Optional[int] = None
    eval_count: Optional[int] = None
    eval_duration: Optional[int] = None


@dataclass
class GenerateResponse(GenerationMetrics):
    """Returned by /api/generate, including each streamed chunk."""
    response: str = ""
    thinking: Optional[str] = None
    context: Optional[List[int]] = None


@dataclass
class ChatResponse(GenerationMetrics):
    """Returned by /api/chat, including each streamed chunk."""
    message: Message = field(default_factory=Message)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChatResponse:
        base = GenerationMetrics.from_dict(data)
        return cls(
            **vars(base),
            message=Message.from_dict(data.get("message") or {}),
        )
