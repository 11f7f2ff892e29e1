"""Domain models package: request and response shapes for every endpoint."""

from .base import Payload
from .options import Image, Options
from .generation import (
    ChatRequest,
    ChatResponse,
    GenerateRequest,
    GenerateResponse,
    Message,
    Tool,
    ToolCall,
    ToolCallFunction,
    ToolFunction,
    ToolParameters,
)
from .embedding import EmbedRequest, EmbedResponse, EmbeddingsRequest, EmbeddingsResponse
from .management import (
    CopyRequest,
    CreateRequest,
    DeleteRequest,
    ListModel,
    ListResponse,
    ModelDetails,
    ProcessModel,
    ProcessResponse,
    ProgressResponse,
    PullRequest,
    PushRequest,
    ShowRequest,
    ShowResponse,
    StatusResponse,
)

__all__ = [
    "Payload",
    "Image",
    "Options",
    "ChatRequest",
    "ChatResponse",
    "GenerateRequest",
    "GenerateResponse",
    "Message",
    "Tool",
    "ToolCall",
    "ToolCallFunction",
    "ToolFunction",
    "ToolParameters",
    "EmbedRequest",
    "EmbedResponse",
    "EmbeddingsRequest",
    "EmbeddingsResponse",
    "CopyRequest",
    "CreateRequest",
    "DeleteRequest",
    "ListModel",
    "ListResponse",
    "ModelDetails",
    "ProcessModel",
    "ProcessResponse",
    "ProgressResponse",
    "PullRequest",
    "PushRequest",
    "ShowRequest",
    "ShowResponse",
    "StatusResponse",
]
