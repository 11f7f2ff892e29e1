"""
ollama-http - A small synchronous client for the Ollama REST API.
"""

__version__ = "0.1.0"

__all__ = [
    "Client",
    "Stream",
    "ErrorKind",
    "OllamaError",
    "RequestError",
    "ResponseError",
    "ConnectionError",
    "DecodeError",
]


# Lazy attribute access keeps `import ollama_http` cheap and free of requests/pydantic
# imports until a client is actually needed.
def __getattr__(name: str):  # pragma: no cover - simple lazy loader
    if name == "Client":
        from .client import Client as _C
        return _C
    if name == "Stream":
        from .transport.stream import Stream as _S
        return _S
    if name in {
        "ErrorKind",
        "OllamaError",
        "RequestError",
        "ResponseError",
        "ConnectionError",
        "DecodeError",
    }:
        from . import errors as _errors
        return getattr(_errors, name)
    raise AttributeError(f"module 'ollama_http' has no attribute {name!r}")
