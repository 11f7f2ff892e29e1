from __future__ import annotations

"""
Networking helpers for host resolution and default request headers.

`parse_host` matches the official Ollama clients, so the same OLLAMA_HOST value
resolves to the same base URL in every language binding.
"""

from typing import Mapping, Optional, TYPE_CHECKING
from urllib.parse import urlsplit
import platform

from requests.structures import CaseInsensitiveDict

from .. import __version__

if TYPE_CHECKING:  # pragma: no cover
    from ..infrastructure.config.settings import ClientSettings


DEFAULT_PORT = 11434
FALLBACK_HOST = "127.0.0.1"
DEFAULT_BASE_URL = f"http://{FALLBACK_HOST}:{DEFAULT_PORT}"

_SCHEME_PORTS = {"http": 80, "https": 443}


def _netloc_hostname(netloc: str) -> str:
    """Host part of a netloc with its original case, brackets removed."""
    hostinfo = netloc.rpartition("@")[2]
    if hostinfo.startswith("["):
        return hostinfo[1:].partition("]")[0]
    return hostinfo.partition(":")[0]


def _netloc_port(netloc: str) -> Optional[str]:
    """Explicit port of a netloc as written, or None. Only digits are checked, not range."""
    hostinfo = netloc.rpartition("@")[2]
    if hostinfo.startswith("["):
        hostinfo = hostinfo.partition("]")[2]
    port = hostinfo.partition(":")[2]
    if not port:
        return None
    if not (port.isascii() and port.isdigit()):
        raise ValueError(f"invalid port {port!r}")
    return port


def parse_host(raw: Optional[str]) -> str:
    """Normalize a loosely specified host into ``scheme://host:port[/path]``.

    - No scheme: ``http`` with port 11434 unless one is given.
    - Explicit ``http``/``https`` without a port: 80/443.
    - Trailing slashes are stripped; any other path survives verbatim.
    - IPv6 literals are always bracketed.

    Empty input returns ``""`` so the caller can substitute its default. Input
    that cannot be parsed as a host falls back to ``<scheme>://127.0.0.1:11434``;
    this function never raises.
    """
    host = (raw or "").strip()
    if not host:
        return ""

    scheme, sep, rest = host.partition("://")
    port = DEFAULT_PORT
    if not sep:
        scheme, rest = "http", host
    else:
        port = _SCHEME_PORTS.get(scheme, DEFAULT_PORT)

    fallback = f"{scheme}://{FALLBACK_HOST}:{DEFAULT_PORT}"
    try:
        split = urlsplit(f"{scheme}://{rest}")
        explicit_port = _netloc_port(split.netloc)
    except ValueError:
        return fallback

    name = _netloc_hostname(split.netloc)
    if not name:
        return fallback
    if explicit_port is not None:
        port = explicit_port
    if ":" in name:
        name = f"[{name}]"

    base = f"{scheme}://{name}:{port}"
    path = split.path.strip("/")
    if path:
        return f"{base}/{path}"
    return base


def resolve_host(host: Optional[str] = None, settings: Optional["ClientSettings"] = None) -> str:
    """Resolve the base URL for a client.

    Priority:
      1) Explicit host argument
      2) OLLAMA_HOST (or OLLAMA_BASE_URL) via ClientSettings
      3) http://127.0.0.1:11434
    """
    if host and host.strip():
        return parse_host(host)
    if settings is None:
        from ..infrastructure.config.settings import ClientSettings
        settings = ClientSettings()
    if settings.host and settings.host.strip():
        return parse_host(settings.host)
    return DEFAULT_BASE_URL


def user_agent() -> str:
    return (
        f"ollama-http/{__version__} "
        f"({platform.machine()} {platform.system().lower()}) "
        f"Python/{platform.python_version()}"
    )


def default_headers(extra: Optional[Mapping[str, str]] = None) -> CaseInsensitiveDict:
    """Default headers for every request; caller-supplied values win."""
    headers: CaseInsensitiveDict = CaseInsensitiveDict({
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": user_agent(),
    })
    if extra:
        headers.update(extra)
    return headers
