"""Configuration package."""

from .settings import ClientSettings

__all__ = ["ClientSettings"]
