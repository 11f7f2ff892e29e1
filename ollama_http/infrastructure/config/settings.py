"""
Configuration settings - environment and .env driven defaults for the client.
Uses pydantic-settings for validation and environment variable loading.
"""

from __future__ import annotations
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client defaults; explicit constructor arguments always take precedence."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # OLLAMA_BASE_URL is accepted as an alias when OLLAMA_HOST is unset
    host: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OLLAMA_HOST", "OLLAMA_BASE_URL"),
    )
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("OLLAMA_TIMEOUT"),
    )
