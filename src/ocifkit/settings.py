"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the ocifkit command line.

    Values are read from ``OCIF_``-prefixed environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="OCIF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Validation
    locator: Literal["scan", "span"] = "scan"
    max_document_size: int = 5_000_000  # characters
    max_depth: int = 64

    # Conversion
    default_format: str = "svg"
    escape_text: bool = False  # XML-escape node text in SVG output
