"""API settings with environment variable support.

All settings can be overridden via environment variables with the
``AI_AGENTS_`` prefix, e.g. ``AI_AGENTS_PROJECT_ID=...``.  A ``.env`` file
in the working directory is read as well.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aiagents.errors import ConfigurationError


class Settings(BaseSettings):
    """Connection settings for the resource API."""

    model_config = SettingsConfigDict(
        env_prefix="AI_AGENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(
        default="https://ai-agents.api.cloud.ru",
        description="Base URL of the resource API",
    )
    project_id: str = Field(
        default="",
        description="Project that owns the deployed resources",
    )
    token: str | None = Field(
        default=None,
        description="Bearer token sent with every request",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request HTTP timeout in seconds",
    )
    instance_type_id: str | None = Field(
        default=None,
        description="Instance type attached to agent create requests",
    )
    page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Page size used when listing existing resources",
    )

    def require_project(self) -> str:
        """Return ``project_id`` or raise if it is not configured."""
        if not self.project_id:
            msg = "project id is not set; use --project-id or AI_AGENTS_PROJECT_ID"
            raise ConfigurationError(msg)
        return self.project_id
