"""Wire models for the resource API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class RemoteResource(BaseModel):
    """The subset of a listed resource the deployment pipeline needs."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    status: str | None = None


class ResourcePage(BaseModel):
    """One page of a paginated list response."""

    data: list[RemoteResource] = []
    total: int = 0


class CreatedResource(BaseModel):
    """Response body of a create call; only ``id`` is required."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str | None = None


class ErrorBody(BaseModel):
    """``{"error": {"code": ..., "message": ...}}`` error envelope."""

    error: dict[str, Any] = {}

    @property
    def message(self) -> str:
        return str(self.error.get("message", ""))
