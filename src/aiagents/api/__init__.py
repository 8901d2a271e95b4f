"""API layer — the capability protocol and its HTTP implementation."""

from aiagents.api.client import APIClient
from aiagents.api.errors import APIConnectionError, APIError
from aiagents.api.models import CreatedResource, RemoteResource, ResourcePage
from aiagents.api.provider import ResourceCapability

__all__ = [
    "APIClient",
    "APIConnectionError",
    "APIError",
    "CreatedResource",
    "RemoteResource",
    "ResourceCapability",
    "ResourcePage",
]
