"""Error types raised by the HTTP capability."""

from __future__ import annotations

from aiagents.errors import CapabilityError


class APIError(CapabilityError):
    """The API answered with an error status."""

    def __init__(self, operation: str, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        self.message = message
        detail = f"API error (status {status_code})" + (f": {message}" if message else "")
        super().__init__(operation, detail)


class APIConnectionError(CapabilityError):
    """The request never produced a response (DNS, TLS, timeout, reset)."""
