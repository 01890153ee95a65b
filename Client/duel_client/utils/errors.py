"""Structured exceptions used across the duel client."""

from typing import Any, Dict, Optional


class DuelClientError(Exception):
    """Base class for client-level exceptions."""

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


class ValidationError(DuelClientError):
    """Raised when local input is rejected before reaching the network."""


class GameIdRequiredError(ValidationError):
    """Raised when a join is requested without a game ID."""

    def __init__(self):
        super().__init__("Please enter a game ID")


class ProtocolError(DuelClientError):
    """Raised when an inbound server event has a malformed payload."""

    def __init__(self, event_name: str, reason: str, payload: Optional[Any] = None):
        self.event_name = event_name
        self.reason = reason
        self.payload = payload
        super().__init__(f"Malformed '{event_name}' event: {reason}")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({"event": self.event_name, "reason": self.reason})
        return payload


class ConnectionClosedError(DuelClientError):
    """Raised when a closed connection manager is asked to connect or send."""
