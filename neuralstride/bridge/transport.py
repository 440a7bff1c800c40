"""
Message transport between the two runtime contexts.

A transport delivers one message and returns the peer's response (or None
when the peer does not answer). Delivery failures raise TransportError.
"""

from typing import Any, Callable, Dict, Optional, Protocol

from neuralstride.bridge import messages

Handler = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]


class TransportError(Exception):
    """The peer context could not be reached."""


class Transport(Protocol):
    def send(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]: ...


class InProcessTransport:
    """
    Deliver messages to a handler in the same process.

    Messages and responses go through the JSON codec, so only wire-safe
    payloads cross the boundary.
    """

    def __init__(self, handler: Handler):
        self.handler = handler

    def send(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        request = messages.decode(messages.encode(message))
        response = self.handler(request)
        return messages.decode(messages.encode(response))


class UnavailableTransport:
    """Transport used when no background context is installed."""

    def send(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise TransportError("background context not available")
