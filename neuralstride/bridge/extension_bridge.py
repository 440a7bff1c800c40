"""
Foreground side of the session bridge.

The foreground discovers the background monitor once with a ping. If the
ping fails or goes unanswered, every later push from this bridge is dropped
for good; nothing is retried.
"""

import logging
from typing import Optional

from neuralstride.bridge import messages
from neuralstride.bridge.transport import Transport, TransportError
from neuralstride.core.posture_scorer import PostureMetrics

logger = logging.getLogger(__name__)


class ExtensionBridge:
    """Best-effort, unacknowledged pushes from the foreground session."""

    def __init__(self, transport: Optional[Transport]):
        self.transport = transport
        self.is_extension_available = False
        self._handshake_failed = False

    def check_extension(self) -> bool:
        """Ping the background context. A failure disables this bridge permanently."""
        if self._handshake_failed:
            return False
        if self.transport is None:
            logger.info("No transport configured, extension bridge disabled")
            self._handshake_failed = True
            return False

        try:
            response = self.transport.send(messages.ping())
        except TransportError as e:
            logger.info("Extension not responding: %s", e)
            response = None

        if not response:
            self._handshake_failed = True
            self.is_extension_available = False
            return False

        self.is_extension_available = True
        logger.info("Extension connected: %s", response)
        return True

    def send_posture_data(self, metrics: PostureMetrics) -> None:
        if not self.is_extension_available:
            return
        self._push(messages.update_posture(
            metrics.posture_score, metrics.cervical_angle, metrics.is_person_detected))

    def send_session_status(self, is_active: bool) -> None:
        if not self.is_extension_available:
            return
        logger.debug("Sending session status: %s", is_active)
        self._push(messages.session_status(is_active))

    def _push(self, message) -> None:
        try:
            self.transport.send(message)
        except TransportError as e:
            logger.warning("Error sending %s: %s", message.get("action"), e)
