"""
Alert System Module for NeuralStride.

Purpose:
    Turn alert kinds raised by the background monitor (e.g. "plant_wilting",
    "monitoring_started") into notification events, subject to the user's
    notification preference and per-kind cooldowns, and hand them to the
    notification surface.

Separation of Concerns:
    - The drift simulator decides WHEN an alert condition occurs (e.g. the
      score crossing under the wilting threshold).
    - The AlertSystem decides WHETHER to surface it now.

Returned alert object format:
    {
        "kind": "plant_wilting",
        "title": "Your Plant is Wilting",
        "message": "Your posture is poor. Sit up straight",
        "priority": 2,
        "timestamp": 1736199999.123,
        "sequence_id": 3
    }

Thread-Safety:
    Not thread-safe; designed for the single-threaded background context.

Author: NeuralStride Engineering
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple
import logging
import time

from neuralstride.config.defaults import ALERT_MESSAGES

logger = logging.getLogger(__name__)


class NotificationSurface(Protocol):
    def notify(self, title: str, message: str, urgency: str = "normal") -> bool: ...


_URGENCY = {0: "low", 1: "normal", 2: "critical"}


@dataclass
class AlertEvent:
    """
    Structured alert emitted by the system.
    """
    kind: str
    title: str
    message: str
    priority: int
    timestamp: float
    sequence_id: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "message": self.message,
            "priority": self.priority,
            "timestamp": self.timestamp,
            "sequence_id": self.sequence_id,
        }


class AlertSystem:
    """
    Preference-gated, cooldown-limited notification dispatch.

    Parameters:
        notifier: Notification surface (SystemNotifier or a fake); None keeps events in history only.
        messages: Mapping kind -> (title, message).
        priorities: Mapping kind -> priority (0 low, 1 normal, 2 high).
        cooldowns: Mapping kind -> seconds before the same kind may fire again.
        enabled: Zero-argument callable reading the user's notification preference.
    """

    def __init__(
        self,
        notifier: Optional[NotificationSurface] = None,
        messages: Optional[Dict[str, Tuple[str, str]]] = None,
        priorities: Optional[Dict[str, int]] = None,
        cooldowns: Optional[Dict[str, float]] = None,
        enabled: Optional[Callable[[], bool]] = None,
    ):
        self.notifier = notifier
        self.messages = dict(messages or ALERT_MESSAGES)
        self.priorities = dict(priorities or {"plant_wilting": 2})
        self.cooldowns = dict(cooldowns or {})
        self.enabled = enabled or (lambda: True)

        self._last_sent_ts: Dict[str, float] = {}
        self._sequence_counter: int = 0
        self.history: List[AlertEvent] = []

    def raise_alert(self, kind: str, now: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """
        Surface an alert of the given kind.

        Returns:
            The alert event dict, or None when notifications are off or the
            kind is still cooling down.
        """
        now = time.time() if now is None else now

        if not self.enabled():
            logger.debug("Notifications disabled, dropping %s", kind)
            return None

        cooldown = self.cooldowns.get(kind, 0.0)
        last_ts = self._last_sent_ts.get(kind)
        if last_ts is not None and (now - last_ts) < cooldown:
            return None

        title, message = self.messages.get(kind, (kind, kind))
        priority = self.priorities.get(kind, 1)
        self._sequence_counter += 1
        event = AlertEvent(
            kind=kind,
            title=title,
            message=message,
            priority=priority,
            timestamp=now,
            sequence_id=self._sequence_counter,
        )
        self._last_sent_ts[kind] = now
        self.history.append(event)

        if self.notifier is not None:
            delivered = self.notifier.notify(title, message, urgency=_URGENCY.get(priority, "normal"))
            if not delivered:
                logger.info("Notification not delivered: %s", title)

        return event.as_dict()

    def __repr__(self) -> str:
        return f"AlertSystem(history={len(self.history)} events, kinds={sorted(self.messages)})"
