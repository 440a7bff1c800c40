"""
Background Monitor Module for NeuralStride.

Purpose:
    Hold the authoritative session mirror (monitoring flag, current score,
    plant badge) for the background context and answer the bridge messages
    listed in neuralstride.bridge.messages.

Score Sources:
    - LIVE: a foreground session pushes updatePosture on every frame.
    - SIMULATED: absent live pushes, a drift tick walks the score randomly.

    A live push always wins. It switches the mirror to LIVE and drift ticks
    are skipped until no push has arrived for `live_timeout` seconds, after
    which the mirror falls back to SIMULATED and drifts from the last live
    score.

Usage:
    scheduler = TickScheduler()
    context = BackgroundContext(scheduler=scheduler)
    context.on_install()
    transport = InProcessTransport(context.handle_external_message)
    ...
    scheduler.run_pending()   # drives the drift tick

Author: NeuralStride Engineering
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
import logging
import random
import threading

from pydantic import ValidationError

from neuralstride.bridge import messages
from neuralstride.config.defaults import (
    DEFAULT_SETTINGS,
    DEFAULT_STATS,
    SIMULATION_SETTINGS,
    TIMING_SETTINGS,
)
from neuralstride.monitoring.alert_system import AlertSystem
from neuralstride.monitoring.drift_simulator import (
    DriftSimulator,
    has_live_update_within,
    plant_state_for_score,
)
from neuralstride.monitoring.timer_manager import TickScheduler
from neuralstride.utils.storage import SettingsStore

logger = logging.getLogger(__name__)

DRIFT_TASK = "checkPosture"


class DataSource(Enum):
    LIVE = "live"
    SIMULATED = "simulated"


@dataclass
class SessionMirror:
    """Background copy of the session state shown on the badge and popup."""
    is_monitoring: bool = False
    current_score: float = SIMULATION_SETTINGS['initial_score']
    plant_state: str = "growing"
    data_source: DataSource = DataSource.SIMULATED
    last_live_update: Optional[float] = None
    badge_text: str = ""
    badge_color: Optional[str] = None

    def status(self) -> Dict[str, Any]:
        return {
            "isMonitoring": self.is_monitoring,
            "currentScore": self.current_score,
            "plantState": self.plant_state,
        }


def badge_color_for_score(score: float) -> str:
    if score >= 70:
        return "#10B981"
    if score >= 50:
        return "#F59E0B"
    return "#EF4444"


class BackgroundContext:
    """
    Process-scoped state and message handlers of the background monitor.

    Everything the handlers touch is injected: the scheduler (and through it
    the clock), the settings store, the alert system and the drift RNG.
    """

    def __init__(
        self,
        scheduler: Optional[TickScheduler] = None,
        store: Optional[SettingsStore] = None,
        alert_system: Optional[AlertSystem] = None,
        rng: Optional[random.Random] = None,
        drift_interval: float = TIMING_SETTINGS['drift_tick_interval'],
        live_timeout: float = TIMING_SETTINGS['live_timeout'],
    ):
        self.scheduler = scheduler or TickScheduler()
        self.store = store or SettingsStore()
        self.alert_system = alert_system or AlertSystem(enabled=self.notifications_enabled)
        self.drift = DriftSimulator(rng=rng)
        self.drift_interval = drift_interval
        self.live_timeout = live_timeout
        self.mirror = SessionMirror()

        self._session_started_at: Optional[float] = None
        self._session_scores: List[float] = []

        self._internal_handlers = {
            messages.GET_STATUS: self._on_get_status,
            messages.START_MONITORING: self._on_start_monitoring,
            messages.STOP_MONITORING: self._on_stop_monitoring,
            messages.UPDATE_SCORE: self._on_update_score,
        }
        self._external_handlers = {
            messages.PING: self._on_ping,
            messages.UPDATE_POSTURE: self._on_update_posture,
            messages.SESSION_STATUS: self._on_session_status,
        }

    # -----------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------

    def on_install(self) -> None:
        """Seed default settings and stats, and paint the initial badge."""
        self.store.set({"settings": dict(DEFAULT_SETTINGS), "stats": dict(DEFAULT_STATS)})
        self.update_plant_icon(SIMULATION_SETTINGS['initial_score'])
        logger.info("NeuralStride background installed")

    def notifications_enabled(self) -> bool:
        settings = self.store.get_value("settings") or {}
        return bool(settings.get("notifications"))

    def now(self) -> float:
        return self.scheduler.clock()

    # -----------------------------------------------------
    # Message entry points
    # -----------------------------------------------------

    def handle_message(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Messages from the background's own control surfaces."""
        return self._dispatch(messages.INTERNAL_ACTIONS, self._internal_handlers, request)

    def handle_external_message(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Messages from the foreground session. The sender is not validated, the payload is."""
        return self._dispatch(messages.EXTERNAL_ACTIONS, self._external_handlers, request)

    def _dispatch(self, allowed_actions, handlers, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            parsed = messages.parse_request(request, allowed_actions)
        except ValidationError as e:
            logger.warning("Dropping invalid %s message: %s",
                           request.get("action"), e.errors(include_url=False))
            return None
        if parsed is None:
            logger.debug("Ignoring message: %s", request)
            return None
        logger.debug("Message received: %s", parsed.action)
        return handlers[parsed.action](parsed)

    # -----------------------------------------------------
    # Internal handlers
    # -----------------------------------------------------

    def _on_get_status(self, request: messages.Request) -> Dict[str, Any]:
        self.refresh_data_source()
        return self.mirror.status()

    def _on_start_monitoring(self, request: messages.Request) -> Dict[str, Any]:
        self.start_monitoring()
        return {"success": True}

    def _on_stop_monitoring(self, request: messages.Request) -> Dict[str, Any]:
        self.stop_monitoring()
        return {"success": True}

    def _on_update_score(self, request: messages.UpdateScoreRequest) -> Dict[str, Any]:
        self.mirror.current_score = request.score
        self.update_plant_icon(self.mirror.current_score)
        return {"success": True}

    # -----------------------------------------------------
    # External handlers
    # -----------------------------------------------------

    def _on_ping(self, request: messages.Request) -> Dict[str, Any]:
        logger.debug("Ping received from foreground session")
        return {"status": "connected"}

    def _on_update_posture(self, request: messages.UpdatePostureRequest) -> Dict[str, Any]:
        data = request.data
        now = self.now()
        score = data.postureScore

        self.mirror.current_score = score
        self.mirror.is_monitoring = True
        self.mirror.data_source = DataSource.LIVE
        self.mirror.last_live_update = now
        self.update_plant_icon(score)

        if data.isPersonDetected:
            self._session_scores.append(score)
        self.store.set({
            "lastPostureData": {
                "score": score,
                "angle": data.cervicalAngle,
                "detected": data.isPersonDetected,
                "timestamp": int(now * 1000),
            }
        })
        return {"status": "updated"}

    def _on_session_status(self, request: messages.SessionStatusRequest) -> Dict[str, Any]:
        is_active = request.isActive
        logger.info("Session status: %s", is_active)
        self.mirror.is_monitoring = is_active

        if is_active:
            self._session_started_at = self.now()
            self._session_scores = []
        else:
            self.mirror.current_score = 0
            self.mirror.data_source = DataSource.SIMULATED
            self.update_plant_icon(0)
            self._record_session_stats()
        return {"status": "received"}

    # -----------------------------------------------------
    # Monitoring control
    # -----------------------------------------------------

    def start_monitoring(self) -> None:
        self.mirror.is_monitoring = True
        self.scheduler.every(DRIFT_TASK, self.drift_interval, self._on_drift_tick)
        self.update_plant_icon(self.mirror.current_score)
        self.alert_system.raise_alert("monitoring_started", now=self.now())
        logger.info("Monitoring started")

    def stop_monitoring(self) -> None:
        self.mirror.is_monitoring = False
        self.scheduler.cancel(DRIFT_TASK)
        self.update_plant_icon(0)
        logger.info("Monitoring stopped")

    def has_live_update(self, now: Optional[float] = None) -> bool:
        now = self.now() if now is None else now
        return has_live_update_within(self.mirror.last_live_update, now, self.live_timeout)

    def refresh_data_source(self, now: Optional[float] = None) -> DataSource:
        """Fall back to SIMULATED once live pushes have been silent for `live_timeout`."""
        if self.mirror.data_source is DataSource.LIVE and not self.has_live_update(now):
            logger.info("No live update for %.0fs, resuming simulated score", self.live_timeout)
            self.mirror.data_source = DataSource.SIMULATED
        return self.mirror.data_source

    def _on_drift_tick(self, now: float) -> None:
        if not self.mirror.is_monitoring:
            return
        if self.refresh_data_source(now) is DataSource.LIVE:
            return

        self.drift.reset_to(self.mirror.current_score)
        wilting = self.drift.step()
        self.mirror.current_score = self.drift.score
        self.update_plant_icon(self.drift.score)
        if wilting:
            self.alert_system.raise_alert("plant_wilting", now=now)

    # -----------------------------------------------------
    # Presentation state
    # -----------------------------------------------------

    def update_plant_icon(self, score: float) -> str:
        state = plant_state_for_score(score, self.mirror.is_monitoring)
        self.mirror.plant_state = state
        if self.mirror.is_monitoring:
            self.mirror.badge_text = str(int(score + 0.5))
            self.mirror.badge_color = badge_color_for_score(score)
        else:
            self.mirror.badge_text = ""
            self.mirror.badge_color = None
        return state

    def _record_session_stats(self) -> None:
        if self._session_started_at is None:
            return
        minutes = int((self.now() - self._session_started_at) // 60)
        stats = self.store.get_value("stats") or dict(DEFAULT_STATS)
        stats["totalSessions"] = stats.get("totalSessions", 0) + 1
        stats["totalMinutes"] = stats.get("totalMinutes", 0) + minutes
        if self._session_scores:
            average = sum(self._session_scores) / len(self._session_scores)
            stats["bestScore"] = max(stats.get("bestScore", 0), int(average + 0.5))
        self.store.set({"stats": stats})
        self._session_started_at = None
        self._session_scores = []


class LockedBackground:
    """Serialize access to a BackgroundContext shared with WebRTC worker threads."""

    def __init__(self, context: Optional[BackgroundContext] = None):
        self.lock = threading.Lock()
        self.context = context or BackgroundContext()
        self.scheduler = self.context.scheduler

    def handle_message(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self.lock:
            return self.context.handle_message(request)

    def handle_external_message(self, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self.lock:
            return self.context.handle_external_message(request)

    def tick(self) -> List[str]:
        with self.lock:
            return self.scheduler.run_pending()

    def stats(self) -> Dict[str, Any]:
        with self.lock:
            return self.context.store.get_value("stats") or {}
