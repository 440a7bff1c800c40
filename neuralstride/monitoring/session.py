"""
Foreground posture session for NeuralStride.

Wires one camera session together: each analyzed frame is scored, pushed to
the background monitor and fed to the voice coach; the plant simulator and
break reminders run on the session's TickScheduler.

Typical Usage:
    session = PostureSession(coach, bridge, scheduler)
    session.start()
    for landmarks in frames:
        metrics = session.process_landmarks(landmarks)
        session.run_pending()
    session.stop()
"""

from __future__ import annotations
from typing import Any, List, Optional, Sequence
import logging

from neuralstride.bridge.extension_bridge import ExtensionBridge
from neuralstride.config.defaults import DETECTOR_ERROR_MESSAGE, TIMING_SETTINGS
from neuralstride.core.posture_scorer import PostureMetrics, analyze_landmarks
from neuralstride.core.processing import STATUS_INIT_FAILED, STATUS_OK
from neuralstride.monitoring.plant_health import PlantHealthSimulator, PlantState
from neuralstride.monitoring.timer_manager import TickScheduler
from neuralstride.monitoring.voice_coach import VoiceCoach

logger = logging.getLogger(__name__)

BREAK_TASK = "break_reminder"


class PostureSession:
    """Owns PostureMetrics, the coach's tier state and the plant for one camera session."""

    def __init__(self, coach: VoiceCoach, bridge: ExtensionBridge, scheduler: TickScheduler,
                 plant: Optional[PlantHealthSimulator] = None,
                 break_interval: Optional[float] = TIMING_SETTINGS['break_reminder_interval']):
        self.coach = coach
        self.bridge = bridge
        self.scheduler = scheduler
        self.plant = plant or PlantHealthSimulator(scheduler)
        self.break_interval = break_interval

        self.is_streaming = False
        self.metrics = PostureMetrics()
        self.error: Optional[str] = None
        self.started_at: Optional[float] = None
        self._scores: List[int] = []

        self.bridge.check_extension()

    @property
    def plant_state(self) -> PlantState:
        return self.plant.state

    @property
    def average_score(self) -> float:
        return sum(self._scores) / len(self._scores) if self._scores else 0.0

    def start(self) -> None:
        if self.is_streaming:
            return
        self.is_streaming = True
        self.started_at = self.scheduler.clock()
        self._scores = []
        self.bridge.send_session_status(True)
        self.coach.announce_session_start()
        if self.break_interval:
            self.scheduler.every(BREAK_TASK, self.break_interval, lambda now: self.coach.provide_break_reminder())
        logger.info("Posture session started")

    def stop(self) -> None:
        if not self.is_streaming:
            return
        self.is_streaming = False
        self.plant.stop()
        self.scheduler.cancel(BREAK_TASK)
        self.bridge.send_session_status(False)

        duration = self.scheduler.clock() - self.started_at if self.started_at is not None else 0.0
        self.coach.announce_session_end(duration, self.average_score)
        # the next session starts with fresh tier hysteresis
        self.coach.reset()
        logger.info("Posture session stopped after %.0fs (average score %.1f)", duration, self.average_score)

    def process_landmarks(self, landmarks: Optional[Sequence[Any]], status: str = STATUS_OK) -> PostureMetrics:
        """
        Analyze one frame's landmarks (None when the detector found nobody).

        `status` is the frame status from FrameProcessor.process(); a detector
        that failed to start sets `error` to DETECTOR_ERROR_MESSAGE.
        """
        self.error = DETECTOR_ERROR_MESSAGE if status == STATUS_INIT_FAILED else None
        metrics = analyze_landmarks(landmarks)
        self.metrics = metrics
        if not self.is_streaming:
            return metrics

        self.bridge.send_posture_data(metrics)
        self.plant.update_score(metrics.posture_score)

        if metrics.is_person_detected:
            self._scores.append(metrics.posture_score)
            self.coach.provide_posture_feedback(metrics.posture_score)
            self.plant.start()
        else:
            self.plant.stop()
        return metrics

    def run_pending(self, now: Optional[float] = None) -> List[str]:
        return self.scheduler.run_pending(now)
