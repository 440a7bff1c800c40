"""
Processing wrapper for NeuralStride.

Minimal wiring:
- Ensure PoseDetector is initialized (MediaPipe VIDEO mode by default)
- Convert BGR->RGB, perform detection, get landmarks
- Score the landmarks and draw the overlay

Each camera stream owns one FrameProcessor, so VIDEO-mode timestamps from
different streams never reach the same landmarker. The module-level helpers
wrap a default processor for the single-camera desktop app.

The returned landmarks are what PostureSession.process_landmarks() consumes;
the status string reports why a frame produced no landmarks.
"""

from typing import Any, Optional, Tuple
import logging
import time

import cv2 as cv

from neuralstride.config.defaults import DETECTOR_ERROR_MESSAGE, MODEL_SETTINGS
from neuralstride.core.pose_detector import PoseDetector
from neuralstride.core.posture_scorer import PostureMetrics, analyze_landmarks
from neuralstride.utils.camera import draw_posture_overlay

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NO_INPUT = "no_input"
STATUS_INIT_FAILED = "pose_detector_init_failed"
STATUS_NO_LANDMARKS = "no_landmarks"

FrameResult = Tuple[Any, Optional[Any], PostureMetrics, str]


class FrameProcessor:
    """Pose detection, scoring and overlay for one camera stream."""

    def __init__(self, model_path: Optional[str] = None, running_mode: str = "VIDEO"):
        self.model_path = model_path or MODEL_SETTINGS.get("model_path", "./models/pose_landmarker_lite.task")
        self.running_mode = running_mode
        self.detector: Optional[PoseDetector] = None
        self._last_timestamp_ms = -1

    def ensure_detector(self) -> bool:
        if self.detector is None:
            logger.debug("Initializing PoseDetector (%s mode) with model: %s", self.running_mode, self.model_path)
            self.detector = PoseDetector(self.model_path, running_mode=self.running_mode)
        return self.detector.initialize()

    @property
    def error(self) -> Optional[str]:
        """Why the detector could not start, or None while it is healthy."""
        if self.detector is None or self.detector.landmarker is not None:
            return None
        return self.detector.error or DETECTOR_ERROR_MESSAGE

    def _next_timestamp(self, timestamp_ms: Optional[int]) -> int:
        if timestamp_ms is None:
            timestamp_ms = int(time.monotonic() * 1000)
        # VIDEO mode rejects timestamps that do not strictly increase
        timestamp_ms = max(int(timestamp_ms), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def process(self, image, timestamp_ms: Optional[int] = None) -> FrameResult:
        """
        Process a single BGR image.

        Returns:
            (annotated_image, landmarks, metrics, status) where status is one of
            "ok", "no_input", "pose_detector_init_failed", "no_landmarks".
        """
        if image is None:
            return image, None, analyze_landmarks(None), STATUS_NO_INPUT

        if not self.ensure_detector():
            return image, None, analyze_landmarks(None), STATUS_INIT_FAILED

        rgb = cv.cvtColor(image, cv.COLOR_BGR2RGB)
        landmarks = self.detector.detect(rgb, self._next_timestamp(timestamp_ms))
        metrics = analyze_landmarks(landmarks)
        annotated = draw_posture_overlay(image, landmarks, metrics)
        status = STATUS_OK if landmarks is not None else STATUS_NO_LANDMARKS
        return annotated, landmarks, metrics, status

    def release(self) -> None:
        if self.detector is not None:
            self.detector.cleanup()
            self.detector = None
        self._last_timestamp_ms = -1


# Default processor for the single-camera desktop app
_processor = FrameProcessor()


def ensure_detector() -> bool:
    return _processor.ensure_detector()


def detector_error() -> Optional[str]:
    return _processor.error


def process_frame(image, timestamp_ms: Optional[int] = None) -> FrameResult:
    return _processor.process(image, timestamp_ms)


def release_detector() -> None:
    _processor.release()
