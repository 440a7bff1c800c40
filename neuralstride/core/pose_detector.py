"""
MediaPipe-based pose detection for NeuralStride
"""
import os

# Suppress verbose C++ / framework logs
os.environ.setdefault("GLOG_minloglevel", "2")  # 0=INFO,1=WARNING,2=ERROR,3=FATAL
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")  # TensorFlow logging

import logging
import mediapipe as mp
import numpy as np
from typing import Optional, Any

from neuralstride.config.defaults import MODEL_SETTINGS

logger = logging.getLogger(__name__)


class PoseDetector:
    """Single-person pose detection using MediaPipe (VIDEO and IMAGE modes)"""

    def __init__(self, model_path: str = MODEL_SETTINGS['model_path'], running_mode: str = "VIDEO"):
        self.model_path = model_path
        self.landmarker = None
        self.running_mode_str = running_mode.upper() if isinstance(running_mode, str) else "VIDEO"
        self.error: Optional[str] = None

        # MediaPipe classes
        self.BaseOptions = mp.tasks.BaseOptions
        self.PoseLandmarker = mp.tasks.vision.PoseLandmarker
        self.PoseLandmarkerOptions = mp.tasks.vision.PoseLandmarkerOptions
        self.VisionRunningMode = mp.tasks.vision.RunningMode

    def initialize(self) -> bool:
        """Initialize the pose landmarker"""
        if self.landmarker is not None:
            return True
        try:
            mode = self.VisionRunningMode.VIDEO if self.running_mode_str == "VIDEO" else self.VisionRunningMode.IMAGE
            options = self.PoseLandmarkerOptions(
                base_options=self.BaseOptions(model_asset_path=self.model_path),
                running_mode=mode,
                num_poses=1,
                min_pose_detection_confidence=MODEL_SETTINGS['min_pose_detection_confidence'],
                min_pose_presence_confidence=MODEL_SETTINGS['min_pose_presence_confidence'],
                min_tracking_confidence=MODEL_SETTINGS['min_tracking_confidence'],
                output_segmentation_masks=False,
            )
            self.landmarker = self.PoseLandmarker.create_from_options(options)
            logger.debug("PoseDetector initialized (mode=%s, model=%s)", self.running_mode_str, self.model_path)
            return True
        except Exception as e:
            self.error = f"Failed to initialize MediaPipe: {e}"
            logger.error(self.error)
            return False

    def detect(self, rgb_image: np.ndarray, timestamp_ms: Optional[int] = None) -> Optional[Any]:
        """
        Detect a pose in one RGB frame.

        Returns the first pose's landmark list, or None when nobody is visible.
        VIDEO mode needs monotonically increasing timestamps.
        """
        if self.landmarker is None:
            return None
        try:
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)
            if self.running_mode_str == "VIDEO":
                result = self.landmarker.detect_for_video(mp_image, int(timestamp_ms or 0))
            else:
                result = self.landmarker.detect(mp_image)
        except Exception as e:
            logger.warning("Pose detection failed: %s", e)
            return None
        if result and result.pose_landmarks:
            return result.pose_landmarks[0]
        return None

    def cleanup(self):
        """Clean up resources"""
        if self.landmarker:
            self.landmarker.close()
            self.landmarker = None
            logger.debug("PoseDetector cleaned up")
