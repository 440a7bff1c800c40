"""
Camera management utilities
"""
import cv2 as cv
import numpy as np
from typing import Optional, Tuple

from neuralstride.config.defaults import CAMERA_SETTINGS
from neuralstride.core.landmark_extractor import LandmarkExtractor
from neuralstride.core.posture_scorer import PostureMetrics


class CameraManager:
    """Manage camera operations for NeuralStride"""

    def __init__(self, camera_id: int = CAMERA_SETTINGS['camera_id'],
                 width: int = CAMERA_SETTINGS['width'], height: int = CAMERA_SETTINGS['height']):
        self.camera_id = camera_id
        self.width = width
        self.height = height
        self.cap = None
        self.is_initialized = False

    def initialize(self) -> bool:
        """Initialize camera"""
        self.cap = cv.VideoCapture(self.camera_id)
        if not self.cap.isOpened():
            return False
        self.cap.set(cv.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv.CAP_PROP_FRAME_HEIGHT, self.height)
        self.is_initialized = True
        return True

    def read_frame(self) -> Tuple[bool, Optional[np.ndarray]]:
        """Read a BGR frame from camera"""
        if not self.is_initialized or self.cap is None:
            return False, None

        ret, frame = self.cap.read()
        return ret, frame

    def release(self):
        """Release camera resources"""
        if self.cap:
            self.cap.release()
            self.cap = None
        self.is_initialized = False


def score_color(score: float) -> Tuple[int, int, int]:
    """BGR color for a posture score"""
    if score >= 70:
        return (80, 220, 90)
    if score >= 40:
        return (0, 200, 240)
    return (0, 0, 255)


def draw_posture_overlay(image: np.ndarray, landmarks, metrics: PostureMetrics) -> np.ndarray:
    """Draw the ear-shoulder-hip chain and the score readout on a BGR image"""
    annotated_image = image.copy()
    height, width = annotated_image.shape[:2]

    key_points = LandmarkExtractor.extract_key_points(landmarks) if landmarks else None
    if key_points:
        color = score_color(metrics.posture_score)
        points = [
            (int(key_points[name][0] * width), int(key_points[name][1] * height))
            for name in ('ear', 'shoulder', 'hip')
        ]
        cv.line(annotated_image, points[0], points[1], color, 3)
        cv.line(annotated_image, points[1], points[2], color, 3)
        for point in points:
            cv.circle(annotated_image, point, 8, color, -1)

    if metrics.is_person_detected:
        text = f"Score {metrics.posture_score}  Angle {metrics.cervical_angle:.1f}"
        color = score_color(metrics.posture_score)
    else:
        text = "No Person"
        color = (0, 0, 255)
    cv.putText(annotated_image, text, (20, 40), cv.FONT_HERSHEY_SIMPLEX, 1.0, color, 2)

    return annotated_image
