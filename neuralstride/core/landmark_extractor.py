"""
Extract the cervical alignment angle from pose landmarks
"""
import numpy as np
from typing import Optional, Sequence, Any


NEUTRAL_ANGLE = 90.0


class LandmarkExtractor:
    """Average left/right anchor pairs and measure the ear-shoulder-hip angle"""

    # MediaPipe pose landmark indices
    LEFT_EAR = 7
    RIGHT_EAR = 8
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_HIP = 23
    RIGHT_HIP = 24

    @staticmethod
    def extract_key_points(landmarks: Sequence[Any]) -> Optional[dict]:
        """Extract ear, shoulder and hip midpoints as numpy (x, y) arrays"""
        if not landmarks or len(landmarks) <= LandmarkExtractor.RIGHT_HIP:
            return None

        try:
            return {
                'ear': LandmarkExtractor.midpoint(
                    landmarks[LandmarkExtractor.LEFT_EAR], landmarks[LandmarkExtractor.RIGHT_EAR]),
                'shoulder': LandmarkExtractor.midpoint(
                    landmarks[LandmarkExtractor.LEFT_SHOULDER], landmarks[LandmarkExtractor.RIGHT_SHOULDER]),
                'hip': LandmarkExtractor.midpoint(
                    landmarks[LandmarkExtractor.LEFT_HIP], landmarks[LandmarkExtractor.RIGHT_HIP]),
            }
        except AttributeError:
            return None

    @staticmethod
    def midpoint(left, right) -> np.ndarray:
        return np.array([(left.x + right.x) / 2, (left.y + right.y) / 2], dtype=float)

    @staticmethod
    def calculate_cervical_angle(ear: np.ndarray, shoulder: np.ndarray, hip: np.ndarray) -> float:
        """
        Angle at the shoulder between the shoulder->ear and shoulder->hip vectors.

        Returns NEUTRAL_ANGLE when either vector has zero length.
        """
        to_ear = np.asarray(ear, dtype=float) - np.asarray(shoulder, dtype=float)
        to_hip = np.asarray(hip, dtype=float) - np.asarray(shoulder, dtype=float)

        magnitude_a = np.linalg.norm(to_ear)
        magnitude_b = np.linalg.norm(to_hip)
        if magnitude_a == 0 or magnitude_b == 0:
            return NEUTRAL_ANGLE

        cos_theta = np.dot(to_ear, to_hip) / (magnitude_a * magnitude_b)
        # floating point drift can push the cosine just outside [-1, 1]
        cos_theta = np.clip(cos_theta, -1.0, 1.0)
        return float(np.degrees(np.arccos(cos_theta)))

    @staticmethod
    def get_cervical_angle(landmarks: Sequence[Any]) -> Optional[float]:
        """Cervical angle in degrees for a full landmark array, None if unusable"""
        key_points = LandmarkExtractor.extract_key_points(landmarks)
        if not key_points:
            return None

        return LandmarkExtractor.calculate_cervical_angle(
            key_points['ear'], key_points['shoulder'], key_points['hip'])
