"""
Posture Scorer Module for NeuralStride.

Maps the cervical angle (ear-shoulder-hip, degrees) measured by
LandmarkExtractor onto a 0-100 posture score.

Bands:
    angle >= 170            -> 100
    165 <= angle < 170      -> 95 - round((170 - angle) * 2)
    160 <= angle < 165      -> 85 - round((165 - angle) * 2)
    150 <= angle < 160      -> 70 - round((160 - angle) * 2)
    140 <= angle < 150      -> 50 - round((150 - angle) * 2)
    130 <= angle < 140      -> 30 - round((140 - angle) * 2)
    120 <= angle < 130      -> 20 - round((130 - angle) * 1.5)
    angle < 120             -> max(0, 10 - round((120 - angle) * 0.5))

Rounding is half-up (2.5 -> 3), not Python's round-half-even.

Usage:
    metrics = analyze_landmarks(landmarks)   # landmarks may be None
    metrics.posture_score, metrics.cervical_angle, metrics.is_person_detected

Author: NeuralStride Engineering
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence
import math

from neuralstride.core.landmark_extractor import LandmarkExtractor


# (lower bound, base score, band upper edge, slope); first match wins
_SCORE_BANDS = (
    (165.0, 95, 170.0, 2.0),
    (160.0, 85, 165.0, 2.0),
    (150.0, 70, 160.0, 2.0),
    (140.0, 50, 150.0, 2.0),
    (130.0, 30, 140.0, 2.0),
    (120.0, 20, 130.0, 1.5),
)


@dataclass
class PostureMetrics:
    """Per-frame posture reading."""
    posture_score: int = 0
    cervical_angle: float = 0.0
    is_person_detected: bool = False

    def as_dict(self) -> Dict[str, Any]:
        """Wire shape used by the session bridge."""
        return {
            "postureScore": self.posture_score,
            "cervicalAngle": self.cervical_angle,
            "isPersonDetected": self.is_person_detected,
        }


NO_PERSON = PostureMetrics(posture_score=0, cervical_angle=0.0, is_person_detected=False)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_from_angle(angle: float) -> int:
    """Posture score (0-100) for a cervical angle in degrees."""
    if angle >= 170:
        score = 100
    else:
        for lower, base, edge, slope in _SCORE_BANDS:
            if angle >= lower:
                score = base - round_half_up((edge - angle) * slope)
                break
        else:
            score = max(0, 10 - round_half_up((120 - angle) * 0.5))

    return max(0, min(100, score))


def analyze_landmarks(landmarks: Optional[Sequence[Any]]) -> PostureMetrics:
    """
    Build PostureMetrics for one frame.

    Missing or unusable landmarks mean no person was detected, which is
    reported as score 0 / angle 0.
    """
    if not landmarks:
        return PostureMetrics(**NO_PERSON.__dict__)

    angle = LandmarkExtractor.get_cervical_angle(landmarks)
    if angle is None:
        return PostureMetrics(**NO_PERSON.__dict__)

    return PostureMetrics(
        posture_score=score_from_angle(angle),
        cervical_angle=round_half_up(angle * 10) / 10,
        is_person_detected=True,
    )
