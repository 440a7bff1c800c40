import pytest

from conftest import landmarks_at_angle
from neuralstride.core.posture_scorer import (
    PostureMetrics,
    analyze_landmarks,
    round_half_up,
    score_from_angle,
)


@pytest.mark.parametrize("angle", [170, 170.5, 175, 180, 200])
def test_upright_scores_full_marks(angle):
    assert score_from_angle(angle) == 100


@pytest.mark.parametrize("angle, expected", [
    (169, 93),
    (167.5, 90),
    (165, 85),
    (162, 79),
    (160, 75),
    (155, 60),
    (150, 50),
    (145, 40),
    (140, 30),
    (135, 20),
    (130, 10),
    (125, 12),
    (120, 5),
    (110, 5),
    (100, 0),
    (0, 0),
])
def test_band_values(angle, expected):
    assert score_from_angle(angle) == expected


def test_rounding_is_half_up():
    # (170 - 168.75) * 2 == 2.5 exactly
    assert score_from_angle(168.75) == 92
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2


@pytest.mark.parametrize("tenths", range(0, 1200))
def test_below_120_stays_in_low_range(tenths):
    assert 0 <= score_from_angle(tenths / 10) <= 10


def test_score_always_within_bounds():
    for tenths in range(-500, 2500):
        assert 0 <= score_from_angle(tenths / 10) <= 100


@pytest.mark.parametrize("lower, upper", [
    (170, 181), (165, 170), (160, 165), (150, 160), (140, 150), (130, 140), (120, 130), (60, 120),
])
def test_non_increasing_within_each_band(lower, upper):
    angles = [lower + i * 0.1 for i in range(int((upper - lower) * 10))]
    scores = [score_from_angle(a) for a in angles]
    assert scores == sorted(scores)


@pytest.mark.parametrize("edge", [165, 150, 140])
def test_continuous_band_edges(edge):
    assert abs(score_from_angle(edge) - score_from_angle(edge + 1e-6)) <= 1


@pytest.mark.parametrize("edge, below, at", [
    (170, 95, 100),
    (160, 70, 75),
    (130, 20, 10),
    (120, 10, 5),
])
def test_stepped_band_edges(edge, below, at):
    assert score_from_angle(edge - 1e-6) == below
    assert score_from_angle(edge) == at


def test_analyze_landmarks_for_detected_person():
    metrics = analyze_landmarks(landmarks_at_angle(155.04))
    assert metrics.is_person_detected is True
    assert metrics.cervical_angle == 155.0
    assert metrics.posture_score == 60


def test_analyze_landmarks_without_person():
    metrics = analyze_landmarks(None)
    assert metrics == PostureMetrics(posture_score=0, cervical_angle=0.0, is_person_detected=False)


def test_metrics_wire_shape():
    metrics = PostureMetrics(posture_score=88, cervical_angle=166.2, is_person_detected=True)
    assert metrics.as_dict() == {"postureScore": 88, "cervicalAngle": 166.2, "isPersonDetected": True}
