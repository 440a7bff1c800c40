import numpy as np
import pytest

from conftest import landmarks_at_angle, make_landmarks, point
from neuralstride.core.landmark_extractor import LandmarkExtractor, NEUTRAL_ANGLE


def test_upright_posture_is_straight_line():
    landmarks = make_landmarks(ear=(0.5, 0.2), shoulder=(0.5, 0.5), hip=(0.5, 0.9))
    assert LandmarkExtractor.get_cervical_angle(landmarks) == pytest.approx(180.0)


def test_right_angle():
    landmarks = make_landmarks(ear=(0.8, 0.5), shoulder=(0.5, 0.5), hip=(0.5, 0.9))
    assert LandmarkExtractor.get_cervical_angle(landmarks) == pytest.approx(90.0)


@pytest.mark.parametrize("angle", [120.0, 135.0, 150.0, 165.0])
def test_forward_head_angles(angle):
    assert LandmarkExtractor.get_cervical_angle(landmarks_at_angle(angle)) == pytest.approx(angle, abs=1e-6)


def test_left_right_pairs_are_averaged():
    landmarks = make_landmarks(ear=(0.5, 0.2), shoulder=(0.5, 0.5), hip=(0.5, 0.9))
    # skew one shoulder; the midpoint moves, so the angle does too
    landmarks[11] = point(0.35, 0.5)
    landmarks[12] = point(0.75, 0.5)
    key_points = LandmarkExtractor.extract_key_points(landmarks)
    assert key_points['shoulder'] == pytest.approx(np.array([0.55, 0.5]))


def test_coinciding_midpoints_return_neutral_angle():
    landmarks = make_landmarks(ear=(0.5, 0.5), shoulder=(0.5, 0.5), hip=(0.5, 0.5))
    assert LandmarkExtractor.get_cervical_angle(landmarks) == 90


def test_single_degenerate_vector_returns_neutral_angle():
    angle = LandmarkExtractor.calculate_cervical_angle(
        np.array([0.5, 0.5]), np.array([0.5, 0.5]), np.array([0.5, 0.9]))
    assert angle == NEUTRAL_ANGLE


def test_cosine_is_clamped_for_collinear_vectors():
    # nearly identical directions can produce |cos| slightly above 1
    angle = LandmarkExtractor.calculate_cervical_angle(
        np.array([0.1 + 1e-17, 0.3]), np.array([0.0, 0.0]), np.array([0.1, 0.3]))
    assert angle == pytest.approx(0.0, abs=1e-4)


def test_short_landmark_list_is_rejected():
    assert LandmarkExtractor.get_cervical_angle([point(0, 0)] * 20) is None
    assert LandmarkExtractor.get_cervical_angle([]) is None
