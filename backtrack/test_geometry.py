import pytest

from backtrack.geometry import (
    calculate_lean_angle,
    calculate_slouch_angle,
    estimate_distance,
    nose_to_shoulder_ratio,
)
from backtrack.models import Landmark


def swap_shoulders(landmarks):
    swapped = list(landmarks)
    swapped[11], swapped[12] = landmarks[12], landmarks[11]
    return swapped


class TestDistance:
    @pytest.mark.parametrize("width, expected", [(0.4, 60), (0.6, 40), (0.8, 30)])
    def test_inverse_of_shoulder_width(self, make_landmarks, width, expected):
        assert estimate_distance(make_landmarks(shoulder_width=width)) == expected

    def test_missing_shoulder_is_unavailable(self, make_landmarks):
        landmarks = make_landmarks()
        landmarks[12] = None
        assert estimate_distance(landmarks) is None

    def test_short_landmark_list_is_unavailable(self, make_landmarks):
        assert estimate_distance(make_landmarks()[:11]) is None

    def test_coincident_shoulders_are_unavailable(self):
        landmarks = [Landmark(x=0.5, y=0.6) for _ in range(25)]
        assert estimate_distance(landmarks) is None

    def test_symmetric_under_shoulder_swap(self, make_landmarks):
        landmarks = make_landmarks(shoulder_width=0.55, lean_deg=7)
        assert estimate_distance(swap_shoulders(landmarks)) == estimate_distance(landmarks)


class TestLeanAngle:
    def test_level_shoulders(self, make_landmarks):
        assert calculate_lean_angle(make_landmarks()) == 0

    @pytest.mark.parametrize("lean", [20.0, -20.0, 9.5])
    def test_signed_angle_rounded_to_one_decimal(self, make_landmarks, lean):
        assert calculate_lean_angle(make_landmarks(lean_deg=lean)) == lean

    def test_sign_flips_under_shoulder_swap(self, make_landmarks):
        landmarks = make_landmarks(lean_deg=15)
        assert calculate_lean_angle(swap_shoulders(landmarks)) == -15.0

    def test_degenerate_separation_returns_zero(self):
        landmarks = [Landmark(x=0.5, y=0.6) for _ in range(25)]
        landmarks[11] = Landmark(x=0.505, y=0.5)
        landmarks[12] = Landmark(x=0.5, y=0.7)
        assert calculate_lean_angle(landmarks) == 0

    def test_missing_shoulder_returns_zero(self, make_landmarks):
        landmarks = make_landmarks(lean_deg=20)
        landmarks[11] = None
        assert calculate_lean_angle(landmarks) == 0


class TestSlouch:
    def test_ratio_is_shoulder_midpoint_minus_nose(self, make_landmarks):
        assert nose_to_shoulder_ratio(make_landmarks(nose_offset=0.25)) == pytest.approx(0.25)

    def test_ratio_unavailable_without_nose(self, make_landmarks):
        landmarks = make_landmarks()
        landmarks[0] = None
        assert nose_to_shoulder_ratio(landmarks) is None

    def test_uncalibrated_angle_is_zero(self, make_landmarks):
        assert calculate_slouch_angle(make_landmarks(nose_offset=0.1), None) == 0

    def test_head_drop_against_baseline_is_positive(self, make_landmarks):
        landmarks = make_landmarks(nose_offset=0.25 - 20 / 150)
        assert calculate_slouch_angle(landmarks, 0.25) == 20.0

    def test_sitting_straighter_is_negative(self, make_landmarks):
        landmarks = make_landmarks(nose_offset=0.30)
        assert calculate_slouch_angle(landmarks, 0.25) == -7.5

    def test_missing_nose_returns_zero(self, make_landmarks):
        landmarks = make_landmarks()
        landmarks[0] = None
        assert calculate_slouch_angle(landmarks, 0.25) == 0
