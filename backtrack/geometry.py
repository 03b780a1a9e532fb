"""Landmark geometry - scalar posture features from a MediaPipe Pose landmark set.

Every feature degrades to a safe default (0 or None) instead of raising,
because landmark availability changes from frame to frame.
"""
import math
from typing import List, Optional

from backtrack import config
from backtrack.models import Landmark
from backtrack.utils import landmark_at, round_half_up

# MediaPipe Pose landmark indices
LANDMARKS = {
    "NOSE": 0,
    "LEFT_EYE_INNER": 1,
    "LEFT_EYE": 2,
    "LEFT_EYE_OUTER": 3,
    "RIGHT_EYE_INNER": 4,
    "RIGHT_EYE": 5,
    "RIGHT_EYE_OUTER": 6,
    "LEFT_EAR": 7,
    "RIGHT_EAR": 8,
    "MOUTH_LEFT": 9,
    "MOUTH_RIGHT": 10,
    "LEFT_SHOULDER": 11,
    "RIGHT_SHOULDER": 12,
    "LEFT_ELBOW": 13,
    "RIGHT_ELBOW": 14,
    "LEFT_WRIST": 15,
    "RIGHT_WRIST": 16,
    "LEFT_HIP": 23,
    "RIGHT_HIP": 24
}

LandmarkSet = List[Optional[Landmark]]


def _shoulders(landmarks: LandmarkSet):
    return (landmark_at(landmarks, LANDMARKS["LEFT_SHOULDER"]),
            landmark_at(landmarks, LANDMARKS["RIGHT_SHOULDER"]))


def horizontal_distance(a: Landmark, b: Landmark) -> float:
    return abs(a.x - b.x)


def estimate_distance(landmarks: LandmarkSet) -> Optional[int]:
    """
    Estimate distance from the camera in cm from the apparent shoulder width

    Assumes an average shoulder width and a typical webcam field of view,
    so the estimate is inversely proportional to the normalized width.

    Returns:
        Rounded distance in cm, or None when a shoulder is missing
    """
    left_shoulder, right_shoulder = _shoulders(landmarks)
    if left_shoulder is None or right_shoulder is None:
        return None

    shoulder_width = horizontal_distance(left_shoulder, right_shoulder)
    if shoulder_width == 0:
        return None

    return int(round_half_up(config.DISTANCE_CONSTANT / shoulder_width))


def calculate_lean_angle(landmarks: LandmarkSet) -> float:
    """
    Tilt of the shoulder line from horizontal, in degrees

    Positive = leaning right, negative = leaning left (as seen in the
    mirrored selfie view).
    """
    left_shoulder, right_shoulder = _shoulders(landmarks)
    if left_shoulder is None or right_shoulder is None:
        return 0

    # Mirrored view puts the left shoulder at the higher x, so use |dx|
    delta_y = left_shoulder.y - right_shoulder.y
    delta_x = abs(right_shoulder.x - left_shoulder.x)

    if delta_x < config.MIN_SHOULDER_SEPARATION:
        return 0  # Shoulders too close together to measure

    angle_deg = math.degrees(math.atan2(delta_y, delta_x))

    # 1 decimal place to reduce jitter
    return round_half_up(-angle_deg, 1)


def nose_to_shoulder_ratio(landmarks: LandmarkSet) -> Optional[float]:
    """Raw vertical nose-to-shoulder-midpoint distance, used for calibration."""
    nose = landmark_at(landmarks, LANDMARKS["NOSE"])
    left_shoulder, right_shoulder = _shoulders(landmarks)

    if nose is None or left_shoulder is None or right_shoulder is None:
        return None

    shoulder_mid_y = (left_shoulder.y + right_shoulder.y) / 2
    return shoulder_mid_y - nose.y


def calculate_slouch_angle(landmarks: LandmarkSet, baseline: Optional[float] = None) -> float:
    """
    Forward head posture relative to the calibrated baseline

    Positive = head dropped towards the shoulders (slouching), negative =
    sitting straighter than the baseline. Without a baseline the current
    posture is taken as neutral.
    """
    ratio = nose_to_shoulder_ratio(landmarks)
    if ratio is None:
        return 0

    baseline_value = ratio if baseline is None else baseline
    deviation = baseline_value - ratio

    return round_half_up(deviation * config.SLOUCH_SCALE_FACTOR, 1)
