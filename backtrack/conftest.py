import math

import pytest

from backtrack.models import Landmark

SHOULDER_Y = 0.6


def build_landmarks(shoulder_width=0.4, lean_deg=0.0, nose_offset=0.25,
                    visibility=0.9, count=33, nose_visibility=None):
    """
    Landmark set with a chosen geometry

    shoulder_width -> distance (24 / width), lean_deg -> lean angle,
    nose_offset -> nose-to-shoulder ratio.
    """
    half = shoulder_width / 2
    delta_y = -math.tan(math.radians(lean_deg)) * shoulder_width
    landmarks = [Landmark(x=0.5, y=0.9, z=0.0, visibility=0.1) for _ in range(count)]
    landmarks[0] = Landmark(
        x=0.5, y=SHOULDER_Y - nose_offset, z=-0.3,
        visibility=visibility if nose_visibility is None else nose_visibility
    )
    landmarks[11] = Landmark(x=0.5 + half, y=SHOULDER_Y + delta_y / 2, z=-0.1, visibility=visibility)
    landmarks[12] = Landmark(x=0.5 - half, y=SHOULDER_Y - delta_y / 2, z=-0.1, visibility=visibility)
    return landmarks


@pytest.fixture
def make_landmarks():
    return build_landmarks
