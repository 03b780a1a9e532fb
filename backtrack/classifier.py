# Posture Classifier - thresholds applied to landmark geometry (pure)
from typing import List, Optional

from backtrack import config
from backtrack.geometry import (
    LANDMARKS,
    LandmarkSet,
    calculate_lean_angle,
    calculate_slouch_angle,
    estimate_distance,
)
from backtrack.models import (
    IssueType,
    PoseAnalysis,
    PostureIssue,
    PostureStatus,
    Severity,
    Thresholds,
)
from backtrack.utils import format_number, landmark_at, round_half_up

ISSUE_STATUS = {
    IssueType.TOO_CLOSE: PostureStatus.TOO_CLOSE,
    IssueType.LEANING: PostureStatus.LEANING,
    IssueType.SLOUCHING: PostureStatus.SLOUCHING,
}

CONFIDENCE_LANDMARKS = ("NOSE", "LEFT_SHOULDER", "RIGHT_SHOULDER")


def not_detected() -> PoseAnalysis:
    return PoseAnalysis(status=PostureStatus.NOT_DETECTED)


def landmark_confidence(landmarks: LandmarkSet) -> int:
    """Mean visibility of nose and shoulders, scaled to 0-100."""
    total = 0.0
    for name in CONFIDENCE_LANDMARKS:
        landmark = landmark_at(landmarks, LANDMARKS[name])
        if landmark is not None and landmark.visibility:
            total += landmark.visibility
    mean = total / len(CONFIDENCE_LANDMARKS)
    return int(round_half_up(mean * 100))


def check_distance(distance: Optional[int], thresholds: Thresholds) -> Optional[PostureIssue]:
    if distance is None or distance >= thresholds.min_distance:
        return None
    danger = distance < thresholds.min_distance * config.DANGER_DISTANCE_FACTOR
    return PostureIssue(
        type=IssueType.TOO_CLOSE,
        message=f"Too close to screen ({distance}cm)",
        severity=Severity.DANGER if danger else Severity.WARNING
    )


def check_lean(lean_angle: float, thresholds: Thresholds) -> Optional[PostureIssue]:
    magnitude = abs(lean_angle)
    if magnitude <= thresholds.max_lean_angle:
        return None
    direction = "right" if lean_angle > 0 else "left"
    danger = magnitude > thresholds.max_lean_angle * config.DANGER_ANGLE_FACTOR
    return PostureIssue(
        type=IssueType.LEANING,
        message=f"Leaning {direction} ({format_number(magnitude)}°)",
        severity=Severity.DANGER if danger else Severity.WARNING
    )


def check_slouch(slouch_angle: float, thresholds: Thresholds) -> Optional[PostureIssue]:
    # One-sided: sitting straighter than the baseline is never an issue
    if slouch_angle <= thresholds.max_slouch_angle:
        return None
    danger = slouch_angle > thresholds.max_slouch_angle * config.DANGER_ANGLE_FACTOR
    return PostureIssue(
        type=IssueType.SLOUCHING,
        message=f"Slouching detected ({format_number(slouch_angle)}°)",
        severity=Severity.DANGER if danger else Severity.WARNING
    )


def primary_issue(issues: List[PostureIssue]) -> Optional[PostureIssue]:
    """
    The issue that decides the status

    The first danger issue in evaluation order wins; without any danger
    issue the first issue wins. Evaluation order is too_close, leaning,
    slouching, so reordering the rules changes reported statuses.
    """
    for issue in issues:
        if issue.severity == Severity.DANGER:
            return issue
    return issues[0] if issues else None


def resolve_status(issues: List[PostureIssue]) -> PostureStatus:
    issue = primary_issue(issues)
    if issue is None:
        return PostureStatus.GOOD
    return ISSUE_STATUS[issue.type]


def analyze_pose(landmarks: Optional[LandmarkSet], thresholds: Thresholds,
                 slouch_baseline: Optional[float] = None) -> PoseAnalysis:
    """
    Classify one frame of landmarks

    Args:
        landmarks: Pose landmarks for the frame (None when nobody is in view)
        thresholds: Current user thresholds, read on every call
        slouch_baseline: Calibrated nose-to-shoulder ratio, or None

    Returns:
        PoseAnalysis with status, confidence, metrics and detected issues
    """
    if not landmarks or len(landmarks) < config.MIN_LANDMARKS:
        return not_detected()

    distance = estimate_distance(landmarks)
    lean_angle = calculate_lean_angle(landmarks)
    slouch_angle = calculate_slouch_angle(landmarks, slouch_baseline)

    checks = (
        check_distance(distance, thresholds),
        check_lean(lean_angle, thresholds),
        check_slouch(slouch_angle, thresholds),
    )
    issues = [issue for issue in checks if issue is not None]

    return PoseAnalysis(
        status=resolve_status(issues),
        confidence=landmark_confidence(landmarks),
        distance=distance or 0,
        lean_angle=lean_angle,
        shoulder_angle=slouch_angle,
        issues=issues
    )
