from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backtrack import config


class PostureStatus(str, Enum):
    GOOD = "good"
    LEANING = "leaning"
    TOO_CLOSE = "too_close"
    SLOUCHING = "slouching"
    NOT_DETECTED = "not_detected"


class IssueType(str, Enum):
    TOO_CLOSE = "too_close"
    LEANING = "leaning"
    SLOUCHING = "slouching"


class Severity(str, Enum):
    WARNING = "warning"
    DANGER = "danger"


class NotificationType(str, Enum):
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"
    INFO = "info"


class PermissionState(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"


class Landmark(BaseModel):
    """One pose-model keypoint in normalized image space."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = Field(default=None, ge=0, le=1)


class Thresholds(BaseModel):
    min_distance: float = config.DEFAULT_MIN_DISTANCE
    max_lean_angle: float = config.DEFAULT_MAX_LEAN_ANGLE
    max_slouch_angle: float = config.DEFAULT_MAX_SLOUCH_ANGLE


class PostureIssue(BaseModel):
    type: IssueType
    message: str
    severity: Severity


class PoseAnalysis(BaseModel):
    status: PostureStatus
    confidence: int = 0
    distance: int = 0
    lean_angle: float = 0
    shoulder_angle: float = 0
    issues: List[PostureIssue] = Field(default_factory=list)


class SessionStats(BaseModel):
    total_time: float = 0.0
    good_posture_time: float = 0.0
    alerts: int = 0
    start_time: Optional[float] = None  # unix ms


class Notification(BaseModel):
    id: int
    message: str
    type: NotificationType
    timestamp: float  # unix ms
    exiting: bool = False


# API payloads

class FrameInput(BaseModel):
    landmarks: Optional[List[Optional[Landmark]]] = None
    timestamp_ms: Optional[float] = None


class SessionSummary(BaseModel):
    stats: SessionStats
    posture_score: int
    is_tracking: bool


class CalibrationState(BaseModel):
    is_calibrated: bool
    slouch_baseline: Optional[float] = None
    in_progress: bool = False
