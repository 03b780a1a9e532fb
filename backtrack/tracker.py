"""
Posture Tracker - per-frame controller for a tracking session

Drives one frame at a time:
- classify landmarks with the store's current thresholds and baseline
- publish the readout and advance session stats by the frame gap
- raise an alert once bad posture has persisted long enough
- collect samples while a calibration is in progress
"""
from typing import Callable, Dict, Optional

from backtrack import config
from backtrack import logger
from backtrack.calibration import BaselineSampler
from backtrack.classifier import analyze_pose, primary_issue
from backtrack.geometry import LandmarkSet, nose_to_shoulder_ratio
from backtrack.models import (
    CalibrationState,
    NotificationType,
    PoseAnalysis,
    PostureStatus,
    SessionSummary,
)
from backtrack.notifications import NotificationCenter
from backtrack.session import PostureStore
from backtrack.utils import now_ms

CALIBRATION_COMPLETE_MESSAGE = "Calibration complete! Your current posture is now the baseline."


class PostureTracker:

    def __init__(self, store: PostureStore, notifications: NotificationCenter,
                 clock: Callable[[], float] = now_ms):
        self.store = store
        self.notifications = notifications
        self._clock = clock
        self.sampler: Optional[BaselineSampler] = None
        self.last_frame_ms: Optional[float] = None
        self.last_alert_ms: Dict[PostureStatus, float] = {}

    # -- lifecycle ------------------------------------------------------------

    def start(self):
        now = self._clock()
        self.store.start_session()
        self.store.is_tracking = True
        self.store.last_good_posture = now
        self.store.bad_posture_duration = 0.0
        self.last_frame_ms = None
        self.last_alert_ms = {}
        logger.log_tracker("Tracking Started", {
            "thresholds": self.store.thresholds.model_dump(),
            "calibrated": self.store.is_calibrated
        })

    def stop(self):
        self.store.is_tracking = False
        stats = self.store.session_stats
        logger.log_tracker("Tracking Stopped", {
            "total_time_sec": round(stats.total_time, 1),
            "good_posture_sec": round(stats.good_posture_time, 1),
            "alerts": stats.alerts,
            "score": self.store.get_posture_score()
        })

    def summary(self) -> SessionSummary:
        return SessionSummary(
            stats=self.store.session_stats.model_copy(),
            posture_score=self.store.get_posture_score(),
            is_tracking=self.store.is_tracking
        )

    # -- per frame ------------------------------------------------------------

    def process_frame(self, landmarks: Optional[LandmarkSet],
                      timestamp_ms: Optional[float] = None) -> PoseAnalysis:
        timestamp = self._clock() if timestamp_ms is None else timestamp_ms

        analysis = analyze_pose(landmarks, self.store.thresholds, self.store.slouch_baseline)
        self.store.apply_analysis(analysis)

        if self.sampler is not None and analysis.status != PostureStatus.NOT_DETECTED:
            self._collect_calibration_sample(landmarks, timestamp)

        if self.store.is_tracking:
            self._advance_stats(analysis, timestamp)
            self._check_alert(analysis, timestamp)

        self.last_frame_ms = timestamp
        return analysis

    def _advance_stats(self, analysis: PoseAnalysis, timestamp: float):
        if self.last_frame_ms is None:
            return
        delta = (timestamp - self.last_frame_ms) / 1000
        # Out-of-order frames add nothing; long gaps (hidden tab, stalled camera) are capped
        delta = min(max(delta, 0.0), config.MAX_FRAME_GAP_SECONDS)
        self.store.update_stats(delta, analysis.status == PostureStatus.GOOD)

    def _check_alert(self, analysis: PoseAnalysis, timestamp: float):
        status = analysis.status

        if status in (PostureStatus.GOOD, PostureStatus.NOT_DETECTED):
            self.store.last_good_posture = timestamp
            self.store.bad_posture_duration = 0.0
            if status == PostureStatus.GOOD:
                self.last_alert_ms.clear()
            return

        self.store.bad_posture_duration = (timestamp - self.store.last_good_posture) / 1000
        if self.store.bad_posture_duration < config.ALERT_DELAY_SECONDS:
            return

        last_alert = self.last_alert_ms.get(status)
        if last_alert is not None:
            since_last = (timestamp - last_alert) / 1000
            if since_last < config.ALERT_COOLDOWN_SECONDS:
                return

        self._raise_alert(analysis, timestamp)

    def _raise_alert(self, analysis: PoseAnalysis, timestamp: float):
        issue = primary_issue(analysis.issues)
        notification_id = self.notifications.add(
            issue.message,
            NotificationType(issue.severity.value)
        )
        self.store.increment_alerts()
        self.last_alert_ms[analysis.status] = timestamp

        logger.log_alert("Alert Raised", {
            "status": analysis.status.value,
            "severity": issue.severity.value,
            "message": issue.message,
            "bad_for_sec": round(self.store.bad_posture_duration, 1),
            "notification_id": notification_id
        })

    # -- calibration ------------------------------------------------------------

    def begin_calibration(self, duration_seconds: float = None, min_samples: int = None):
        self.sampler = BaselineSampler(duration_seconds, min_samples)
        logger.log_calibration("Calibration Started", {
            "duration_sec": self.sampler.duration_seconds,
            "min_samples": self.sampler.min_samples
        })

    def _collect_calibration_sample(self, landmarks: LandmarkSet, timestamp: float):
        self.sampler.add_sample(nose_to_shoulder_ratio(landmarks), timestamp)
        if not self.sampler.is_complete:
            return

        baseline = self.sampler.baseline()
        samples = len(self.sampler.samples)
        self.sampler = None
        self.store.calibrate_slouch_baseline(baseline)
        self.notifications.add(CALIBRATION_COMPLETE_MESSAGE, NotificationType.SUCCESS)
        logger.log_calibration("Calibration Complete", {
            "baseline": f"{baseline:.4f}",
            "samples": samples
        })

    def reset_calibration(self):
        self.sampler = None
        self.store.reset_calibration()

    def calibration_state(self) -> CalibrationState:
        return CalibrationState(
            is_calibrated=self.store.is_calibrated,
            slouch_baseline=self.store.slouch_baseline,
            in_progress=self.sampler is not None
        )
