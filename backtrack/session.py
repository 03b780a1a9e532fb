# Session State Store - live posture readout, thresholds, calibration and stats
from typing import Callable, Optional

from backtrack import logger
from backtrack.calibration import Calibration
from backtrack.models import PoseAnalysis, PostureStatus, SessionStats, Thresholds
from backtrack.utils import now_ms, round_half_up


class PostureStore:
    """
    Mutable posture state owned by the tracking loop

    One instance per tracking controller; pass it explicitly to whoever
    reads or updates it. Mutations are serialized by the caller's tick
    cadence, so there is no locking.
    """

    def __init__(self, thresholds: Optional[Thresholds] = None,
                 clock: Callable[[], float] = now_ms):
        self._clock = clock

        self.status = PostureStatus.NOT_DETECTED
        self.confidence = 0
        self.distance = 0
        self.lean_angle = 0.0
        self.shoulder_angle = 0.0
        self.is_tracking = False
        self.last_good_posture = clock()
        self.bad_posture_duration = 0.0  # seconds

        self.thresholds = thresholds or Thresholds()
        self.session_stats = SessionStats()
        self.calibration = Calibration()

    # -- live readout -------------------------------------------------------

    def apply_analysis(self, analysis: PoseAnalysis):
        self.status = analysis.status
        self.confidence = analysis.confidence
        self.distance = analysis.distance
        self.lean_angle = analysis.lean_angle
        self.shoulder_angle = analysis.shoulder_angle

    # -- calibration --------------------------------------------------------

    @property
    def slouch_baseline(self) -> Optional[float]:
        return self.calibration.baseline

    @property
    def is_calibrated(self) -> bool:
        return self.calibration.is_calibrated

    def calibrate_slouch_baseline(self, baseline: float):
        self.calibration.calibrate(baseline)

    def reset_calibration(self):
        self.calibration.reset()

    # -- session stats ------------------------------------------------------

    def start_session(self):
        """Discard previous accumulation and start counting from now."""
        self.session_stats = SessionStats(start_time=self._clock())
        logger.log_session("Session Started", {"start_time": int(self.session_stats.start_time)})

    def update_stats(self, delta_seconds: float, is_good: bool):
        self.session_stats.total_time += delta_seconds
        if is_good:
            self.session_stats.good_posture_time += delta_seconds

    def increment_alerts(self):
        self.session_stats.alerts += 1

    def get_posture_score(self) -> int:
        stats = self.session_stats
        if stats.total_time == 0:
            return 100
        return int(round_half_up(stats.good_posture_time / stats.total_time * 100))
