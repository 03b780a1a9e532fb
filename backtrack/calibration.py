# Calibration - personal neutral-posture baseline for the slouch angle
from typing import List, Optional

from backtrack import config
from backtrack import logger


class Calibration:
    """Holds the neutral nose-to-shoulder ratio. None means uncalibrated."""

    def __init__(self):
        self._baseline: Optional[float] = None

    @property
    def baseline(self) -> Optional[float]:
        return self._baseline

    @property
    def is_calibrated(self) -> bool:
        return self._baseline is not None

    def calibrate(self, raw_ratio: float):
        self._baseline = float(raw_ratio)
        logger.log_calibration("Baseline Stored", {"baseline": f"{self._baseline:.4f}"})

    def reset(self):
        self._baseline = None
        logger.log_calibration("Baseline Cleared", {})


class BaselineSampler:
    """
    Collects raw ratios during a "hold still" window and averages them

    The window closes once `duration_seconds` have elapsed since the first
    sample and at least `min_samples` ratios were collected. Frames without
    a measurable ratio are skipped.
    """

    def __init__(self, duration_seconds: float = None, min_samples: int = None):
        self.duration_seconds = (config.CALIBRATION_SECONDS
                                 if duration_seconds is None else duration_seconds)
        self.min_samples = (config.CALIBRATION_MIN_SAMPLES
                            if min_samples is None else min_samples)
        self.samples: List[float] = []
        self.started_at_ms: Optional[float] = None
        self.last_sample_ms: Optional[float] = None

    def add_sample(self, ratio: Optional[float], timestamp_ms: float):
        if ratio is None:
            return
        if self.started_at_ms is None:
            self.started_at_ms = timestamp_ms
        self.samples.append(ratio)
        self.last_sample_ms = timestamp_ms

    @property
    def is_complete(self) -> bool:
        if self.started_at_ms is None or len(self.samples) < self.min_samples:
            return False
        elapsed = (self.last_sample_ms - self.started_at_ms) / 1000
        return elapsed >= self.duration_seconds

    def baseline(self) -> Optional[float]:
        if not self.samples:
            return None
        return sum(self.samples) / len(self.samples)
