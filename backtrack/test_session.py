import pytest

from backtrack.calibration import BaselineSampler, Calibration
from backtrack.models import PoseAnalysis, PostureStatus, Thresholds
from backtrack.session import PostureStore


@pytest.fixture
def store():
    return PostureStore(clock=lambda: 1_700_000_000_000.0)


class TestSessionStats:
    def test_start_session_resets_and_stamps(self, store):
        store.update_stats(5, True)
        store.increment_alerts()
        store.start_session()
        stats = store.session_stats
        assert (stats.total_time, stats.good_posture_time, stats.alerts) == (0, 0, 0)
        assert stats.start_time == 1_700_000_000_000.0

    def test_update_stats_is_additive(self, store):
        store.start_session()
        store.update_stats(1, True)
        store.update_stats(1, False)
        assert store.session_stats.total_time == 2
        assert store.session_stats.good_posture_time == 1

    def test_good_time_never_exceeds_total(self, store):
        for delta, good in [(0.5, True), (0.25, False), (1.5, True)]:
            store.update_stats(delta, good)
            assert 0 <= store.session_stats.good_posture_time <= store.session_stats.total_time

    def test_increment_alerts(self, store):
        store.increment_alerts()
        store.increment_alerts()
        assert store.session_stats.alerts == 2

    def test_score_is_100_before_tracking(self, store):
        assert store.get_posture_score() == 100

    def test_score_is_good_share(self, store):
        store.update_stats(5, True)
        store.update_stats(5, False)
        assert store.get_posture_score() == 50

    def test_score_rounds_half_up(self, store):
        store.update_stats(1, True)
        store.update_stats(7, False)
        assert store.get_posture_score() == 13  # 12.5


class TestStoreReadout:
    def test_defaults(self, store):
        assert store.status == PostureStatus.NOT_DETECTED
        assert store.thresholds == Thresholds(min_distance=50, max_lean_angle=8, max_slouch_angle=12)
        assert store.is_tracking is False

    def test_apply_analysis(self, store):
        store.apply_analysis(PoseAnalysis(
            status=PostureStatus.LEANING, confidence=88, distance=61,
            lean_angle=-9.2, shoulder_angle=1.5
        ))
        assert store.status == PostureStatus.LEANING
        assert (store.confidence, store.distance, store.lean_angle, store.shoulder_angle) == (88, 61, -9.2, 1.5)


class TestCalibration:
    def test_calibrate_then_reset(self, store):
        store.calibrate_slouch_baseline(0.27)
        assert store.slouch_baseline == 0.27
        assert store.is_calibrated is True
        store.reset_calibration()
        assert store.slouch_baseline is None
        assert store.is_calibrated is False

    def test_recalibration_replaces_baseline(self):
        calibration = Calibration()
        calibration.calibrate(0.2)
        calibration.calibrate(0.3)
        assert calibration.baseline == 0.3

    def test_sampler_waits_for_window_and_samples(self):
        sampler = BaselineSampler(duration_seconds=1, min_samples=3)
        sampler.add_sample(0.20, 0)
        sampler.add_sample(0.22, 500)
        assert not sampler.is_complete
        sampler.add_sample(None, 900)
        sampler.add_sample(0.24, 1000)
        assert sampler.is_complete
        assert sampler.baseline() == pytest.approx(0.22)

    def test_sampler_needs_min_samples_even_after_window(self):
        sampler = BaselineSampler(duration_seconds=1, min_samples=5)
        sampler.add_sample(0.2, 0)
        sampler.add_sample(0.2, 5000)
        assert not sampler.is_complete

    def test_empty_sampler_has_no_baseline(self):
        assert BaselineSampler().baseline() is None
