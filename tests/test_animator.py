import pytest

from campusnav.animator import PathAnimator
from campusnav.config import Waypoint
from campusnav.geometry import heading_degrees

CCICT_PATH = [Waypoint(20, 90), Waypoint(35, 75), Waypoint(50, 60), Waypoint(65, 45), Waypoint(75, 30)]


class LeakyTickSource:
    """Keeps every callback even after cancellation, like a late-firing frame."""

    def __init__(self):
        self.callbacks = []

    def request(self, callback):
        self.callbacks.append(callback)
        return len(self.callbacks)

    def cancel(self, handle):
        pass


def test_heading_points_up_along_travel_direction():
    assert heading_degrees(Waypoint(0, 0), Waypoint(1, 1)) == pytest.approx(135.0)
    assert heading_degrees(Waypoint(50, 50), Waypoint(50, 10)) == pytest.approx(0.0)
    assert heading_degrees(Waypoint(0, 0), Waypoint(10, 0)) == pytest.approx(90.0)


def test_first_sample_heads_towards_second_waypoint(ticks):
    samples = []
    PathAnimator(ticks).start([Waypoint(0, 0), Waypoint(1, 1)], samples.append)

    assert samples[0].x == 0 and samples[0].y == 0
    assert samples[0].heading == pytest.approx(135.0)


def test_run_follows_path_and_terminates(ticks):
    samples = []
    animator = PathAnimator(ticks, duration_ms=3000)
    animator.start(CCICT_PATH, samples.append)

    ticks.tick(0)
    assert (samples[-1].x, samples[-1].y) == (20, 90)

    ticks.tick(1500)
    assert (samples[-1].x, samples[-1].y) == pytest.approx((50, 60))

    ticks.tick(3000)
    assert (samples[-1].x, samples[-1].y) == (75, 30)
    assert ticks.pending == 0
    assert not animator.active
    assert animator.run.finished

    emitted = len(samples)
    ticks.advance(100)
    assert len(samples) == emitted


def test_elapsed_is_measured_from_first_tick():
    from campusnav.scheduler import ManualTickSource

    ticks = ManualTickSource(start_ms=10_000)
    samples = []
    PathAnimator(ticks, duration_ms=3000).start(CCICT_PATH, samples.append)

    ticks.tick(10_500)
    ticks.tick(12_000)
    assert (samples[-1].x, samples[-1].y) == pytest.approx((50, 60))


def test_interpolates_within_segment(ticks):
    samples = []
    PathAnimator(ticks, duration_ms=3000).start(CCICT_PATH, samples.append)

    ticks.tick(0)
    ticks.tick(375)  # halfway through the first of four segments
    assert (samples[-1].x, samples[-1].y) == pytest.approx((27.5, 82.5))
    assert samples[-1].heading == pytest.approx(heading_degrees(CCICT_PATH[0], CCICT_PATH[1]))


def test_overshooting_duration_emits_last_waypoint(ticks):
    samples = []
    PathAnimator(ticks, duration_ms=3000).start(CCICT_PATH, samples.append)

    ticks.tick(0)
    ticks.tick(9000)
    assert (samples[-1].x, samples[-1].y) == (75, 30)
    assert ticks.pending == 0


def test_single_waypoint_holds_position(ticks):
    samples = []
    animator = PathAnimator(ticks)
    animator.start([Waypoint(42, 17)], samples.append)
    assert ticks.pending == 1

    ticks.tick(16)
    assert ticks.pending == 0
    assert all((s.x, s.y) == (42, 17) for s in samples)
    assert all(s.heading == 0.0 for s in samples)

    ticks.advance(5000)
    assert ticks.pending == 0


def test_empty_waypoints_do_not_start(ticks):
    samples = []
    animator = PathAnimator(ticks)

    assert animator.start([], samples.append) is None
    assert samples == []
    assert ticks.pending == 0
    assert not animator.active


def test_new_run_cancels_previous_run(ticks):
    old_samples, new_samples = [], []
    animator = PathAnimator(ticks, duration_ms=3000)
    old_run = animator.start(CCICT_PATH, old_samples.append)
    ticks.tick(0)
    ticks.tick(100)

    animator.start([Waypoint(0, 0), Waypoint(100, 100)], new_samples.append)
    assert old_run.cancelled
    assert ticks.pending == 1

    emitted = len(old_samples)
    ticks.tick(200)
    ticks.tick(300)
    assert len(old_samples) == emitted
    assert len(new_samples) == 3


def test_restart_begins_from_first_waypoint(ticks):
    samples = []
    animator = PathAnimator(ticks, duration_ms=3000)
    animator.start(CCICT_PATH, samples.append)
    ticks.tick(0)
    ticks.tick(2000)

    animator.start(CCICT_PATH, samples.append)
    assert (samples[-1].x, samples[-1].y) == (20, 90)
    ticks.tick(2100)
    assert (samples[-1].x, samples[-1].y) == (20, 90)


def test_stale_callbacks_are_ignored_after_cancel():
    source = LeakyTickSource()
    samples = []
    animator = PathAnimator(source, duration_ms=3000)
    animator.start(CCICT_PATH, samples.append)
    animator.cancel()

    source.callbacks[0](500.0)
    assert len(samples) == 1


def test_stale_callbacks_cannot_interleave_with_new_run():
    source = LeakyTickSource()
    old_samples, new_samples = [], []
    animator = PathAnimator(source, duration_ms=3000)
    animator.start(CCICT_PATH, old_samples.append)
    animator.start([Waypoint(0, 0), Waypoint(10, 0)], new_samples.append)

    stale, fresh = source.callbacks
    fresh(0.0)
    stale(0.0)
    stale(1000.0)
    assert len(old_samples) == 1
    assert len(new_samples) == 2


def test_duration_must_be_positive(ticks):
    with pytest.raises(ValueError):
        PathAnimator(ticks, duration_ms=0)
