# tests/tracking/test_position_filter.py
import pytest

from campus_nav.config.models import FilterModel
from campus_nav.domain.entities.geography import Coord
from campus_nav.domain.entities.position import PositionSample, RejectReason, TrackingState
from campus_nav.tracking.clock import ManualClock
from campus_nav.tracking.hooks import NoopHooks
from campus_nav.tracking.position_filter import PositionFilter

T0 = 1_700_000_000_000.0  # epoch ms
DEG_PER_M = 1 / 111_194.93  # longitude degrees per meter on the equator


# --- trace helper ---
class FilterTrace(NoopHooks):
    def __init__(self):
        self.rejected = []
        self.accepted = []

    def sample_rejected(self, sample, *, reason, **measured):
        self.rejected.append((reason, measured))

    def sample_accepted(self, sample, *, smoothed, first):
        self.accepted.append((smoothed, first))


def fix(lng_m: float, t_ms: float, accuracy_m: float | None = 5.0, lat: float = 0.0):
    return PositionSample(Coord(lat, lng_m * DEG_PER_M), T0 + t_ms, accuracy_m)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(T0)


@pytest.fixture
def trace() -> FilterTrace:
    return FilterTrace()


@pytest.fixture
def filt(clock, trace) -> PositionFilter:
    return PositionFilter(FilterModel(), clock=clock, hooks=trace)


def test_first_accepted_sample_is_emitted_raw(filt, trace):
    assert filt.state is TrackingState.UNINITIALIZED
    s = PositionSample(Coord(7.2539, 80.5918), T0, 4.0)
    assert filt.process(s) == s.coord
    assert filt.smoothed == s.coord
    assert filt.state is TrackingState.TRACKING
    assert trace.accepted == [(s.coord, True)]


def test_ema_blends_toward_new_fix(filt, clock):
    filt.process(fix(0.0, 0))
    clock.advance(1_000)
    out = filt.process(fix(10.0, 1_000))
    assert out.lat == 0.0
    assert out.lng == pytest.approx(0.25 * 10.0 * DEG_PER_M, rel=1e-12)


def test_stale_sample_is_dropped(filt, clock, trace):
    first = filt.process(fix(0.0, 0))
    clock.advance(20_000)
    assert filt.process(fix(1.0, 11_000)) is None  # 9 s old
    assert filt.smoothed == first
    (reason, measured), = trace.rejected
    assert reason is RejectReason.STALE
    assert measured["age_ms"] == pytest.approx(9_000)


def test_low_accuracy_is_dropped_missing_accuracy_is_not(filt, clock, trace):
    assert filt.process(fix(0.0, 0, accuracy_m=61.0)) is None
    assert trace.rejected[0][0] is RejectReason.LOW_ACCURACY
    assert filt.state is TrackingState.UNINITIALIZED
    assert filt.process(fix(0.0, 0, accuracy_m=60.0)) is not None
    clock.advance(1_000)
    assert filt.process(fix(1.0, 1_000, accuracy_m=None)) is not None
    assert filt.last_accuracy_m is None


def test_implausible_jump_is_dropped(filt, clock, trace):
    first = filt.process(fix(0.0, 0))
    clock.advance(1_000)
    # 8 m/s * 1 s + 15 m slack = 23 m allowed
    assert filt.process(fix(30.0, 1_000)) is None
    assert filt.smoothed == first
    reason, measured = trace.rejected[-1]
    assert reason is RejectReason.IMPLAUSIBLE_JUMP
    assert measured["allowed_m"] == pytest.approx(23.0)
    assert filt.process(fix(20.0, 1_000)) is not None


def test_jump_window_is_at_least_one_second(filt, clock):
    filt.process(fix(0.0, 0))
    clock.advance(200)
    assert filt.process(fix(20.0, 200)) is not None  # dt clamps to 1 s


def test_jump_guard_compares_against_raw_not_smoothed(filt, clock):
    filt.process(fix(0.0, 0))
    clock.advance(1_000)
    filt.process(fix(20.0, 1_000))  # smoothed lags at ~5 m
    clock.advance(1_000)
    # 20 m from the last raw fix, ~35 m from the smoothed estimate
    assert filt.process(fix(40.0, 2_000)) is not None


def test_rejected_sample_does_not_move_jump_reference(filt, clock):
    filt.process(fix(0.0, 0))
    clock.advance(1_000)
    assert filt.process(fix(500.0, 1_000)) is None
    clock.advance(1_000)
    # 10 m from the accepted fix 2 s ago; would be a 490 m jump from the rejected one
    assert filt.process(fix(10.0, 2_000)) is not None


def test_reset_returns_to_uninitialized(filt, clock):
    filt.process(fix(0.0, 0))
    filt.reset()
    assert filt.state is TrackingState.UNINITIALIZED
    assert filt.smoothed is None
    clock.advance(1_000)
    s = fix(300.0, 1_000)  # far away, but there is no previous fix any more
    assert filt.process(s) == s.coord


def test_stale_indicator(filt, clock):
    assert not filt.is_stale()
    filt.process(fix(0.0, 0))
    assert not filt.is_stale(T0 + 16_000)
    assert filt.is_stale(T0 + 16_001)
    clock.advance(30_000)
    assert filt.is_stale()
    assert filt.smoothed is not None  # still shown, only flagged


def test_custom_thresholds(clock):
    cfg = FilterModel(stale_threshold_ms=2_000, accuracy_max_m=150, alpha=1.0)
    f = PositionFilter(cfg, clock=clock)
    f.process(fix(0.0, 0, accuracy_m=120.0))
    clock.advance(1_000)
    out = f.process(fix(5.0, 1_000))
    assert out.lng == pytest.approx(5.0 * DEG_PER_M, rel=1e-12)  # alpha=1 follows raw
    clock.advance(3_000)
    assert f.process(fix(6.0, 1_500)) is None
