from datetime import UTC, datetime

import pytest

from campus_nav.tracking.clock import SEC_MS, ManualClock, WallClock, to_ms, to_wall


def test_manual_clock_at_and_wall():
    clock = ManualClock.at(2025, 1, 1, 8, 30)
    assert to_wall(clock.now_ms()) == datetime(2025, 1, 1, 8, 30, tzinfo=UTC)
    clock.advance(90 * SEC_MS)
    assert to_wall(clock.now_ms()).minute == 31
    assert to_wall(clock.now_ms()).second == 30


def test_manual_clock_never_goes_backwards_on_advance():
    clock = ManualClock(10 * SEC_MS)
    with pytest.raises(ValueError):
        clock.advance(-1)
    clock.set(0.0)  # replays may rewind explicitly
    assert clock.now_ms() == 0.0


def test_naive_datetimes_are_utc():
    assert to_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1_000.0
    assert to_wall(1_000.0) == datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)


def test_wall_clock_is_epoch_ms():
    assert WallClock().now_ms() > to_ms(datetime(2024, 1, 1))
