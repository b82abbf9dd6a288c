"""Tests for the fixed-timestep scheduler."""

import math
import pytest
from nbody_sim.errors import ConfigurationError
from nbody_sim.physics.scheduler import FixedTimestepScheduler

DT = 0.125  # exactly representable, so sums of deltas are exact


def test_short_frame_runs_no_steps():
    scheduler = FixedTimestepScheduler(DT)
    assert scheduler.advance(0.05) == 0
    assert scheduler.accumulator == pytest.approx(0.05)
    assert scheduler.advance(0.1) == 1
    assert scheduler.accumulator == pytest.approx(0.025)


@pytest.mark.parametrize("deltas", [
    [3 * DT],
    [DT, DT, DT],
    [DT / 2] * 6,
    [0.0, 2 * DT, 0.0, DT],
    [DT / 4, DT * 2.5, DT / 4],
])
def test_chunking_does_not_change_step_count(deltas):
    """Deltas summing to 3*dt give 3 steps however they are split."""
    scheduler = FixedTimestepScheduler(DT, max_steps_per_frame=8)
    steps = sum(scheduler.advance(d) for d in deltas)
    assert steps == 3
    assert scheduler.total_steps == 3
    assert scheduler.accumulator == 0.0
    assert scheduler.simulated_time == 3 * DT


def test_accumulator_never_negative():
    scheduler = FixedTimestepScheduler(1.0 / 120.0)
    for delta in [0.016, 0.017, 0.001, 0.05, 0.0, 0.033] * 20:
        scheduler.advance(delta)
        assert scheduler.accumulator >= 0.0
        assert 0.0 <= scheduler.alpha < 1.0


def test_cap_drops_excess_time():
    """A long frame runs at most max_steps_per_frame steps and drops the rest."""
    scheduler = FixedTimestepScheduler(DT, max_steps_per_frame=4)
    
    assert scheduler.advance(1.0) == 4
    assert scheduler.dropped_steps == 4
    assert scheduler.accumulator == 0.0
    
    # Sub-step remainder survives the drop
    assert scheduler.advance(1.0 + DT / 2) == 4
    assert scheduler.dropped_steps == 8
    assert scheduler.accumulator == pytest.approx(DT / 2)
    
    # Normal frames are unaffected afterwards
    assert scheduler.advance(DT / 2) == 1
    assert scheduler.total_steps == 9


def test_cap_drop_is_logged(caplog):
    scheduler = FixedTimestepScheduler(DT, max_steps_per_frame=2)
    with caplog.at_level("WARNING"):
        scheduler.advance(10 * DT)
    assert "dropped 8" in caplog.text


@pytest.mark.parametrize("delta", [-0.01, math.nan, math.inf])
def test_invalid_frame_delta(delta):
    scheduler = FixedTimestepScheduler(DT)
    with pytest.raises(ValueError):
        scheduler.advance(delta)
    assert scheduler.accumulator == 0.0


def test_invalid_construction():
    with pytest.raises(ConfigurationError):
        FixedTimestepScheduler(0.0)
    with pytest.raises(ConfigurationError):
        FixedTimestepScheduler(DT, max_steps_per_frame=0)


def test_reset():
    scheduler = FixedTimestepScheduler(DT, max_steps_per_frame=1)
    scheduler.advance(5 * DT + DT / 2)
    scheduler.reset()
    assert scheduler.accumulator == 0.0
    assert scheduler.total_steps == 0
    assert scheduler.dropped_steps == 0


def test_granted_steps_stay_pending_until_consumed():
    scheduler = FixedTimestepScheduler(DT, max_steps_per_frame=8)
    assert scheduler.steps_available(3 * DT) == 3
    scheduler.consume()
    assert scheduler.total_steps == 1
    assert scheduler.pending_steps == 2
    
    # Unconsumed steps are offered again on the next frame
    assert scheduler.steps_available(DT) == 3
    for _ in range(3):
        scheduler.consume()
    assert scheduler.total_steps == 4
    assert scheduler.simulated_time == 4 * DT
    with pytest.raises(RuntimeError):
        scheduler.consume()


def test_pending_steps_count_toward_cap():
    scheduler = FixedTimestepScheduler(DT, max_steps_per_frame=4)
    assert scheduler.steps_available(3 * DT) == 3
    assert scheduler.steps_available(3 * DT) == 4
    assert scheduler.dropped_steps == 2
