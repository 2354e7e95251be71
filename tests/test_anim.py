"""
Tests for the value animator.
"""
import math
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blocks.anim import Animator, CollapseStep, FixedStep


def run(anim: Animator, now: float = 0.0, limit: int = 1000):
    """Drive an animator to completion, jumping to each deadline."""
    values = []
    for _ in range(limit):
        values.append(anim.animate(now))
        if not anim.active:
            return values
        now = anim.wake_at
    raise AssertionError("animation did not finish")


class TestSteps:
    """Test the step strategies."""

    def test_fixed_step(self):
        """Constant increment and delay."""
        assert FixedStep(2, 50).advance(3) == (5, 50)

    def test_collapse_step(self):
        """Value grows by twice the span, delay is its square root."""
        value, delay = CollapseStep(2).advance(5)
        assert value == 9
        assert delay == pytest.approx(3.0)


class TestAnimator:
    """Test the animator lifecycle."""

    def test_idle(self):
        """An animator that was never started stays idle."""
        anim = Animator(FixedStep())
        assert not anim.active
        assert anim.animate(100) == 0
        assert anim.wake_at is None

    def test_first_call_schedules(self):
        """The first call keeps the start value and schedules the next step."""
        anim = Animator(FixedStep(1, 200))
        anim.start(0, 3)
        assert anim.animate(1000) == 0
        assert anim.active
        assert anim.wake_at == 1200

    def test_early_call_changes_nothing(self):
        """Calls before the deadline return the same value."""
        anim = Animator(FixedStep(1, 200))
        anim.start(0, 3)
        anim.animate(0)
        assert anim.animate(150) == 0
        assert anim.wake_at == 200

    def test_values_monotonic_until_end(self):
        """Values step up to the end value, which is reported once done."""
        anim = Animator(FixedStep(1, 200))
        anim.start(0, 3)
        values = run(anim)
        assert values == [0, 1, 2, 3, 3]
        assert not anim.active
        assert anim.value == 3

    def test_clamped_to_end(self):
        """Overshooting steps are clamped to the end value."""
        anim = Animator(FixedStep(4, 10))
        anim.start(1, 10)
        values = run(anim)
        assert values[-1] == 10
        assert values[:-1] == sorted(values[:-1])

    def test_final_wake_is_now(self):
        """The completing call asks for one more wake-up right away."""
        anim = Animator(FixedStep(1, 10))
        anim.start(0, 1)
        anim.animate(0)
        anim.animate(10)
        assert anim.animate(20) == 1
        assert not anim.active
        assert anim.wake_at == 20
        anim.animate(30)
        assert anim.wake_at is None

    def test_deadlines_do_not_drift(self):
        """Deadlines advance by the step delay, not from the call time."""
        anim = Animator(FixedStep(1, 100))
        anim.start(0, 10)
        anim.animate(0)
        anim.animate(130)
        assert anim.wake_at == 200

    def test_on_wake_callback(self):
        """Every requested wake-up is reported."""
        wakes = []
        anim = Animator(FixedStep(1, 100), on_wake=wakes.append)
        anim.start(0, 2)
        run(anim)
        assert wakes == [100, 200, 300, 300]

    def test_stop(self):
        """Stopping keeps the value and clears the deadline."""
        anim = Animator(FixedStep(1, 100))
        anim.start(0, 10)
        run_values = [anim.animate(t) for t in (0, 100, 200)]
        anim.stop()
        assert not anim.active
        assert anim.wake_at is None
        assert anim.value == run_values[-1]

    def test_swap_strategy(self):
        """The step strategy can change between runs."""
        anim = Animator(FixedStep(1, 100))
        anim.start(0, 2)
        run(anim)
        anim.step = FixedStep(5, 10)
        anim.start(0, 10)
        assert run(anim) == [0, 5, 10, 10]


class TestCollapse:
    """Test the row clear collapse timing."""

    def test_collapse_delays(self):
        """Delays follow the square root of the value reached."""
        wakes = []
        anim = Animator(CollapseStep(1), on_wake=wakes.append)
        anim.start(1, 30)
        run(anim)
        delays = [b - a for a, b in zip(wakes, wakes[1:]) if b != a]
        assert delays[0] == pytest.approx(math.sqrt(5))
        assert all(d > 0 for d in delays)

    def test_collapse_reaches_band_height(self):
        """The collapse ends at the full band height."""
        anim = Animator(CollapseStep(4))
        anim.start(1, 4 * 30)
        assert run(anim)[-1] == 120
