"""
Time-driven value animator.

An Animator walks an integer from a start value towards an end value.
How far each step goes and how long it lasts is decided by a step
strategy, which can be swapped between runs to chain animation phases.
Time is passed in by the caller, in milliseconds.
"""
import math
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple


class AnimationStep(ABC):
    """Strategy computing the next animation value and how long to wait for it."""

    @abstractmethod
    def advance(self, value: int) -> Tuple[int, float]:
        """
        Compute the step following value.

        Returns:
            (next value, delay in milliseconds before it becomes current)
        """
        pass


class FixedStep(AnimationStep):
    """Constant increment at a constant pace."""

    def __init__(self, increment: int = 1, delay_ms: float = 200):
        self.increment = increment
        self.delay_ms = delay_ms

    def advance(self, value: int) -> Tuple[int, float]:
        return value + self.increment, self.delay_ms


class CollapseStep(AnimationStep):
    """
    Row clear collapse: the cleared band closes faster and faster.

    The value grows by twice the number of cleared rows, and the delay
    is the square root of the value reached.
    """

    def __init__(self, span: int):
        self.span = span

    def advance(self, value: int) -> Tuple[int, float]:
        value += 2 * self.span
        return value, math.sqrt(value)


class Animator:
    """
    Step a value from start to end over time.

    ``animate(now)`` must be called repeatedly; each call that leaves the
    animation running records the next deadline in ``wake_at`` (and
    passes it to ``on_wake`` when set), so the caller knows when to call
    again. The animation ends once the value reaches or crosses the end
    value, at which point the value is clamped to it.
    """

    def __init__(self, step: AnimationStep, on_wake: Optional[Callable[[float], None]] = None):
        """
        Args:
            step: step strategy, may be replaced while the animator is idle
            on_wake: optional callback receiving every requested wake-up time
        """
        self.step = step
        self.on_wake = on_wake
        self.active = False
        self.wake_at: Optional[float] = None
        self._deadline: Optional[float] = None
        self._start = 0
        self._end = 0
        self._value = 0
        self._next = 0

    @property
    def value(self) -> int:
        """Current value, without moving the animation forward."""
        return self._value

    def start(self, start: int, end: int) -> None:
        """Start animating from start until the value crosses end."""
        self.active = True
        self._deadline = None
        self._start = start
        self._end = end
        self._value = start
        self._next = start

    def stop(self) -> None:
        """Abort the animation, keeping the current value."""
        self.active = False
        self._deadline = None
        self.wake_at = None

    def _wake(self, at: float) -> None:
        self.wake_at = at
        if self.on_wake is not None:
            self.on_wake(at)

    def _done(self) -> bool:
        if self._start < self._end:
            return self._value >= self._end
        return self._value <= self._end

    def animate(self, now: float) -> int:
        """
        Move the animation forward to time now.

        Args:
            now: current time in milliseconds

        Returns:
            The current value
        """
        if not self.active:
            self.wake_at = None
            return self._value
        if self._done():
            self.active = False
            self._deadline = None
            self._value = self._end
            # One last wake-up so the final value gets displayed.
            self._wake(now)
            return self._end
        if self._deadline is None:
            # First step.
            self._next, delay = self.step.advance(self._value)
            self._deadline = now + delay
        elif self._deadline <= now:
            value, delay = self.step.advance(self._next)
            self._deadline += delay
            self._value, self._next = self._next, value
        self._wake(self._deadline)
        return self._value

    def __repr__(self) -> str:
        state = "active" if self.active else "idle"
        return f"Animator({state}, value={self._value}, range=[{self._start}, {self._end}))"
