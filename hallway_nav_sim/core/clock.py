"""
Episode and decision timing.

DecisionClock advances by the fixed tick duration on every fixed tick and owns
the mode-dependent "is a decision due" predicate.
"""

from __future__ import annotations

import logging

from .constants import DEFAULT_MAX_EPISODE_DURATION, TIME_EPSILON
from .enums import ControlMode
from ..utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

__all__ = ["DecisionClock"]


class DecisionClock:
    """Tracks time since episode begin and time since the last decision.

    Threshold comparisons allow ``TIME_EPSILON`` of slack so that an integer
    number of fixed ticks reaches a threshold it sums to exactly.
    """

    def __init__(self, max_episode_duration: float = DEFAULT_MAX_EPISODE_DURATION):
        if max_episode_duration <= 0:
            raise ValidationError(
                "max_episode_duration must be positive",
                parameter_name="max_episode_duration",
                parameter_value=max_episode_duration,
            )
        self.max_episode_duration = float(max_episode_duration)
        self.time_since_episode_begin = 0.0
        self.time_since_last_decision = 0.0

    def reset(self) -> None:
        self.time_since_episode_begin = 0.0
        self.time_since_last_decision = 0.0

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValidationError(
                "tick duration must be non-negative",
                parameter_name="dt",
                parameter_value=dt,
            )
        self.time_since_episode_begin += dt
        self.time_since_last_decision += dt

    @property
    def progress(self) -> float:
        """Fraction of the episode elapsed, in [0, 1]."""
        return min(1.0, self.time_since_episode_begin / self.max_episode_duration)

    def is_episode_timed_out(self) -> bool:
        return (
            self.time_since_episode_begin + TIME_EPSILON >= self.max_episode_duration
        )

    def is_decision_due(
        self, mode: ControlMode, pending_delay: float, ceiling: float
    ) -> bool:
        """Return whether a new decision should be committed on this tick.

        Interactive: the operator has staged a delay (non-zero) or the
        reconsideration ceiling elapsed. Autonomous: the delay chosen by the
        previous decision elapsed.
        """
        if mode is ControlMode.INTERACTIVE:
            return (
                self.time_since_last_decision + TIME_EPSILON >= ceiling
                or pending_delay != 0.0
            )
        return self.time_since_last_decision + TIME_EPSILON >= max(0.0, pending_delay)

    def mark_decision(self) -> None:
        self.time_since_last_decision = 0.0

    @property
    def at_window_start(self) -> bool:
        """True when no time has passed since the last decision."""
        return self.time_since_last_decision == 0.0

    def __repr__(self) -> str:
        return (
            f"DecisionClock(elapsed={self.time_since_episode_begin:.3f}, "
            f"since_decision={self.time_since_last_decision:.3f}, "
            f"max={self.max_episode_duration:.3f})"
        )
