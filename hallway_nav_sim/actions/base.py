"""
Common surface of the two action sources.

A scheduler is configured with exactly one variant for its lifetime; it asks
the variant whether a decision is due and which class drives locomotion, and
never branches on the mode itself for those questions.
"""

from __future__ import annotations

from hallway_nav_sim.core.clock import DecisionClock
from hallway_nav_sim.core.delay_mapping import DEFAULT_DELAY_PROFILE, DelayProfile
from hallway_nav_sim.core.enums import ActionClass, ControlMode


class ActionSource:
    """Base class for the Interactive and Autonomous action sources."""

    mode: ControlMode

    def __init__(self, delay_profile: DelayProfile = DEFAULT_DELAY_PROFILE):
        self.delay_profile = delay_profile

    @property
    def locomotion_class(self) -> ActionClass:
        """Class whose locomotion effect is applied on each fixed tick."""
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError

    def decision_due(self, clock: DecisionClock) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(locomotion={self.locomotion_class.name})"
