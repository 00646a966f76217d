"""
AutonomousActionSource: policy-driven decisions with a self-chosen delay.

The policy emits a class plus a continuous parameter in [-1, 1]; the
parameter is decoded through the delay profile into the time until the next
decision. Out-of-range parameters and unknown class indices are clamped, never
raised.
"""

from __future__ import annotations

import logging

from hallway_nav_sim.core.clock import DecisionClock
from hallway_nav_sim.core.delay_mapping import DEFAULT_DELAY_PROFILE, DelayProfile
from hallway_nav_sim.core.enums import ActionClass, ControlMode
from hallway_nav_sim.core.types import Decision, PendingAction

from .base import ActionSource

logger = logging.getLogger(__name__)

__all__ = ["AutonomousActionSource"]


class AutonomousActionSource(ActionSource):
    """Holds the action committed by the most recent policy decision.

    The initial action is IDLE with zero delay, so the first fixed tick of an
    episode always requests a decision.
    """

    mode = ControlMode.AUTONOMOUS

    def __init__(self, delay_profile: DelayProfile = DEFAULT_DELAY_PROFILE):
        super().__init__(delay_profile)
        self.current = PendingAction()
        self.last_decision = Decision(ActionClass.IDLE, 0.0)

    @property
    def locomotion_class(self) -> ActionClass:
        return self.current.class_index

    def reset(self) -> None:
        self.current = PendingAction()
        self.last_decision = Decision(ActionClass.IDLE, 0.0)

    def decision_due(self, clock: DecisionClock) -> bool:
        return clock.is_decision_due(self.mode, self.current.delay, 0.0)

    def apply_decision(self, decision: Decision) -> PendingAction:
        self.last_decision = decision
        self.current = PendingAction(
            decision.action_class, self.delay_profile.decode(decision.delay_parameter)
        )
        logger.debug(
            "Committed %s for %.3fs",
            self.current.class_index.name,
            self.current.delay,
        )
        return self.current
