"""
Decision Protocol Definition.

The training backend is driven through a strict handshake: the agent calls
``request_decision`` and then exactly one ``advance_step``; the backend reads
the agent's observation and pending reward, chooses a decision and
acknowledges it through ``on_action_received``. ``end_episode`` reports the
terminal observation and reward.

The same three calls are used for live autonomous play and for replaying a
recorded human trajectory, which is what lets demonstrations reach the
learning backend as ordinary experiences.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hallway_nav_sim.core.enums import ControlMode
from hallway_nav_sim.core.types import Decision, Observation


@runtime_checkable
class DecisionAgent(Protocol):
    """Agent-side surface the backend reads from during a protocol step."""

    @property
    def control_mode(self) -> ControlMode:
        ...

    def collect_observation(self) -> Observation:
        """Observation for the current step (the recorded one during replay)."""
        ...

    def heuristic_output(self) -> Decision:
        """Operator-provided decision (the recorded one during replay)."""
        ...

    def consume_reward(self) -> float:
        """Return and clear the reward accrued for the current step."""
        ...

    def on_action_received(self, decision: Decision) -> None:
        """Acknowledge the decision chosen for the outstanding request."""
        ...


@runtime_checkable
class DecisionProtocol(Protocol):
    """External training-step protocol."""

    def request_decision(self, agent: DecisionAgent) -> None:
        ...

    def advance_step(self) -> None:
        ...

    def end_episode(self, agent: DecisionAgent) -> None:
        ...
