"""
ReplayDriver: feeds a recorded trajectory through the decision protocol.

For every step but the last it requests a decision, advances one protocol
step and drops the step from the front of the buffer. While this happens the
agent answers the backend from the buffer front instead of live sensing. The
final retained step is reported through ``end_episode``.
"""

from __future__ import annotations

import logging

from hallway_nav_sim.interfaces.protocol import DecisionAgent, DecisionProtocol

from .buffer import TrajectoryBuffer

logger = logging.getLogger(__name__)

__all__ = ["ReplayDriver"]


class ReplayDriver:
    """Drains a TrajectoryBuffer one protocol step at a time."""

    def __init__(self, protocol: DecisionProtocol):
        self.protocol = protocol
        self.replayed_steps = 0

    def drain(self, buffer: TrajectoryBuffer, agent: DecisionAgent) -> int:
        """Replay ``len(buffer) - 1`` steps, then signal episode termination.

        Returns the number of steps submitted through the protocol. An empty
        buffer submits nothing and terminates immediately.
        """
        self.replayed_steps = 0
        to_replay = max(0, len(buffer) - 1)
        logger.info("Replaying %d recorded steps", to_replay)

        while len(buffer) > 1:
            self.protocol.request_decision(agent)
            self.protocol.advance_step()
            buffer.pop_front()
            self.replayed_steps += 1

        self.protocol.end_episode(agent)
        return self.replayed_steps
