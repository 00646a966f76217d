"""
In-process training-step protocol.

Stands in for an external learning backend: it enforces the request/advance
handshake, reads the agent's observation and reward at every protocol step,
chooses a decision (policy output in autonomous mode, the operator's or the
recorded step's output otherwise) and collects everything as experiences.

Live policy steps and replayed demonstration steps produce experiences of the
same shape, so both can feed one learning pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from hallway_nav_sim.core.enums import ActionClass, ControlMode, SchedulerPhase
from hallway_nav_sim.core.types import Decision, Observation
from hallway_nav_sim.interfaces.policy import Policy
from hallway_nav_sim.interfaces.protocol import DecisionAgent
from hallway_nav_sim.utils.exceptions import ProtocolError

logger = logging.getLogger(__name__)

__all__ = ["ExperienceSource", "Experience", "InProcessBackend"]


class ExperienceSource(Enum):
    POLICY = "policy"
    DEMONSTRATION = "demonstration"
    HEURISTIC = "heuristic"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class Experience:
    """One protocol step as seen by the learning backend.

    Terminal experiences carry no action.
    """

    episode: int
    observation: Observation
    action_class: Optional[ActionClass]
    delay_parameter: Optional[float]
    reward: float
    done: bool
    source: ExperienceSource


class InProcessBackend:
    """Synchronous DecisionProtocol implementation.

    Args:
        policy: Policy consulted for autonomous agents. Without one the
            agent's heuristic output is used.
        on_experience: Optional callback invoked with every new experience.
    """

    def __init__(
        self,
        policy: Optional[Policy] = None,
        on_experience: Optional[Callable[[Experience], None]] = None,
    ):
        self.policy = policy
        self.on_experience = on_experience
        self.experiences: List[Experience] = []
        self.episodes_completed = 0
        self.requests = 0
        self._pending_agent: Optional[DecisionAgent] = None

    @property
    def awaiting_advance(self) -> bool:
        return self._pending_agent is not None

    def request_decision(self, agent: DecisionAgent) -> None:
        if self._pending_agent is not None:
            raise ProtocolError(
                "request_decision called twice without advance_step",
                current_state="requested",
                expected_state="advanced",
            )
        self._pending_agent = agent
        self.requests += 1

    def advance_step(self) -> None:
        agent = self._pending_agent
        if agent is None:
            raise ProtocolError(
                "advance_step called without a pending request",
                current_state="idle",
                expected_state="requested",
            )
        observation = agent.collect_observation()
        reward = agent.consume_reward()
        decision, source = self._choose(agent, observation)
        self._record(
            Experience(
                episode=self.episodes_completed,
                observation=observation,
                action_class=decision.action_class,
                delay_parameter=decision.delay_parameter,
                reward=reward,
                done=False,
                source=source,
            )
        )
        self._pending_agent = None
        agent.on_action_received(decision)

    def end_episode(self, agent: DecisionAgent) -> None:
        if self._pending_agent is not None:
            raise ProtocolError(
                "end_episode called with a decision request outstanding",
                current_state="requested",
                expected_state="idle",
            )
        self._record(
            Experience(
                episode=self.episodes_completed,
                observation=agent.collect_observation(),
                action_class=None,
                delay_parameter=None,
                reward=agent.consume_reward(),
                done=True,
                source=ExperienceSource.TERMINAL,
            )
        )
        self.episodes_completed += 1
        logger.debug("Backend closed episode %d", self.episodes_completed)

    def _choose(self, agent: DecisionAgent, observation: Observation):
        if agent.control_mode is ControlMode.AUTONOMOUS:
            if self.policy is not None:
                return self.policy.select_action(observation), ExperienceSource.POLICY
            return agent.heuristic_output(), ExperienceSource.HEURISTIC
        if getattr(agent, "phase", None) is SchedulerPhase.REPLAYING:
            return agent.heuristic_output(), ExperienceSource.DEMONSTRATION
        return agent.heuristic_output(), ExperienceSource.HEURISTIC

    def _record(self, experience: Experience) -> None:
        self.experiences.append(experience)
        if self.on_experience is not None:
            self.on_experience(experience)

    # Queries ----------------------------------------------------------------

    def episode_experiences(self, episode: int) -> List[Experience]:
        return [e for e in self.experiences if e.episode == episode]

    def total_reward(self, episode: Optional[int] = None) -> float:
        pool = self.experiences if episode is None else self.episode_experiences(episode)
        return float(sum(e.reward for e in pool))

    def clear(self) -> None:
        self.experiences.clear()
        self.episodes_completed = 0
        self.requests = 0
        self._pending_agent = None
