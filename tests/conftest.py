"""
Shared fixtures and fakes for the hallway_nav_sim test suite.

``StaticWorld`` is a WorldModel that never moves the agent, so reward and
timing tests see only the costs they configure. ``RecordingProtocol`` logs
handshake calls and never acknowledges, which exercises the deferred
acknowledgement path.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import pytest

from hallway_nav_sim.actions import AutonomousActionSource, InteractiveActionSource
from hallway_nav_sim.agent import DecisionScheduler
from hallway_nav_sim.backends import InProcessBackend
from hallway_nav_sim.core.enums import ActionClass, ControlMode, EntityKind
from hallway_nav_sim.core.geometry import Pose, Vector2
from hallway_nav_sim.core.types import (
    Decision,
    Observation,
    WorldEntity,
    WorldStepReport,
)
from hallway_nav_sim.policies import ConstantPolicy
from hallway_nav_sim.rewards import StepCostReward


class StaticWorld:
    """WorldModel fake: the agent stays put; contact and triggers are scripted."""

    def __init__(
        self,
        entities: Sequence[WorldEntity] = (),
        trigger_at: Optional[int] = None,
        trigger_value: float = 1.0,
        wall_contact: bool = False,
    ):
        self.pose = Pose(Vector2.zero(), 0.0)
        self.velocity = Vector2.zero()
        self.angular_velocity = 0.0
        self._entities = list(entities)
        self.trigger_at = trigger_at
        self.trigger_value = trigger_value
        self.wall_contact = wall_contact
        self.steps = 0
        self.classes: List[ActionClass] = []

    def reset(self) -> None:
        self.steps = 0
        self.classes = []

    def reset_agent(self, pose: Pose) -> None:
        self.pose = pose

    def apply_locomotion(self, action_class, dt: float) -> WorldStepReport:
        self.steps += 1
        self.classes.append(ActionClass.coerce(action_class))
        triggered = None
        if self.trigger_at is not None and self.steps == self.trigger_at:
            triggered = WorldEntity(
                EntityKind.TARGET, self.trigger_value, Vector2(0.0, 1.0), name="pad"
            )
        return WorldStepReport(wall_contact=self.wall_contact, triggered=triggered)

    def entities(self) -> List[WorldEntity]:
        return list(self._entities)


class RecordingProtocol:
    """DecisionProtocol that records calls and leaves requests unacknowledged."""

    def __init__(self):
        self.calls: List[str] = []
        self.ended = 0

    def request_decision(self, agent) -> None:
        self.calls.append("request")

    def advance_step(self) -> None:
        self.calls.append("advance")

    def end_episode(self, agent) -> None:
        self.calls.append("end")
        self.ended += 1


class FakeAgent:
    """Minimal DecisionAgent with a fixed observation and reward."""

    def __init__(self, reward: float = -0.5, mode: ControlMode = ControlMode.AUTONOMOUS):
        self.control_mode = mode
        self.reward = reward
        self.received: List[Decision] = []

    def collect_observation(self) -> Observation:
        return Observation(scalars=(0.0,) * 7)

    def heuristic_output(self) -> Decision:
        return Decision(ActionClass.TURN_LEFT, 0.25)

    def consume_reward(self) -> float:
        reward, self.reward = self.reward, 0.0
        return reward

    def on_action_received(self, decision: Decision) -> None:
        self.received.append(decision)


def make_scheduler(
    mode: ControlMode = ControlMode.AUTONOMOUS,
    *,
    world=None,
    protocol=None,
    policy=None,
    rewards: Optional[StepCostReward] = None,
    max_episode_duration: float = 10.0,
    **kwargs,
) -> DecisionScheduler:
    """Scheduler over a StaticWorld with an in-process backend by default."""
    if mode is ControlMode.INTERACTIVE:
        source = InteractiveActionSource()
    else:
        source = AutonomousActionSource()
    if protocol is None:
        protocol = InProcessBackend(policy=policy)
    return DecisionScheduler(
        world=world if world is not None else StaticWorld(),
        action_source=source,
        protocol=protocol,
        rewards=rewards,
        max_episode_duration=max_episode_duration,
        **kwargs,
    )


def run_until_done(scheduler: DecisionScheduler, limit: int = 100_000) -> int:
    ticks = 0
    while not scheduler.is_done:
        scheduler.fixed_tick()
        ticks += 1
        assert ticks <= limit, "episode did not end"
    return ticks


@pytest.fixture
def static_world() -> StaticWorld:
    return StaticWorld()


@pytest.fixture
def forward_policy() -> ConstantPolicy:
    return ConstantPolicy(ActionClass.FORWARD, 0.0)


@pytest.fixture
def autonomous_scheduler(forward_policy) -> DecisionScheduler:
    return make_scheduler(ControlMode.AUTONOMOUS, policy=forward_policy)


@pytest.fixture
def interactive_scheduler() -> DecisionScheduler:
    return make_scheduler(ControlMode.INTERACTIVE)
