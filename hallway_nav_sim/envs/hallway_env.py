"""
Gymnasium environment exposing the autonomous decision loop.

One ``step()`` is one decision: the action acknowledges the outstanding
decision request, then fixed ticks run until the scheduler requests the next
decision or the episode ends. The chosen delay parameter therefore controls
how much simulated time a step covers.

State Machine:
    CREATED --reset()--> READY --step()--> {READY, TERMINATED, TRUNCATED}
    {TERMINATED, TRUNCATED} --reset()--> READY
    * --close()--> CLOSED
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np

from ..actions.autonomous import AutonomousActionSource
from ..agent.scheduler import DecisionScheduler
from ..core.constants import (
    DEFAULT_FIXED_DT,
    DEFAULT_MAX_EPISODE_DURATION,
    DEFAULT_MAX_ENTITIES,
    OBSERVATION_DTYPE,
)
from ..core.delay_mapping import DEFAULT_DELAY_PROFILE, DelayProfile
from ..core.enums import ActionClass, SchedulerPhase, TerminationReason
from ..core.types import Decision, Observation
from .state import EnvironmentState
from ..interfaces.protocol import DecisionAgent
from ..observations.builder import ObservationBuilder
from ..rewards.step_costs import StepCostReward
from ..utils.exceptions import ProtocolError, StateError, ValidationError
from ..world.hallway import HallwayRandomizer, HallwayWorld

__all__ = ["HallwayCueEnv", "DecisionBridge"]

logger = logging.getLogger(__name__)


class DecisionBridge:
    """DecisionProtocol that defers the answer to the next ``step()``.

    ``advance_step`` leaves the request unacknowledged; the environment
    captures the observation once the tick has stopped at the request and
    acknowledges on the following ``step()``.
    """

    def __init__(self):
        self.observation: Optional[Observation] = None
        self.awaiting_action = False
        self.ended = False
        self._requested = False

    def reset(self) -> None:
        self.observation = None
        self.awaiting_action = False
        self.ended = False
        self._requested = False

    def request_decision(self, agent: DecisionAgent) -> None:
        if self._requested or self.awaiting_action:
            raise ProtocolError(
                "request_decision called while a decision is outstanding",
                current_state="requested",
                expected_state="idle",
            )
        self._requested = True

    def advance_step(self) -> None:
        if not self._requested:
            raise ProtocolError(
                "advance_step called without a pending request",
                current_state="idle",
                expected_state="requested",
            )
        self._requested = False
        self.awaiting_action = True

    def capture(self, agent: DecisionAgent) -> None:
        self.observation = agent.collect_observation()

    def end_episode(self, agent: DecisionAgent) -> None:
        self.observation = agent.collect_observation()
        self.ended = True


class HallwayCueEnv(gym.Env):
    """
    Cue-association hallway task with self-paced decisions.

    Action Space:
        Dict(action_class=Discrete(4), delay=Box(-1, 1, (1,)))
        Classes: 0=IDLE, 1=FORWARD, 2=TURN_RIGHT, 3=TURN_LEFT. The delay
        parameter is decoded to seconds through the delay profile; values
        outside [-1, 1] are clamped.

    Observation Space:
        Dict(scalars=Box(7), entities=Box(C, 4), entity_mask=MultiBinary(C))

    Episode End:
        terminated: a target pad was reached (info["outcome_matches"])
        truncated: the episode duration elapsed

    Scene:
        randomize_scene=False keeps the world layout fixed; the desired
        outcome then defaults to False unless given in reset options.

    Reset options:
        desired_outcome: bool, overrides the scene randomiser's outcome
    """

    metadata = {"render_modes": ["ansi"]}

    def __init__(
        self,
        *,
        world: Optional[HallwayWorld] = None,
        randomizer: Optional[HallwayRandomizer] = None,
        observation_builder: Optional[ObservationBuilder] = None,
        rewards: Optional[StepCostReward] = None,
        delay_profile: DelayProfile = DEFAULT_DELAY_PROFILE,
        max_episode_duration: float = DEFAULT_MAX_EPISODE_DURATION,
        fixed_dt: float = DEFAULT_FIXED_DT,
        max_entities: int = DEFAULT_MAX_ENTITIES,
        render_mode: Optional[str] = None,
        randomize_scene: bool = True,
    ):
        super().__init__()
        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValidationError(
                f"Unsupported render_mode {render_mode!r}",
                parameter_name="render_mode",
                parameter_value=render_mode,
            )
        self.render_mode = render_mode
        self.world = world or HallwayWorld()
        self.observation_builder = observation_builder or ObservationBuilder(
            run_speed=self.world.run_speed, max_entities=max_entities
        )
        self.bridge = DecisionBridge()
        self.action_source = AutonomousActionSource(delay_profile)
        self.scheduler = DecisionScheduler(
            world=self.world,
            action_source=self.action_source,
            protocol=self.bridge,
            observation_builder=self.observation_builder,
            rewards=rewards,
            randomizer=(randomizer or HallwayRandomizer()) if randomize_scene else None,
            max_episode_duration=max_episode_duration,
            fixed_dt=fixed_dt,
        )

        self.action_space = gym.spaces.Dict(
            {
                "action_class": gym.spaces.Discrete(len(ActionClass)),
                "delay": gym.spaces.Box(
                    low=-1.0, high=1.0, shape=(1,), dtype=OBSERVATION_DTYPE
                ),
            }
        )
        self.observation_space = self.observation_builder.observation_space

        self._state = EnvironmentState.CREATED
        self._step_count = 0
        self._episode_count = 0
        logger.info(
            "HallwayCueEnv initialized: max_duration=%.2fs fixed_dt=%.3fs capacity=%d",
            max_episode_duration,
            fixed_dt,
            self.observation_builder.max_entities,
        )

    # ------------------------------------------------------------------ #
    # Gymnasium API
    # ------------------------------------------------------------------ #

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[dict] = None
    ) -> tuple[Any, dict]:
        if self._state is EnvironmentState.CLOSED:
            raise StateError("Cannot reset closed environment")
        super().reset(seed=seed)
        options = options or {}

        self.bridge.reset()
        self.scheduler.np_random = self.np_random
        self.scheduler.begin_episode(desired_outcome=options.get("desired_outcome"))
        self._step_count = 0
        self._episode_count += 1
        self._state = EnvironmentState.READY

        self._run_until_decision()
        # cost of the opening decision has no preceding action to charge
        opening_reward = self.scheduler.consume_reward()

        info = self._build_info()
        info["opening_reward"] = opening_reward
        logger.debug(
            "Episode %d reset (desired_outcome=%s)",
            self._episode_count,
            self.scheduler.desired_outcome,
        )
        return self._current_observation(), info

    def step(self, action: Any) -> tuple[Any, float, bool, bool, dict]:
        self._ensure_ready_for_step()
        decision = self._to_decision(action)

        self.bridge.awaiting_action = False
        self.scheduler.on_action_received(decision)
        self._run_until_decision()
        self._step_count += 1

        reward = float(self.scheduler.consume_reward())
        reason = self.scheduler.termination_reason
        terminated = reason in (TerminationReason.GOAL, TerminationReason.WRONG_TARGET)
        truncated = reason is TerminationReason.TIMEOUT
        if terminated:
            self._state = EnvironmentState.TERMINATED
        elif truncated:
            self._state = EnvironmentState.TRUNCATED

        info = self._build_info()
        if terminated:
            info["outcome_matches"] = reason is TerminationReason.GOAL
        return self._current_observation(), reward, terminated, truncated, info

    def render(self) -> Optional[str]:
        if self.render_mode != "ansi":
            return None
        pose = self.world.pose
        return (
            f"t={self.scheduler.clock.time_since_episode_begin:6.2f}s "
            f"pos=({pose.position.x:6.2f}, {pose.position.z:6.2f}) "
            f"yaw={pose.yaw:6.1f} action={self.action_source.locomotion_class.name} "
            f"reward={self.scheduler.cumulative_reward:7.3f}"
        )

    def close(self) -> None:
        if self._state is EnvironmentState.CLOSED:
            return
        self._state = EnvironmentState.CLOSED
        logger.info("HallwayCueEnv closed after %d episodes", self._episode_count)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _ensure_ready_for_step(self) -> None:
        if self._state is EnvironmentState.CREATED:
            raise StateError("Must call reset() before step()")
        if self._state is EnvironmentState.CLOSED:
            raise StateError("Cannot step closed environment")
        if self._state is not EnvironmentState.READY:
            raise StateError("Environment must be in READY state to step; call reset()")

    def _run_until_decision(self) -> None:
        scheduler = self.scheduler
        while not scheduler.is_done and scheduler.phase is not SchedulerPhase.DECIDING:
            scheduler.fixed_tick()
        if scheduler.phase is SchedulerPhase.DECIDING:
            self.bridge.capture(scheduler)

    def _current_observation(self) -> Dict[str, np.ndarray]:
        observation = self.bridge.observation
        if observation is None:
            observation = self.scheduler.get_current_observation()
        arrays = self.observation_builder.to_arrays(observation)
        np.clip(arrays["entities"], -1.0, 1.0, out=arrays["entities"])
        return arrays

    @staticmethod
    def _to_decision(action: Any) -> Decision:
        if isinstance(action, Decision):
            return action
        try:
            if isinstance(action, dict):
                action_class = int(np.asarray(action["action_class"]).reshape(-1)[0])
                delay = float(np.asarray(action.get("delay", 0.0)).reshape(-1)[0])
            else:
                action_class, delay = action
                action_class = int(np.asarray(action_class).reshape(-1)[0])
                delay = float(np.asarray(delay).reshape(-1)[0])
        except (KeyError, TypeError, ValueError, IndexError) as exc:
            raise ValidationError(
                f"Invalid action: {action!r}",
                parameter_name="action",
                parameter_value=action,
            ) from exc
        return Decision(action_class, delay)

    def _build_info(self) -> Dict[str, Any]:
        scheduler = self.scheduler
        reason = scheduler.termination_reason
        return {
            "step_count": self._step_count,
            "episode": self._episode_count,
            "elapsed": scheduler.clock.time_since_episode_begin,
            "ticks": scheduler.tick_count,
            "decisions": scheduler.decision_count,
            "delay": self.action_source.current.delay,
            "desired_outcome": scheduler.desired_outcome,
            "termination_reason": reason.value if reason is not None else None,
            "cumulative_reward": scheduler.cumulative_reward,
        }
