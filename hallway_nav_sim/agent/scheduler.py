"""
DecisionScheduler: the variable-latency decision loop.

Each fixed tick runs, strictly in order:

    1. capture the window observation (interactive, first tick of a window)
    2. advance the clock
    3. timeout check (tick cost + timeout penalty, then episode end)
    4. due check and commit (decision cost; interactive steps are recorded)
    5. tick cost and locomotion through the world model

Each frame tick samples operator keys (interactive) and advances the outcome
indicator timer. Both callbacks run in the same single-threaded host loop and
share the clock, the staged action and the trajectory buffer.

In autonomous mode a commit is a handshake with the decision protocol: the
scheduler enters DECIDING, calls ``request_decision`` then ``advance_step``
and waits for ``on_action_received``. A backend that acknowledges inside
``advance_step`` completes the tick immediately; one that acknowledges later
(the gymnasium bridge) completes it from ``on_action_received``. Until then
the scheduler refuses further ticks.

At episode end in interactive mode the recorded trajectory is replayed
through the same protocol before the episode terminates.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from hallway_nav_sim.actions.autonomous import AutonomousActionSource
from hallway_nav_sim.actions.base import ActionSource
from hallway_nav_sim.actions.interactive import InteractiveActionSource
from hallway_nav_sim.core.clock import DecisionClock
from hallway_nav_sim.core.constants import (
    DEFAULT_FIXED_DT,
    DEFAULT_FRAME_DT,
    DEFAULT_MAX_EPISODE_DURATION,
)
from hallway_nav_sim.core.enums import ControlMode, SchedulerPhase, TerminationReason
from hallway_nav_sim.core.types import Decision, KeyState, Observation
from hallway_nav_sim.interfaces.protocol import DecisionProtocol
from hallway_nav_sim.interfaces.world import SceneRandomizer, WorldModel
from hallway_nav_sim.observations.builder import ObservationBuilder
from hallway_nav_sim.rewards.step_costs import StepCostReward
from hallway_nav_sim.trajectory.buffer import TrajectoryBuffer
from hallway_nav_sim.trajectory.replay import ReplayDriver
from hallway_nav_sim.utils.exceptions import (
    ProtocolError,
    ReplayInterruptedError,
    StateError,
    ValidationError,
)

from .indicator import OutcomeIndicator

logger = logging.getLogger(__name__)

__all__ = ["DecisionScheduler"]


class DecisionScheduler:
    """Orchestrates clock, action source, rewards, recording and replay.

    Args:
        world: Physics/trigger collaborator.
        action_source: Interactive or autonomous source; fixes the mode.
        protocol: External training-step protocol.
        observation_builder: Builds observations from world state.
        rewards: Reward terms; defaults to ``StepCostReward()``.
        randomizer: Optional scene randomiser supplying the desired outcome.
        indicator: Optional outcome indicator; one is created if omitted.
        max_episode_duration: Episode time limit in seconds.
        fixed_dt: Fixed tick duration in seconds.
        frame_dt: Default frame tick duration in seconds.
    """

    def __init__(
        self,
        world: WorldModel,
        action_source: ActionSource,
        protocol: DecisionProtocol,
        observation_builder: Optional[ObservationBuilder] = None,
        rewards: Optional[StepCostReward] = None,
        randomizer: Optional[SceneRandomizer] = None,
        indicator: Optional[OutcomeIndicator] = None,
        max_episode_duration: float = DEFAULT_MAX_EPISODE_DURATION,
        fixed_dt: float = DEFAULT_FIXED_DT,
        frame_dt: float = DEFAULT_FRAME_DT,
    ):
        if fixed_dt <= 0:
            raise ValidationError(
                f"fixed_dt must be positive, got {fixed_dt}",
                parameter_name="fixed_dt",
                parameter_value=fixed_dt,
            )
        if frame_dt <= 0:
            raise ValidationError(
                f"frame_dt must be positive, got {frame_dt}",
                parameter_name="frame_dt",
                parameter_value=frame_dt,
            )
        self.world = world
        self.action_source = action_source
        self.protocol = protocol
        self.observation_builder = observation_builder or ObservationBuilder()
        self.rewards = rewards or StepCostReward()
        self.randomizer = randomizer
        self.indicator = indicator or OutcomeIndicator()
        self.fixed_dt = float(fixed_dt)
        self.frame_dt = float(frame_dt)

        self.clock = DecisionClock(max_episode_duration)
        self.buffer = TrajectoryBuffer()
        self.replay_driver = ReplayDriver(protocol)
        self.np_random = np.random.default_rng()

        self._phase = SchedulerPhase.TERMINATED
        self.episode_index = 0
        self.desired_outcome = False
        self.termination_reason: Optional[TerminationReason] = None
        self.cumulative_reward = 0.0
        self.decision_count = 0
        self.tick_count = 0
        self.frame_count = 0
        self.replayed_steps = 0
        self.replay_acks = 0
        self._pending_reward = 0.0
        self._window_observation: Optional[Observation] = None
        self._deferred_dt: Optional[float] = None
        self._in_tick = False
        self._consumed_step = None

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def phase(self) -> SchedulerPhase:
        return self._phase

    @property
    def control_mode(self) -> ControlMode:
        return self.action_source.mode

    @property
    def is_interactive(self) -> bool:
        return self.action_source.mode is ControlMode.INTERACTIVE

    @property
    def is_done(self) -> bool:
        return self._phase is SchedulerPhase.TERMINATED

    @property
    def pending_reward(self) -> float:
        """Reward accrued but not yet consumed or recorded."""
        return self._pending_reward

    # ------------------------------------------------------------------ #
    # Episode lifecycle
    # ------------------------------------------------------------------ #

    def begin_episode(
        self, desired_outcome: Optional[bool] = None, seed: Optional[int] = None
    ) -> None:
        """Start a new episode.

        ``desired_outcome`` overrides the randomiser when given. Raises
        ReplayInterruptedError while a recorded trajectory is being replayed.
        """
        if self._phase is SchedulerPhase.REPLAYING:
            error = ReplayInterruptedError(
                "Episode reset requested while replaying a recorded trajectory",
                remaining_steps=len(self.buffer),
            )
            error.log_error(logger)
            raise error
        if self._phase not in (SchedulerPhase.TERMINATED, SchedulerPhase.IDLE):
            logger.info(
                "Abandoning episode %d in phase %s",
                self.episode_index,
                self._phase.value,
            )

        if seed is not None:
            self.np_random = np.random.default_rng(seed)

        self.clock.reset()
        self.buffer.clear()
        self.action_source.reset()
        self._pending_reward = 0.0
        self._window_observation = None
        self._deferred_dt = None
        self._consumed_step = None
        self.cumulative_reward = 0.0
        self.decision_count = 0
        self.tick_count = 0
        self.frame_count = 0
        self.replayed_steps = 0
        self.replay_acks = 0
        self.termination_reason = None

        self.world.reset()
        if desired_outcome is not None:
            self.desired_outcome = bool(desired_outcome)
        elif self.randomizer is not None:
            self.desired_outcome = bool(
                self.randomizer.randomize(self.world, self.np_random)
            )
        else:
            self.desired_outcome = False

        self.episode_index += 1
        self._phase = SchedulerPhase.IDLE
        logger.info(
            "Episode %d began (mode=%s, desired_outcome=%s)",
            self.episode_index,
            self.control_mode.value,
            self.desired_outcome,
        )

    def fixed_tick(self, dt: Optional[float] = None) -> SchedulerPhase:
        """Run one fixed-rate tick and return the resulting phase."""
        dt = self.fixed_dt if dt is None else float(dt)
        self._ensure_can_tick()

        if self._phase is SchedulerPhase.IDLE:
            self._phase = SchedulerPhase.AWAITING_DECISION

        if self.is_interactive and self.clock.at_window_start:
            self._window_observation = self.get_current_observation()

        self.clock.advance(dt)
        self.tick_count += 1

        if self.clock.is_episode_timed_out():
            self._accrue(self.rewards.tick_reward())
            self._accrue(self.rewards.timeout_reward())
            logger.info(
                "Episode %d timed out after %.3fs",
                self.episode_index,
                self.clock.time_since_episode_begin,
            )
            self._terminate(TerminationReason.TIMEOUT)
            return self._phase

        committed = False
        if self.action_source.decision_due(self.clock):
            if self.is_interactive:
                self._commit_interactive()
            else:
                self._request_decision(dt)
                if self._phase is SchedulerPhase.DECIDING:
                    return self._phase
            committed = True

        self._interact(dt)
        if self._phase in (SchedulerPhase.AWAITING_DECISION, SchedulerPhase.COMMITTED):
            self._phase = (
                SchedulerPhase.COMMITTED if committed else SchedulerPhase.AWAITING_DECISION
            )
        return self._phase

    def frame_tick(
        self, frame_dt: Optional[float] = None, keys: Optional[KeyState] = None
    ) -> None:
        """Sample operator input and advance cosmetic timers."""
        frame_dt = self.frame_dt if frame_dt is None else float(frame_dt)
        self.frame_count += 1
        self.indicator.update(frame_dt)
        if (
            keys is not None
            and isinstance(self.action_source, InteractiveActionSource)
            and self._phase.is_live()
        ):
            self.action_source.sample(keys, self.clock.time_since_last_decision)

    def on_goal_triggered(self, outcome_matches: bool) -> None:
        """External trigger: the agent reached a target."""
        if not self._phase.is_live():
            logger.debug("Ignoring goal trigger in phase %s", self._phase.value)
            return
        self.indicator.flash(outcome_matches)
        self._accrue(self.rewards.outcome_reward(outcome_matches))
        reason = (
            TerminationReason.GOAL if outcome_matches else TerminationReason.WRONG_TARGET
        )
        logger.info("Episode %d reached a target (%s)", self.episode_index, reason.value)
        self._terminate(reason)

    # ------------------------------------------------------------------ #
    # Agent surface read by the decision protocol
    # ------------------------------------------------------------------ #

    def get_current_observation(self) -> Observation:
        """Live observation assembled from the world state."""
        return self.observation_builder.build(
            self.world.pose,
            self.world.velocity,
            self.world.angular_velocity,
            self.world.entities(),
            self.clock.progress,
        )

    def collect_observation(self) -> Observation:
        if self._phase is SchedulerPhase.REPLAYING and self.buffer:
            return self.buffer.front().observation
        return self.get_current_observation()

    def heuristic_output(self) -> Decision:
        """Decision the operator made; the recorded one during replay."""
        if self._phase is SchedulerPhase.REPLAYING and self.buffer:
            step = self.buffer.front()
            return Decision(
                step.action.class_index,
                self.action_source.delay_profile.encode(step.action.delay),
            )
        if isinstance(self.action_source, InteractiveActionSource):
            return self.action_source.heuristic_decision()
        return self.action_source.last_decision

    def consume_reward(self) -> float:
        """Return and clear the reward owed for the current protocol step.

        During replay this is the front step's recorded reward; the final
        retained step also carries everything accrued after the last commit.
        """
        if self._phase is not SchedulerPhase.REPLAYING:
            reward, self._pending_reward = self._pending_reward, 0.0
            return reward

        reward = 0.0
        step = self.buffer.front()
        if step is not None and step is not self._consumed_step:
            reward += step.reward
            self._consumed_step = step
        if len(self.buffer) <= 1:
            reward += self._pending_reward
            self._pending_reward = 0.0
        return reward

    def on_action_received(self, decision: Decision) -> None:
        """Acknowledge the decision for the outstanding request."""
        if self._phase is SchedulerPhase.REPLAYING:
            self.replay_acks += 1
            return
        if self._phase is not SchedulerPhase.DECIDING or not isinstance(
            self.action_source, AutonomousActionSource
        ):
            raise ProtocolError(
                "Received a decision with no outstanding request",
                current_state=self._phase.value,
                expected_state=SchedulerPhase.DECIDING.value,
            )

        self.action_source.apply_decision(decision)
        self._phase = SchedulerPhase.COMMITTED
        dt, self._deferred_dt = self._deferred_dt, None
        if not self._in_tick and dt is not None:
            # acknowledged outside fixed_tick: finish the deferred tick here
            self._interact(dt)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _ensure_can_tick(self) -> None:
        if self._phase is SchedulerPhase.DECIDING:
            raise ProtocolError(
                "Cannot tick while a decision acknowledgement is outstanding",
                current_state=self._phase.value,
                expected_state=SchedulerPhase.COMMITTED.value,
            )
        if self._phase in (SchedulerPhase.REPLAYING, SchedulerPhase.TERMINATED):
            raise StateError(
                "Episode is not running; call begin_episode() first",
                current_state=self._phase.value,
                expected_state=SchedulerPhase.IDLE.value,
            )

    def _accrue(self, reward: float) -> None:
        self._pending_reward += reward
        self.cumulative_reward += reward

    def _commit_interactive(self) -> None:
        elapsed = self.clock.time_since_last_decision
        action = self.action_source.commit(elapsed)
        self.clock.mark_decision()
        self._accrue(self.rewards.decision_reward())
        window_reward, self._pending_reward = self._pending_reward, 0.0
        observation = self._window_observation
        if observation is None:
            observation = self.get_current_observation()
        self.buffer.append(observation, action, window_reward)
        self.decision_count += 1
        self._phase = SchedulerPhase.COMMITTED
        logger.debug(
            "Recorded step %d: %s for %.3fs (reward %.3f)",
            len(self.buffer),
            action.class_index.name,
            action.delay,
            window_reward,
        )

    def _request_decision(self, dt: float) -> None:
        self.clock.mark_decision()
        self._accrue(self.rewards.decision_reward())
        self.decision_count += 1
        self._phase = SchedulerPhase.DECIDING
        self._deferred_dt = dt
        self._in_tick = True
        try:
            self.protocol.request_decision(self)
            self.protocol.advance_step()
        finally:
            self._in_tick = False

    def _interact(self, dt: float) -> None:
        self._accrue(self.rewards.tick_reward())
        report = self.world.apply_locomotion(self.action_source.locomotion_class, dt)
        if report.wall_contact:
            self._accrue(self.rewards.wall_contact_reward(dt))
        if report.triggered is not None:
            shows_x = (report.triggered.value or 0.0) > 0.0
            self.on_goal_triggered(shows_x == self.desired_outcome)

    def _terminate(self, reason: TerminationReason) -> None:
        self.termination_reason = reason
        if self.is_interactive:
            self._phase = SchedulerPhase.REPLAYING
            self.replayed_steps = self.replay_driver.drain(self.buffer, self)
        else:
            self._phase = SchedulerPhase.TERMINATED
            self.protocol.end_episode(self)
        self._phase = SchedulerPhase.TERMINATED
        logger.info(
            "Episode %d ended (%s): reward=%.3f decisions=%d replayed=%d",
            self.episode_index,
            reason.value,
            self.cumulative_reward,
            self.decision_count,
            self.replayed_steps,
        )

    def __repr__(self) -> str:
        return (
            f"DecisionScheduler(mode={self.control_mode.value}, "
            f"phase={self._phase.value}, episode={self.episode_index})"
        )
