from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from hallway_nav_sim.core.constants import TIME_EPSILON
from hallway_nav_sim.core.enums import ActionClass, SchedulerPhase
from hallway_nav_sim.core.types import KeyState

logger = logging.getLogger(__name__)

InputProvider = Callable[[float], KeyState]


@dataclass
class TickEvent:
    """Per-fixed-tick event emitted by the runner stream.

    Attributes:
        t: Zero-based fixed tick index within the episode
        time: Simulated time after the tick, in seconds
        phase: Scheduler phase after the tick
        reward: Reward accrued during the tick
        decisions: Decisions committed so far in the episode
        action_class: Class driving locomotion after the tick
        done: True once the episode has terminated
    """

    t: int
    time: float
    phase: SchedulerPhase
    reward: float
    decisions: int
    action_class: ActionClass
    done: bool


@dataclass
class EpisodeResult:
    """Summary result of a completed episode run.

    Attributes:
        seed: Seed passed to begin_episode for this run
        ticks: Number of fixed ticks executed
        frames: Number of frame ticks executed
        decisions: Number of committed decisions
        total_reward: Sum of rewards accrued by the scheduler
        terminated: True if a target was reached
        truncated: True if the episode timed out or hit the tick cap
        replayed_steps: Recorded steps submitted through replay (interactive)
        desired_outcome: Outcome the scene asked for
        termination_reason: Reason string, or None when cut by the tick cap
        metrics: Extra per-run numbers
    """

    seed: Optional[int]
    ticks: int
    frames: int
    decisions: int
    total_reward: float
    terminated: bool
    truncated: bool
    replayed_steps: int
    desired_outcome: bool
    termination_reason: Optional[str]
    metrics: dict[str, Any] = field(default_factory=dict)


def _frame_keys(input_provider: Optional[InputProvider], t: float) -> Optional[KeyState]:
    if input_provider is None:
        return None
    return input_provider(t)


def stream(
    scheduler: Any,
    input_provider: Optional[InputProvider] = None,
    *,
    seed: Optional[int] = None,
    desired_outcome: Optional[bool] = None,
    max_ticks: Optional[int] = None,
    on_tick: Optional[Callable[[TickEvent], None]] = None,
) -> Iterator[TickEvent]:
    """Begin an episode and yield one TickEvent per fixed tick until it ends.

    Frame ticks are interleaved by accumulated time: each frame samples input
    at its start time, then every fixed tick whose end falls within the frame
    runs. The first frame therefore samples input before the first fixed tick.
    """
    scheduler.begin_episode(desired_outcome=desired_outcome, seed=seed)
    fixed_dt = scheduler.fixed_dt
    frame_dt = scheduler.frame_dt

    frame_time = 0.0
    fixed_time = 0.0
    t = 0
    last_reward = scheduler.cumulative_reward
    while not scheduler.is_done:
        scheduler.frame_tick(frame_dt, _frame_keys(input_provider, frame_time))
        frame_time += frame_dt

        while (
            not scheduler.is_done
            and fixed_time + fixed_dt <= frame_time + TIME_EPSILON
        ):
            if max_ticks is not None and t >= max_ticks:
                return
            phase = scheduler.fixed_tick()
            fixed_time += fixed_dt
            reward = scheduler.cumulative_reward - last_reward
            last_reward = scheduler.cumulative_reward
            event = TickEvent(
                t=t,
                time=scheduler.clock.time_since_episode_begin,
                phase=phase,
                reward=reward,
                decisions=scheduler.decision_count,
                action_class=scheduler.action_source.locomotion_class,
                done=scheduler.is_done,
            )
            if on_tick is not None:
                on_tick(event)
            yield event
            t += 1


def run_episode(
    scheduler: Any,
    input_provider: Optional[InputProvider] = None,
    *,
    seed: Optional[int] = None,
    desired_outcome: Optional[bool] = None,
    max_ticks: Optional[int] = None,
    on_tick: Optional[Callable[[TickEvent], None]] = None,
    on_episode_end: Optional[Callable[[EpisodeResult], None]] = None,
) -> EpisodeResult:
    """Run a single episode to completion and return summary result.

    Deterministic when given the same (seed, scheduler, input) triplet.
    """
    ticks = 0
    for _ in stream(
        scheduler,
        input_provider,
        seed=seed,
        desired_outcome=desired_outcome,
        max_ticks=max_ticks,
        on_tick=on_tick,
    ):
        ticks += 1

    reason = scheduler.termination_reason
    reason_value = reason.value if reason is not None else None
    result = EpisodeResult(
        seed=seed,
        ticks=ticks,
        frames=scheduler.frame_count,
        decisions=scheduler.decision_count,
        total_reward=float(scheduler.cumulative_reward),
        terminated=reason_value in ("goal", "wrong_target"),
        truncated=reason_value in ("timeout", None),
        replayed_steps=scheduler.replayed_steps,
        desired_outcome=scheduler.desired_outcome,
        termination_reason=reason_value,
        metrics={"elapsed": scheduler.clock.time_since_episode_begin},
    )

    logger.info(
        "Episode finished: ticks=%d decisions=%d reward=%.3f reason=%s",
        ticks,
        result.decisions,
        result.total_reward,
        reason_value,
    )

    if on_episode_end is not None:
        on_episode_end(result)

    return result
