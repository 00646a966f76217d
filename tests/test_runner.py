"""Episode runner driving frame and fixed ticks."""

import pytest

from hallway_nav_sim.actions import ScriptedOperator
from hallway_nav_sim.backends import InProcessBackend
from hallway_nav_sim.config import (
    EpisodeConfig,
    HallwayConfig,
    HallwayLayoutConfig,
    create_scheduler,
)
from hallway_nav_sim.core.enums import ActionClass, SchedulerPhase
from hallway_nav_sim.policies import ConstantPolicy, RandomPolicy
from hallway_nav_sim.runner import TickEvent, run_episode, stream


def short_config(mode: str = "autonomous", randomize: bool = False) -> HallwayConfig:
    return HallwayConfig(
        episode=EpisodeConfig(mode=mode, max_duration=2.0),
        layout=HallwayLayoutConfig(randomize=randomize),
    )


def test_idle_episode_times_out():
    scheduler = create_scheduler(
        short_config(), policy=ConstantPolicy(ActionClass.IDLE, 0.0)
    )
    result = run_episode(scheduler, seed=0)

    assert result.ticks == 100
    assert result.decisions == 4
    assert result.truncated and not result.terminated
    assert result.termination_reason == "timeout"
    # ticks, decisions, timeout penalty
    assert result.total_reward == pytest.approx(-1.0 - 0.4 - 1.0)
    assert result.metrics["elapsed"] == pytest.approx(2.0)
    assert 119 <= result.frames <= 121


def test_backend_sees_whole_reward():
    backend = InProcessBackend(policy=ConstantPolicy(ActionClass.FORWARD, -1.0))
    scheduler = create_scheduler(short_config(), protocol=backend)
    result = run_episode(scheduler, seed=0)
    assert backend.total_reward() == pytest.approx(result.total_reward)
    assert backend.episodes_completed == 1


def test_same_seed_same_result():
    def run():
        scheduler = create_scheduler(
            short_config(randomize=True), policy=RandomPolicy(seed=5)
        )
        return run_episode(scheduler, seed=3)

    first, second = run(), run()
    assert first.total_reward == second.total_reward
    assert first.decisions == second.decisions
    assert first.desired_outcome == second.desired_outcome


def test_stream_events():
    scheduler = create_scheduler(short_config(), policy=ConstantPolicy())
    seen = []
    events = list(stream(scheduler, seed=0, on_tick=seen.append))

    assert events == seen
    assert all(isinstance(e, TickEvent) for e in events)
    assert [e.t for e in events] == list(range(len(events)))
    assert events[0].decisions == 1
    assert events[-1].done
    assert events[-1].phase is SchedulerPhase.TERMINATED
    assert sum(e.reward for e in events) == pytest.approx(scheduler.cumulative_reward)


def test_tick_cap_truncates():
    scheduler = create_scheduler(short_config(), policy=ConstantPolicy())
    result = run_episode(scheduler, seed=0, max_ticks=10)
    assert result.ticks == 10
    assert result.truncated
    assert result.termination_reason is None


def test_episode_end_callback():
    scheduler = create_scheduler(short_config(), policy=ConstantPolicy())
    results = []
    result = run_episode(scheduler, seed=0, on_episode_end=results.append)
    assert results == [result]


def test_interactive_episode_is_replayed():
    backend = InProcessBackend()
    scheduler = create_scheduler(short_config(mode="interactive"), protocol=backend)
    operator = ScriptedOperator([(0.5, {"w"}), (1.0, set())])

    result = run_episode(scheduler, operator, seed=0)

    assert result.decisions >= 1
    assert result.replayed_steps == result.decisions - 1
    assert backend.total_reward() == pytest.approx(result.total_reward)
