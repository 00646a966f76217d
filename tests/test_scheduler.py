"""
DecisionScheduler: autonomous decision cadence, reward accounting, timeout,
goal triggers and the request/advance/acknowledge handshake.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from hallway_nav_sim.backends import ExperienceSource, InProcessBackend
from hallway_nav_sim.core.enums import (
    ActionClass,
    ControlMode,
    IndicatorState,
    SchedulerPhase,
    TerminationReason,
)
from hallway_nav_sim.core.types import Decision
from hallway_nav_sim.policies import ConstantPolicy
from hallway_nav_sim.rewards import StepCostReward
from hallway_nav_sim.utils.exceptions import ProtocolError, StateError, ValidationError
from tests.conftest import RecordingProtocol, StaticWorld, make_scheduler, run_until_done
from tests.strategies import delay_parameters


class TestAutonomousScenario:
    def test_typical_delay_gives_twenty_decisions_in_ten_seconds(self, forward_policy):
        backend = InProcessBackend(policy=forward_policy)
        scheduler = make_scheduler(protocol=backend, max_episode_duration=10.0)
        scheduler.begin_episode(desired_outcome=True)

        ticks = run_until_done(scheduler)

        assert ticks == 500
        assert scheduler.decision_count == 20
        assert scheduler.termination_reason is TerminationReason.TIMEOUT
        step_costs = -20 * 0.1 - (10 / 0.02) * 0.01
        assert scheduler.cumulative_reward == pytest.approx(step_costs - 1.0)

    def test_decisions_land_every_twenty_five_ticks(self, forward_policy):
        scheduler = make_scheduler(policy=forward_policy)
        scheduler.begin_episode()
        decision_ticks = []
        for tick in range(1, 101):
            before = scheduler.decision_count
            scheduler.fixed_tick()
            if scheduler.decision_count > before:
                decision_ticks.append(tick)
        assert decision_ticks == [1, 26, 51, 76]

    def test_backend_sees_every_decision_and_the_whole_reward(self, forward_policy):
        backend = InProcessBackend(policy=forward_policy)
        scheduler = make_scheduler(protocol=backend, max_episode_duration=2.0)
        scheduler.begin_episode()
        run_until_done(scheduler)

        sources = [e.source for e in backend.experiences]
        assert sources == [ExperienceSource.POLICY] * 4 + [ExperienceSource.TERMINAL]
        assert backend.total_reward() == pytest.approx(scheduler.cumulative_reward)
        assert backend.experiences[-1].done

    def test_policy_action_drives_locomotion(self):
        policy = ConstantPolicy(ActionClass.TURN_LEFT, -1.0)
        scheduler = make_scheduler(policy=policy)
        scheduler.begin_episode()
        for _ in range(20):
            scheduler.fixed_tick()
        assert set(scheduler.world.classes) == {ActionClass.TURN_LEFT}
        # short delay of 0.2 s: ticks 1, 11
        assert scheduler.decision_count == 2


class TestRewardAccounting:
    @given(
        ticks=st.integers(min_value=1, max_value=300),
        parameter=delay_parameters,
    )
    @settings(max_examples=40, deadline=None)
    def test_cumulative_reward_is_tick_and_decision_costs(self, ticks, parameter):
        scheduler = make_scheduler(
            policy=ConstantPolicy(ActionClass.IDLE, parameter),
            max_episode_duration=100.0,
        )
        scheduler.begin_episode()
        for _ in range(ticks):
            scheduler.fixed_tick()

        expected = -ticks * 0.01 - scheduler.decision_count * 0.1
        assert scheduler.cumulative_reward == pytest.approx(expected)

    def test_timeout_penalty_applied_exactly_once(self):
        rewards = StepCostReward(tick_cost=0.0, decision_cost=0.0, timeout_penalty=1.0)
        scheduler = make_scheduler(
            policy=ConstantPolicy(), rewards=rewards, max_episode_duration=1.0
        )
        scheduler.begin_episode()
        run_until_done(scheduler)

        assert scheduler.cumulative_reward == pytest.approx(-1.0)
        with pytest.raises(StateError):
            scheduler.fixed_tick()
        assert scheduler.cumulative_reward == pytest.approx(-1.0)

    def test_wall_contact_costs_per_second(self):
        rewards = StepCostReward(
            tick_cost=0.0, decision_cost=0.0, wall_contact_penalty=0.05
        )
        scheduler = make_scheduler(
            world=StaticWorld(wall_contact=True),
            policy=ConstantPolicy(),
            rewards=rewards,
        )
        scheduler.begin_episode()
        for _ in range(10):
            scheduler.fixed_tick()
        assert scheduler.cumulative_reward == pytest.approx(-0.05 * 0.02 * 10)

    def test_negative_costs_rejected(self):
        with pytest.raises(ValidationError):
            StepCostReward(tick_cost=-0.01)


class TestGoalTrigger:
    @pytest.mark.parametrize(
        "pad_value, desired, reason",
        [
            (1.0, True, TerminationReason.GOAL),
            (-1.0, False, TerminationReason.GOAL),
            (-1.0, True, TerminationReason.WRONG_TARGET),
            (1.0, False, TerminationReason.WRONG_TARGET),
        ],
    )
    def test_pad_symbol_against_desired_outcome(self, pad_value, desired, reason):
        scheduler = make_scheduler(
            world=StaticWorld(trigger_at=5, trigger_value=pad_value),
            policy=ConstantPolicy(),
        )
        scheduler.begin_episode(desired_outcome=desired)
        ticks = run_until_done(scheduler)

        assert ticks == 5
        assert scheduler.termination_reason is reason

    def test_outcome_reward_and_indicator(self):
        rewards = StepCostReward(
            tick_cost=0.0, decision_cost=0.0, goal_reward=1.0, wrong_target_reward=-1.0
        )
        scheduler = make_scheduler(
            world=StaticWorld(trigger_at=3, trigger_value=1.0),
            policy=ConstantPolicy(),
            rewards=rewards,
        )
        scheduler.begin_episode(desired_outcome=True)
        run_until_done(scheduler)

        assert scheduler.cumulative_reward == pytest.approx(1.0)
        assert scheduler.indicator.state is IndicatorState.GOAL
        scheduler.frame_tick(0.6)
        assert scheduler.indicator.state is IndicatorState.DEFAULT

    def test_outcome_reward_disabled_by_default(self):
        rewards = StepCostReward(tick_cost=0.0, decision_cost=0.0)
        scheduler = make_scheduler(
            world=StaticWorld(trigger_at=2, trigger_value=-1.0),
            policy=ConstantPolicy(),
            rewards=rewards,
        )
        scheduler.begin_episode(desired_outcome=True)
        run_until_done(scheduler)
        assert scheduler.cumulative_reward == 0.0
        assert scheduler.indicator.state is IndicatorState.FAIL

    def test_trigger_ignored_once_terminated(self):
        scheduler = make_scheduler(policy=ConstantPolicy(), max_episode_duration=0.1)
        scheduler.begin_episode()
        run_until_done(scheduler)
        reward = scheduler.cumulative_reward

        scheduler.on_goal_triggered(True)

        assert scheduler.termination_reason is TerminationReason.TIMEOUT
        assert scheduler.cumulative_reward == reward


class TestHandshake:
    def test_deferred_acknowledgement_completes_the_tick(self):
        protocol = RecordingProtocol()
        scheduler = make_scheduler(protocol=protocol)
        scheduler.begin_episode()

        phase = scheduler.fixed_tick()

        assert phase is SchedulerPhase.DECIDING
        assert protocol.calls == ["request", "advance"]
        assert scheduler.world.steps == 0
        with pytest.raises(ProtocolError):
            scheduler.fixed_tick()

        scheduler.on_action_received(Decision(ActionClass.FORWARD, 0.0))

        assert scheduler.phase is SchedulerPhase.COMMITTED
        assert scheduler.world.classes == [ActionClass.FORWARD]
        assert scheduler.cumulative_reward == pytest.approx(-0.1 - 0.01)

    def test_unsolicited_acknowledgement_rejected(self, autonomous_scheduler):
        autonomous_scheduler.begin_episode()
        with pytest.raises(ProtocolError):
            autonomous_scheduler.on_action_received(Decision(ActionClass.IDLE))

    def test_interactive_scheduler_never_requests_live(self):
        backend = InProcessBackend()
        scheduler = make_scheduler(ControlMode.INTERACTIVE, protocol=backend)
        scheduler.begin_episode()
        for _ in range(200):
            scheduler.fixed_tick()
        assert backend.requests == 0

    def test_tick_before_begin_episode(self, autonomous_scheduler):
        with pytest.raises(StateError):
            autonomous_scheduler.fixed_tick()


class TestEpisodeLifecycle:
    def test_begin_episode_resets_counters(self, autonomous_scheduler):
        scheduler = autonomous_scheduler
        scheduler.begin_episode()
        run_until_done(scheduler)

        scheduler.begin_episode()

        assert scheduler.phase is SchedulerPhase.IDLE
        assert scheduler.cumulative_reward == 0.0
        assert scheduler.decision_count == 0
        assert scheduler.tick_count == 0
        assert scheduler.episode_index == 2
        assert scheduler.termination_reason is None

    def test_abandoning_a_running_episode_is_allowed(self, autonomous_scheduler):
        scheduler = autonomous_scheduler
        scheduler.begin_episode()
        for _ in range(30):
            scheduler.fixed_tick()
        scheduler.begin_episode(desired_outcome=False)
        assert scheduler.phase is SchedulerPhase.IDLE
        assert scheduler.clock.time_since_episode_begin == 0.0

    def test_desired_outcome_without_randomizer_defaults_false(self, autonomous_scheduler):
        autonomous_scheduler.begin_episode()
        assert autonomous_scheduler.desired_outcome is False

    @pytest.mark.parametrize("kwargs", [{"fixed_dt": 0.0}, {"frame_dt": -1.0}])
    def test_invalid_tick_lengths(self, kwargs):
        with pytest.raises(ValidationError):
            make_scheduler(**kwargs)
