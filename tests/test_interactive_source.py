"""
Interactive action sourcing: key precedence, staging, window bookkeeping and
the hold-then-release scenario through the scheduler.
"""

import pytest
from hypothesis import given

from hallway_nav_sim.actions import InteractiveActionSource, ScriptedOperator
from hallway_nav_sim.core.enums import ActionClass, ControlMode, SchedulerPhase
from hallway_nav_sim.core.types import NO_KEYS, KeyState, PendingAction
from hallway_nav_sim.utils.exceptions import ValidationError
from tests.conftest import make_scheduler
from tests.strategies import key_state_strategy

FORWARD_KEYS = KeyState(forward=True)


class TestKeyMapping:
    @pytest.mark.parametrize(
        "keys, expected",
        [
            (KeyState(), ActionClass.IDLE),
            (KeyState(forward=True), ActionClass.FORWARD),
            (KeyState(turn_right=True), ActionClass.TURN_RIGHT),
            (KeyState(turn_left=True), ActionClass.TURN_LEFT),
            (KeyState(forward=True, turn_right=True, turn_left=True), ActionClass.FORWARD),
            (KeyState(turn_right=True, turn_left=True), ActionClass.TURN_RIGHT),
        ],
    )
    def test_precedence(self, keys, expected):
        assert keys.to_action_class() is expected

    def test_from_pressed_names(self):
        assert KeyState.from_pressed({"W", "a"}) == KeyState(forward=True, turn_left=True)

    @given(keys=key_state_strategy)
    def test_forward_always_wins(self, keys):
        if keys.forward:
            assert keys.to_action_class() is ActionClass.FORWARD


class TestStaging:
    def test_change_stages_new_class_with_elapsed_time(self):
        source = InteractiveActionSource()
        assert source.sample(FORWARD_KEYS, 0.0) is True
        assert source.staged == PendingAction(ActionClass.FORWARD, 0.0)
        assert source.window_class is ActionClass.FORWARD

        assert source.sample(FORWARD_KEYS, 0.4) is False
        assert source.sample(NO_KEYS, 1.2) is True
        assert source.staged == PendingAction(ActionClass.IDLE, 1.2)
        # mid-window changes leave the window class alone
        assert source.window_class is ActionClass.FORWARD

    def test_commit_records_window_and_opens_next(self):
        source = InteractiveActionSource()
        source.sample(FORWARD_KEYS, 0.0)
        source.sample(KeyState(turn_left=True), 0.8)

        recorded = source.commit(0.82)

        assert recorded == PendingAction(ActionClass.FORWARD, 0.82)
        assert source.window_class is ActionClass.TURN_LEFT
        assert source.staged == PendingAction(ActionClass.TURN_LEFT, 0.0)
        assert source.locomotion_class is ActionClass.TURN_LEFT

    def test_heuristic_decision_encodes_staged_delay(self):
        source = InteractiveActionSource()
        source.sample(KeyState(turn_right=True), 0.5)
        decision = source.heuristic_decision()
        assert decision.action_class is ActionClass.TURN_RIGHT
        assert decision.delay_parameter == pytest.approx(0.0)

    def test_ceiling_defaults_to_long_delay(self):
        assert InteractiveActionSource().reconsideration_ceiling == 3.0
        with pytest.raises(ValidationError):
            InteractiveActionSource(reconsideration_ceiling=0.0)

    def test_reset_clears_staged_state(self):
        source = InteractiveActionSource()
        source.sample(FORWARD_KEYS, 0.0)
        source.reset()
        assert source.staged == PendingAction()
        assert source.window_class is ActionClass.IDLE


class TestScriptedOperator:
    def test_key_states_switch_at_script_times(self):
        operator = ScriptedOperator([(2.0, set()), (0.0, {"w"}), (1.0, {"d"})])
        assert operator(0.0).forward
        assert operator(0.99).forward
        assert operator(1.0).turn_right
        assert operator(5.0) == NO_KEYS

    def test_before_first_entry_no_keys(self):
        operator = ScriptedOperator([(1.0, {"w"})])
        assert operator(0.5) == NO_KEYS

    def test_negative_time_rejected(self):
        with pytest.raises(ValidationError):
            ScriptedOperator([(-1.0, {"w"})])


class TestHoldThenRelease:
    def test_one_step_recorded_at_release(self):
        scheduler = make_scheduler(ControlMode.INTERACTIVE, max_episode_duration=10.0)
        scheduler.begin_episode(desired_outcome=True)

        scheduler.frame_tick(keys=FORWARD_KEYS)
        while scheduler.clock.time_since_episode_begin < 2.0 - 1e-9:
            scheduler.fixed_tick()
            scheduler.frame_tick(keys=FORWARD_KEYS)
        assert len(scheduler.buffer) == 0
        assert scheduler.world.classes[-1] is ActionClass.FORWARD

        scheduler.frame_tick(keys=NO_KEYS)
        assert scheduler.world.classes[-1] is ActionClass.FORWARD
        phase = scheduler.fixed_tick()

        assert phase is SchedulerPhase.COMMITTED
        assert len(scheduler.buffer) == 1
        step = scheduler.buffer.front()
        assert step.action.class_index is ActionClass.FORWARD
        assert step.action.delay == pytest.approx(2.0, abs=0.021)
        # window ticks plus the commit's decision cost
        assert step.reward == pytest.approx(-100 * 0.01 - 0.1)
        assert scheduler.world.classes[-1] is ActionClass.IDLE

    def test_observation_is_captured_at_window_start(self):
        scheduler = make_scheduler(ControlMode.INTERACTIVE)
        scheduler.begin_episode()
        scheduler.frame_tick(keys=FORWARD_KEYS)
        for _ in range(10):
            scheduler.fixed_tick()
        scheduler.frame_tick(keys=NO_KEYS)
        scheduler.fixed_tick()

        step = scheduler.buffer.front()
        # progress is the first scalar; the window opened before any tick ran
        assert step.observation.scalars[0] == 0.0

    def test_ceiling_commits_without_input(self):
        scheduler = make_scheduler(ControlMode.INTERACTIVE)
        scheduler.begin_episode()
        for _ in range(149):
            scheduler.fixed_tick()
        assert len(scheduler.buffer) == 0
        scheduler.fixed_tick()

        assert len(scheduler.buffer) == 1
        step = scheduler.buffer.front()
        assert step.action.class_index is ActionClass.IDLE
        assert step.action.delay == pytest.approx(3.0)
