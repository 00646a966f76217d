"""Gymnasium API behaviour of HallwayCueEnv."""

import gymnasium as gym
import numpy as np
import pytest

from hallway_nav_sim.core.constants import TEST_SEEDS
from hallway_nav_sim.core.enums import ActionClass
from hallway_nav_sim.core.geometry import Pose, Vector2
from hallway_nav_sim.core.types import Decision
from hallway_nav_sim.envs import HallwayCueEnv
from hallway_nav_sim.registration import ENV_ID, register_env, unregister_env
from hallway_nav_sim.utils.exceptions import StateError, ValidationError
from hallway_nav_sim.world import HallwayWorld


def idle(parameter: float = 0.0) -> dict:
    return {
        "action_class": int(ActionClass.IDLE),
        "delay": np.array([parameter], dtype=np.float32),
    }


@pytest.fixture
def env():
    environment = HallwayCueEnv(max_episode_duration=10.0)
    yield environment
    environment.close()


@pytest.fixture
def pad_env():
    """Agent spawns next to pad 0, which shows X."""
    world = HallwayWorld(start_pose=Pose(Vector2(-5.0, 19.0), 0.0))
    environment = HallwayCueEnv(world=world, randomize_scene=False)
    yield environment
    environment.close()


class TestReset:
    def test_observation_in_space(self, env):
        obs, info = env.reset(seed=0)
        assert env.observation_space.contains(obs)
        assert obs["entities"].shape == (env.observation_builder.max_entities, 4)

    def test_opening_decision_cost_reported(self, env):
        _, info = env.reset(seed=0)
        assert info["opening_reward"] == pytest.approx(-0.1)
        assert info["decisions"] == 1
        assert info["step_count"] == 0
        assert env.scheduler.pending_reward == 0.0

    @pytest.mark.parametrize("seed", TEST_SEEDS)
    def test_same_seed_same_scene(self, seed):
        first, second = HallwayCueEnv(), HallwayCueEnv()
        obs_a, info_a = first.reset(seed=seed)
        obs_b, info_b = second.reset(seed=seed)
        for key in obs_a:
            np.testing.assert_array_equal(obs_a[key], obs_b[key])
        assert info_a["desired_outcome"] == info_b["desired_outcome"]

    def test_desired_outcome_option(self, env):
        _, info = env.reset(seed=3, options={"desired_outcome": True})
        assert info["desired_outcome"] is True


class TestStep:
    def test_step_covers_one_decision_window(self, env):
        env.reset(seed=0)
        obs, reward, terminated, truncated, info = env.step(idle(0.0))
        # 25 ticks at the typical 0.5 s delay plus the next decision
        assert reward == pytest.approx(-0.35)
        assert info["elapsed"] == pytest.approx(0.52)
        assert info["decisions"] == 2
        assert not terminated and not truncated
        assert env.observation_space.contains(obs)

    def test_tuple_and_decision_actions(self, env):
        env.reset(seed=0)
        env.step((int(ActionClass.FORWARD), -1.0))
        _, _, _, _, info = env.step(Decision(ActionClass.TURN_LEFT, -1.0))
        assert info["delay"] == pytest.approx(0.2)

    def test_timeout_truncates(self):
        env = HallwayCueEnv(max_episode_duration=2.0)
        env.reset(seed=1)
        _, reward, terminated, truncated, info = env.step(idle(1.0))
        assert truncated and not terminated
        assert info["termination_reason"] == "timeout"
        assert reward == pytest.approx(-2.0)
        assert info["cumulative_reward"] == pytest.approx(-2.1)

    def test_matching_pad_terminates(self, pad_env):
        pad_env.reset(options={"desired_outcome": True})
        _, _, terminated, truncated, info = pad_env.step(idle())
        assert terminated and not truncated
        assert info["outcome_matches"] is True
        assert info["termination_reason"] == "goal"

    def test_other_pad_is_wrong_target(self, pad_env):
        pad_env.reset(options={"desired_outcome": False})
        _, _, terminated, _, info = pad_env.step(idle())
        assert terminated
        assert info["outcome_matches"] is False
        assert info["termination_reason"] == "wrong_target"

    @pytest.mark.parametrize("action", [{"delay": 0.0}, "forward", None])
    def test_invalid_action(self, env, action):
        env.reset(seed=0)
        with pytest.raises(ValidationError):
            env.step(action)


class TestLifecycle:
    def test_step_before_reset(self, env):
        with pytest.raises(StateError):
            env.step(idle())

    def test_step_after_episode_end(self):
        env = HallwayCueEnv(max_episode_duration=1.0)
        env.reset(seed=0)
        env.step(idle(1.0))
        with pytest.raises(StateError):
            env.step(idle())

    def test_reset_after_end_starts_over(self):
        env = HallwayCueEnv(max_episode_duration=1.0)
        env.reset(seed=0)
        env.step(idle(1.0))
        _, info = env.reset(seed=0)
        assert info["episode"] == 2
        assert info["elapsed"] == pytest.approx(0.02)

    def test_closed_env_rejects_calls(self, env):
        env.reset(seed=0)
        env.close()
        with pytest.raises(StateError):
            env.step(idle())
        with pytest.raises(StateError):
            env.reset()

    def test_render_ansi(self):
        env = HallwayCueEnv(render_mode="ansi")
        env.reset(seed=0)
        text = env.render()
        assert isinstance(text, str)
        assert "IDLE" in text

    def test_unknown_render_mode(self):
        with pytest.raises(ValidationError):
            HallwayCueEnv(render_mode="human")


class TestRegistration:
    def test_gym_make(self):
        register_env(force_reregister=True)
        try:
            env = gym.make(ENV_ID, max_episode_duration=1.0)
            assert isinstance(env.unwrapped, HallwayCueEnv)
            obs, _ = env.reset(seed=0)
            assert env.observation_space.contains(obs)
            env.close()
        finally:
            assert unregister_env()

    def test_version_suffix_required(self):
        with pytest.raises(ValidationError):
            register_env("HallwayCue")
