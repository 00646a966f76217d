"""
Step cost reward schedule - constant time pressure with optional outcome reward.
"""

from typing import Any, Dict

from hallway_nav_sim.core.constants import (
    DEFAULT_DECISION_COST,
    DEFAULT_GOAL_REWARD,
    DEFAULT_TICK_COST,
    DEFAULT_TIMEOUT_PENALTY,
    DEFAULT_WALL_CONTACT_PENALTY,
    DEFAULT_WRONG_TARGET_REWARD,
)
from hallway_nav_sim.utils.exceptions import ValidationError


class StepCostReward:
    """Reward terms applied by the decision scheduler.

    Reward Structure:
        - -tick_cost on every fixed tick
        - -decision_cost for every committed decision
        - -wall_contact_penalty * dt for every tick spent touching a wall
        - -timeout_penalty once when the episode times out
        - goal_reward / wrong_target_reward when a target is reached

    Costs are given as non-negative magnitudes and negated here. The outcome
    rewards are signed and default to 0.0, i.e. reaching a target ends the
    episode without an outcome reward unless configured otherwise.

    Example:
        >>> rewards = StepCostReward(tick_cost=0.01, decision_cost=0.1)
        >>> rewards.tick_reward(), rewards.decision_reward()
        (-0.01, -0.1)
    """

    def __init__(
        self,
        tick_cost: float = DEFAULT_TICK_COST,
        decision_cost: float = DEFAULT_DECISION_COST,
        timeout_penalty: float = DEFAULT_TIMEOUT_PENALTY,
        wall_contact_penalty: float = DEFAULT_WALL_CONTACT_PENALTY,
        goal_reward: float = DEFAULT_GOAL_REWARD,
        wrong_target_reward: float = DEFAULT_WRONG_TARGET_REWARD,
    ):
        for name, value in (
            ("tick_cost", tick_cost),
            ("decision_cost", decision_cost),
            ("timeout_penalty", timeout_penalty),
            ("wall_contact_penalty", wall_contact_penalty),
        ):
            if value < 0.0:
                raise ValidationError(
                    f"{name} must be non-negative, got {value}",
                    parameter_name=name,
                    parameter_value=value,
                )
        self.tick_cost = float(tick_cost)
        self.decision_cost = float(decision_cost)
        self.timeout_penalty = float(timeout_penalty)
        self.wall_contact_penalty = float(wall_contact_penalty)
        self.goal_reward = float(goal_reward)
        self.wrong_target_reward = float(wrong_target_reward)

    def tick_reward(self) -> float:
        return -self.tick_cost

    def decision_reward(self) -> float:
        return -self.decision_cost

    def timeout_reward(self) -> float:
        return -self.timeout_penalty

    def wall_contact_reward(self, dt: float) -> float:
        return -self.wall_contact_penalty * dt

    def outcome_reward(self, outcome_matches: bool) -> float:
        return self.goal_reward if outcome_matches else self.wrong_target_reward

    def get_metadata(self) -> Dict[str, Any]:
        return {
            "type": "step_cost_reward",
            "tick_cost": self.tick_cost,
            "decision_cost": self.decision_cost,
            "timeout_penalty": self.timeout_penalty,
            "wall_contact_penalty": self.wall_contact_penalty,
            "goal_reward": self.goal_reward,
            "wrong_target_reward": self.wrong_target_reward,
        }
