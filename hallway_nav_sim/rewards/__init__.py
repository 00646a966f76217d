"""Reward schedules for the hallway task."""

from .step_costs import StepCostReward

__all__ = ["StepCostReward"]
