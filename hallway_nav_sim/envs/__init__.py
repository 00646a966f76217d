"""Gymnasium environments for the hallway cue-association task."""

from .hallway_env import DecisionBridge, HallwayCueEnv
from .state import EnvironmentState

__all__ = ["HallwayCueEnv", "DecisionBridge", "EnvironmentState"]
