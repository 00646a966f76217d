"""Baseline policies for the hallway task."""

from .baseline import ConstantPolicy, RandomPolicy

__all__ = ["ConstantPolicy", "RandomPolicy"]
