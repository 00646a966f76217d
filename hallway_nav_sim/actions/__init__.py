"""
Action sources for the decision scheduler.

``InteractiveActionSource`` turns operator key holds into delay-tagged
decisions; ``AutonomousActionSource`` applies decisions from the training-step
protocol. A scheduler uses exactly one of them.
"""

from .autonomous import AutonomousActionSource
from .base import ActionSource
from .interactive import InteractiveActionSource, ScriptedOperator

__all__ = [
    "ActionSource",
    "AutonomousActionSource",
    "InteractiveActionSource",
    "ScriptedOperator",
]
