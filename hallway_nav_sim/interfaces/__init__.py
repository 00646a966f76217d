"""
Protocol interfaces for the collaborators of the decision scheduler.

These define the seams to physics/trigger detection, scene randomisation, the
external training-step protocol and policies, so each can be swapped without
touching the scheduler.
"""

from .policy import Policy
from .protocol import DecisionAgent, DecisionProtocol
from .world import SceneRandomizer, WorldModel

__all__ = [
    "WorldModel",
    "SceneRandomizer",
    "DecisionAgent",
    "DecisionProtocol",
    "Policy",
]
