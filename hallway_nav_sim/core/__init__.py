"""
Core types, constants and timing primitives for hallway_nav_sim.

Everything here is free of engine collaborators: value types, enums, planar
geometry, the delay mapping and the decision clock.
"""

from .constants import *  # noqa: F401,F403
from .clock import DecisionClock
from .delay_mapping import DelayProfile, clamp_parameter, decode_delay, encode_delay
from .enums import (
    ActionClass,
    ControlMode,
    EntityKind,
    IndicatorState,
    SchedulerPhase,
    TerminationReason,
)
from .geometry import Pose, Vector2, heading_vectors, normalize_yaw
from .types import (
    Decision,
    EntityFeatures,
    KeyState,
    Observation,
    PendingAction,
    TrajectoryStep,
    WorldEntity,
    WorldStepReport,
)

__all__ = [
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "ENVIRONMENT_ID",
    "ActionClass",
    "ControlMode",
    "EntityKind",
    "IndicatorState",
    "SchedulerPhase",
    "TerminationReason",
    "Vector2",
    "Pose",
    "heading_vectors",
    "normalize_yaw",
    "PendingAction",
    "EntityFeatures",
    "Observation",
    "TrajectoryStep",
    "Decision",
    "KeyState",
    "DelayProfile",
    "decode_delay",
    "encode_delay",
    "clamp_parameter",
    "DecisionClock",
    "WorldEntity",
    "WorldStepReport",
]
