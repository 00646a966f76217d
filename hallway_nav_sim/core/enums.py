"""
Core enumerations for the hallway cue-association simulation.
"""

from enum import Enum, IntEnum

from .constants import CUE_KIND_FLAG, TARGET_KIND_FLAG


class ActionClass(IntEnum):
    """Discrete locomotion classes shared by both action sources."""

    IDLE = 0
    FORWARD = 1
    TURN_RIGHT = 2
    TURN_LEFT = 3

    @classmethod
    def coerce(cls, value: int) -> "ActionClass":
        """Map an arbitrary integer onto a valid class, falling back to IDLE."""
        try:
            return cls(int(value))
        except (ValueError, TypeError):
            return cls.IDLE

    def turn_direction(self) -> float:
        """Signed yaw direction: +1 clockwise (right), -1 counter-clockwise."""
        if self == ActionClass.TURN_RIGHT:
            return 1.0
        if self == ActionClass.TURN_LEFT:
            return -1.0
        return 0.0


class EntityKind(Enum):
    """Perceivable entity categories reported by the observation builder."""

    CUE = "cue"
    TARGET = "target"

    @property
    def flag(self) -> float:
        return CUE_KIND_FLAG if self == EntityKind.CUE else TARGET_KIND_FLAG


class ControlMode(Enum):
    """Action sourcing mode, selected once per scheduler."""

    INTERACTIVE = "interactive"
    AUTONOMOUS = "autonomous"


class SchedulerPhase(Enum):
    """Lifecycle phases of the decision scheduler.

    IDLE --first tick--> AWAITING_DECISION --due--> DECIDING --ack--> COMMITTED
    COMMITTED --next tick--> AWAITING_DECISION | DECIDING
    COMMITTED/AWAITING_DECISION --episode end (interactive)--> REPLAYING --> TERMINATED
    COMMITTED/AWAITING_DECISION --episode end (autonomous)--> TERMINATED
    TERMINATED --begin_episode()--> IDLE
    """

    IDLE = "idle"
    AWAITING_DECISION = "awaiting_decision"
    DECIDING = "deciding"
    COMMITTED = "committed"
    REPLAYING = "replaying"
    TERMINATED = "terminated"

    def is_live(self) -> bool:
        return self in (
            SchedulerPhase.IDLE,
            SchedulerPhase.AWAITING_DECISION,
            SchedulerPhase.COMMITTED,
        )


class TerminationReason(Enum):
    TIMEOUT = "timeout"
    GOAL = "goal"
    WRONG_TARGET = "wrong_target"


class IndicatorState(Enum):
    """Visual state of the ground indicator."""

    DEFAULT = "default"
    GOAL = "goal"
    FAIL = "fail"
