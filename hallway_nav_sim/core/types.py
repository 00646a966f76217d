"""
Value types exchanged between the scheduler, its action sources, the
observation builder and the training-step protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from .constants import (
    ENTITY_FEATURE_SIZE,
    KEY_FORWARD,
    KEY_TURN_LEFT,
    KEY_TURN_RIGHT,
    OBSERVATION_DTYPE,
    UNDEFINED_VALUE_FLAG,
)
from .enums import ActionClass, EntityKind
from .geometry import Vector2

__all__ = [
    "PendingAction",
    "EntityFeatures",
    "Observation",
    "TrajectoryStep",
    "Decision",
    "KeyState",
    "WorldEntity",
    "WorldStepReport",
]


@dataclass(frozen=True)
class PendingAction:
    """A discrete action class plus the delay before it is reconsidered.

    Instances are immutable; staging a new choice replaces the instance.
    Negative delays are clamped to zero.
    """

    class_index: ActionClass = ActionClass.IDLE
    delay: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "class_index", ActionClass.coerce(self.class_index))
        object.__setattr__(self, "delay", max(0.0, float(self.delay)))

    def with_delay(self, delay: float) -> "PendingAction":
        return PendingAction(self.class_index, delay)


@dataclass(frozen=True)
class EntityFeatures:
    """Feature vector for one sensed entity, in the agent frame.

    ``relative_x``/``relative_z`` are already divided by the sensing radius.
    ``value`` is +1/-1 for the X/O symbol or None when the entity has none.
    """

    kind: EntityKind
    value: Optional[float]
    relative_x: float
    relative_z: float

    def to_array(self) -> np.ndarray:
        value = UNDEFINED_VALUE_FLAG if self.value is None else float(self.value)
        return np.array(
            [self.kind.flag, value, self.relative_x, self.relative_z],
            dtype=OBSERVATION_DTYPE,
        )


@dataclass(frozen=True)
class Observation:
    """Fixed scalar features plus a variable-length list of entity features."""

    scalars: Tuple[float, ...]
    entities: Tuple[EntityFeatures, ...] = ()

    def scalar_array(self) -> np.ndarray:
        return np.asarray(self.scalars, dtype=OBSERVATION_DTYPE)

    def entity_arrays(self, capacity: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return (entities, mask) padded with zeros to ``capacity`` rows."""
        entities = np.zeros((capacity, ENTITY_FEATURE_SIZE), dtype=OBSERVATION_DTYPE)
        mask = np.zeros(capacity, dtype=np.int8)
        for row, entity in enumerate(self.entities[:capacity]):
            entities[row] = entity.to_array()
            mask[row] = 1
        return entities, mask


@dataclass(frozen=True)
class TrajectoryStep:
    """One committed interactive decision, owned by the trajectory buffer."""

    observation: Observation
    action: PendingAction
    reward: float = 0.0


@dataclass(frozen=True)
class Decision:
    """Output of the decision protocol: a class plus a delay parameter in [-1, 1]."""

    action_class: ActionClass
    delay_parameter: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "action_class", ActionClass.coerce(self.action_class))
        object.__setattr__(self, "delay_parameter", float(self.delay_parameter))


@dataclass(frozen=True)
class KeyState:
    """The three operator inputs sampled on each frame tick."""

    forward: bool = False
    turn_right: bool = False
    turn_left: bool = False

    @classmethod
    def from_pressed(cls, keys: Iterable[str]) -> "KeyState":
        pressed = {str(k).lower() for k in keys}
        return cls(
            forward=KEY_FORWARD in pressed,
            turn_right=KEY_TURN_RIGHT in pressed,
            turn_left=KEY_TURN_LEFT in pressed,
        )

    def to_action_class(self) -> ActionClass:
        """Map held keys to a class with precedence forward > right > left."""
        if self.forward:
            return ActionClass.FORWARD
        if self.turn_right:
            return ActionClass.TURN_RIGHT
        if self.turn_left:
            return ActionClass.TURN_LEFT
        return ActionClass.IDLE


NO_KEYS = KeyState()


@dataclass(frozen=True)
class WorldEntity:
    """A perceivable object as reported by the world, in area coordinates."""

    kind: EntityKind
    value: Optional[float]
    position: Vector2
    name: str = ""


@dataclass(frozen=True)
class WorldStepReport:
    """What happened to the agent body during one locomotion step."""

    wall_contact: bool = False
    triggered: Optional[WorldEntity] = None
