"""
World Model Protocol Definition.

The scheduler never integrates physics itself. It delegates locomotion,
collision and trigger detection to a world model and reads back the agent's
kinematic state for observation assembly.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from hallway_nav_sim.core.enums import ActionClass
from hallway_nav_sim.core.geometry import Pose, Vector2
from hallway_nav_sim.core.types import WorldEntity, WorldStepReport


@runtime_checkable
class WorldModel(Protocol):
    """Physics and trigger collaborator.

    Coordinates are area-local: ``pose``/``velocity`` are expressed in the
    frame the observation normalisation constants assume.
    """

    @property
    def pose(self) -> Pose:
        ...

    @property
    def velocity(self) -> Vector2:
        ...

    @property
    def angular_velocity(self) -> float:
        """Yaw rate in radians per second."""
        ...

    def reset(self) -> None:
        """Return the agent to its default start pose with zero velocity."""
        ...

    def reset_agent(self, pose: Pose) -> None:
        """Place the agent at ``pose`` with zero velocity."""
        ...

    def apply_locomotion(self, action_class: ActionClass, dt: float) -> WorldStepReport:
        """Apply one fixed tick of the locomotion effect for ``action_class``."""
        ...

    def entities(self) -> Sequence[WorldEntity]:
        """All perceivable entities currently in the scene."""
        ...


@runtime_checkable
class SceneRandomizer(Protocol):
    """Chooses the correct target for a new episode."""

    def randomize(
        self, world: WorldModel, rng: Optional[np.random.Generator] = None
    ) -> bool:
        """Randomise the scene and return the desired outcome."""
        ...
