"""
Reference world for the hallway cue-association task.

A planar rigid body moves inside a walled hallway. Three cue symbols near one
end show X or O; two pressure pads at the other end each carry an associated
symbol. The correct pad is the one whose symbol matches the majority of the
cues.

All coordinates are area-local. Rotating the area by a half turn mirrors the
cue and pad positions through the origin; the agent keeps area-local
coordinates.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from hallway_nav_sim.core.constants import (
    AGENT_RADIUS,
    AGENT_SPAWN_EXTENT,
    CUE_POSITIONS,
    DEFAULT_LINEAR_DRAG,
    DEFAULT_ROTATION_SPEED,
    DEFAULT_RUN_SPEED,
    HALLWAY_HALF_LENGTH,
    HALLWAY_HALF_WIDTH,
    TARGET_POSITIONS,
    TARGET_TRIGGER_RADIUS,
)
from hallway_nav_sim.core.enums import ActionClass, EntityKind
from hallway_nav_sim.core.geometry import Pose, Vector2
from hallway_nav_sim.core.types import WorldEntity, WorldStepReport
from hallway_nav_sim.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

__all__ = ["HallwayWorld", "HallwayRandomizer", "SYMBOL_X", "SYMBOL_O"]

SYMBOL_X = 1.0
SYMBOL_O = -1.0


def _clamp_axis(value: float, velocity: float, limit: float):
    if value > limit:
        return limit, 0.0, True
    if value < -limit:
        return -limit, 0.0, True
    return value, velocity, False


class HallwayWorld:
    """Planar physics, walls and pressure-pad triggers.

    Locomotion per fixed tick:
        - FORWARD adds ``run_speed`` along the heading to the velocity
        - TURN_RIGHT / TURN_LEFT rotate the heading by ``rotation_speed * dt``
        - velocity decays by ``exp(-linear_drag * dt)`` then integrates
        - the body is clamped inside the walls; touching a wall is reported
        - the first pad within ``trigger_radius`` is reported as triggered

    Satisfies the WorldModel protocol via duck typing.
    """

    def __init__(
        self,
        run_speed: float = DEFAULT_RUN_SPEED,
        rotation_speed: float = DEFAULT_ROTATION_SPEED,
        linear_drag: float = DEFAULT_LINEAR_DRAG,
        half_width: float = HALLWAY_HALF_WIDTH,
        half_length: float = HALLWAY_HALF_LENGTH,
        agent_radius: float = AGENT_RADIUS,
        trigger_radius: float = TARGET_TRIGGER_RADIUS,
        start_pose: Optional[Pose] = None,
    ):
        if run_speed <= 0:
            raise ValidationError(
                f"run_speed must be positive, got {run_speed}",
                parameter_name="run_speed",
                parameter_value=run_speed,
            )
        if linear_drag < 0:
            raise ValidationError(
                f"linear_drag must be non-negative, got {linear_drag}",
                parameter_name="linear_drag",
                parameter_value=linear_drag,
            )
        if agent_radius >= min(half_width, half_length):
            raise ValidationError(
                "agent_radius must fit inside the hallway",
                parameter_name="agent_radius",
                parameter_value=agent_radius,
            )
        self.run_speed = float(run_speed)
        self.rotation_speed = float(rotation_speed)
        self.linear_drag = float(linear_drag)
        self.half_width = float(half_width)
        self.half_length = float(half_length)
        self.agent_radius = float(agent_radius)
        self.trigger_radius = float(trigger_radius)
        self.start_pose = start_pose or Pose(Vector2.zero(), 0.0)

        self.cue_values: List[float] = [SYMBOL_X for _ in CUE_POSITIONS]
        self.pad_values: List[float] = [SYMBOL_X, SYMBOL_O]
        self.rotated = False

        self._pose = self.start_pose
        self._velocity = Vector2.zero()
        self._angular_velocity = 0.0

    # Kinematic state -------------------------------------------------------

    @property
    def pose(self) -> Pose:
        return self._pose

    @property
    def velocity(self) -> Vector2:
        return self._velocity

    @property
    def angular_velocity(self) -> float:
        return self._angular_velocity

    def reset(self) -> None:
        self.reset_agent(self.start_pose)

    def reset_agent(self, pose: Pose) -> None:
        self._pose = pose
        self._velocity = Vector2.zero()
        self._angular_velocity = 0.0

    # Layout ----------------------------------------------------------------

    def set_layout(
        self,
        cue_values: Sequence[float],
        pad_values: Sequence[float],
        rotated: bool,
    ) -> None:
        if len(cue_values) != len(CUE_POSITIONS):
            raise ValidationError(
                f"expected {len(CUE_POSITIONS)} cue values, got {len(cue_values)}",
                parameter_name="cue_values",
                parameter_value=list(cue_values),
            )
        if len(pad_values) != len(TARGET_POSITIONS):
            raise ValidationError(
                f"expected {len(TARGET_POSITIONS)} pad values, got {len(pad_values)}",
                parameter_name="pad_values",
                parameter_value=list(pad_values),
            )
        self.cue_values = [float(v) for v in cue_values]
        self.pad_values = [float(v) for v in pad_values]
        self.rotated = bool(rotated)

    def _place(self, xz) -> Vector2:
        point = Vector2(float(xz[0]), float(xz[1]))
        return point.rotated_half_turn() if self.rotated else point

    def cues(self) -> List[WorldEntity]:
        return [
            WorldEntity(EntityKind.CUE, value, self._place(xz), name=f"cue_{i}")
            for i, (xz, value) in enumerate(zip(CUE_POSITIONS, self.cue_values))
        ]

    def pads(self) -> List[WorldEntity]:
        return [
            WorldEntity(EntityKind.TARGET, value, self._place(xz), name=f"pad_{i}")
            for i, (xz, value) in enumerate(zip(TARGET_POSITIONS, self.pad_values))
        ]

    def entities(self) -> List[WorldEntity]:
        return self.cues() + self.pads()

    def correct_pad(self) -> WorldEntity:
        """Pad whose symbol matches the majority of the cues."""
        majority_x = sum(self.cue_values) > 0
        for pad in self.pads():
            if (pad.value > 0) == majority_x:
                return pad
        # both pads show the same symbol; the first one is as good as any
        return self.pads()[0]

    # Physics ---------------------------------------------------------------

    def apply_locomotion(self, action_class: ActionClass, dt: float) -> WorldStepReport:
        action_class = ActionClass.coerce(action_class)
        pose = self._pose
        velocity = self._velocity

        if action_class is ActionClass.FORWARD:
            velocity = velocity + pose.forward.scale(self.run_speed)

        turn = action_class.turn_direction()
        if turn:
            pose = pose.rotated(turn * self.rotation_speed * dt)
            self._angular_velocity = math.radians(turn * self.rotation_speed)
        else:
            self._angular_velocity = 0.0

        velocity = velocity.scale(math.exp(-self.linear_drag * dt))
        position = pose.position + velocity.scale(dt)

        x, vx, hit_x = _clamp_axis(
            position.x, velocity.x, self.half_width - self.agent_radius
        )
        z, vz, hit_z = _clamp_axis(
            position.z, velocity.z, self.half_length - self.agent_radius
        )
        self._velocity = Vector2(vx, vz)
        self._pose = pose.moved_to(Vector2(x, z))

        return WorldStepReport(
            wall_contact=hit_x or hit_z, triggered=self._triggered_pad()
        )

    def _triggered_pad(self) -> Optional[WorldEntity]:
        limit = self.trigger_radius * self.trigger_radius
        for pad in self.pads():
            if self._pose.position.squared_distance_to(pad.position) <= limit:
                return pad
        return None

    def __repr__(self) -> str:
        p = self._pose
        return (
            f"HallwayWorld(pos=({p.position.x:.2f}, {p.position.z:.2f}), "
            f"yaw={p.yaw:.1f}, rotated={self.rotated})"
        )


class HallwayRandomizer:
    """Scene randomiser returning whether X is the majority cue.

    Each episode: every cue is set to X or O with probability 1/2; with
    probability 1/2 every pad's symbol is flipped; with probability 1/2 the
    area is rotated by a further half turn. Flips and rotations accumulate
    across episodes. The agent spawns at ``(extent*u1, extent*u2)`` with
    ``u1, u2`` uniform in [0, 1) and a uniform yaw.
    """

    def __init__(self, spawn_extent: float = AGENT_SPAWN_EXTENT):
        if spawn_extent < 0:
            raise ValidationError(
                f"spawn_extent must be non-negative, got {spawn_extent}",
                parameter_name="spawn_extent",
                parameter_value=spawn_extent,
            )
        self.spawn_extent = float(spawn_extent)

    def randomize(
        self, world: HallwayWorld, rng: Optional[np.random.Generator] = None
    ) -> bool:
        rng = rng if rng is not None else np.random.default_rng()

        is_x = rng.integers(0, 2, size=len(world.cue_values)) == 1
        cue_values = [SYMBOL_X if x else SYMBOL_O for x in is_x]
        balance = int(np.sum(np.where(is_x, 1, -1)))

        pad_values = list(world.pad_values)
        if rng.integers(0, 2) == 1:
            pad_values = [-v for v in pad_values]

        rotated = world.rotated
        if rng.integers(0, 2) == 1:
            rotated = not rotated

        world.set_layout(cue_values, pad_values, rotated)

        u1, u2 = rng.random(2)
        world.reset_agent(
            Pose(
                Vector2(self.spawn_extent * float(u1), self.spawn_extent * float(u2)),
                float(rng.random() * 360.0),
            )
        )
        desired = balance > 0
        logger.debug(
            "Randomized scene: cues=%s pads=%s rotated=%s desired_x=%s",
            cue_values,
            pad_values,
            rotated,
            desired,
        )
        return desired
