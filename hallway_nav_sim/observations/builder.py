"""
ObservationBuilder: fixed scalar features plus nearby-entity features.

The seven scalar slots and their divisors define the policy input contract:

    0  progress        elapsed / max_duration
    1  velocity x      vx / run_speed / 15
    2  velocity z      vz / run_speed / 15
    3  angular vel     yaw rate (rad/s)
    4  position x      x / 10
    5  position z      z / 25
    6  orientation     yaw / 180 - 1

Entities within the sensing radius are reported in the agent frame divided by
the radius, nearest first, and truncated to the configured capacity.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import gymnasium as gym
import numpy as np

from hallway_nav_sim.core.constants import (
    DEFAULT_MAX_ENTITIES,
    DEFAULT_RUN_SPEED,
    DEFAULT_SENSOR_RADIUS,
    ENTITY_FEATURE_SIZE,
    OBSERVATION_DTYPE,
    ORIENTATION_HALF_TURN,
    POSITION_X_NORMALIZATION,
    POSITION_Z_NORMALIZATION,
    SCALAR_OBSERVATION_LABELS,
    SCALAR_OBSERVATION_SIZE,
    VELOCITY_NORMALIZATION_FACTOR,
)
from hallway_nav_sim.core.geometry import Pose, Vector2
from hallway_nav_sim.core.types import EntityFeatures, Observation, WorldEntity
from hallway_nav_sim.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

__all__ = ["ObservationBuilder"]


class ObservationBuilder:
    """Pure assembler of observations from world state.

    Observation Space (flattened form, see ``to_arrays``):
        Dict(
            scalars=Box(-inf, inf, (7,)),
            entities=Box(-1, 1, (C, 4)),
            entity_mask=MultiBinary(C),
        )

    Example:
        >>> builder = ObservationBuilder(max_entities=4)
        >>> obs = builder.build(Pose(Vector2(0.0, 0.0)), Vector2.zero(), 0.0, [], 0.0)
        >>> len(obs.scalars), len(obs.entities)
        (7, 0)
    """

    def __init__(
        self,
        sensor_radius: float = DEFAULT_SENSOR_RADIUS,
        run_speed: float = DEFAULT_RUN_SPEED,
        max_entities: int = DEFAULT_MAX_ENTITIES,
        debug_labels: bool = False,
    ):
        if sensor_radius <= 0:
            raise ValidationError(
                "sensor_radius must be positive",
                parameter_name="sensor_radius",
                parameter_value=sensor_radius,
            )
        if run_speed <= 0:
            raise ValidationError(
                "run_speed must be positive",
                parameter_name="run_speed",
                parameter_value=run_speed,
            )
        if max_entities < 0:
            raise ValidationError(
                "max_entities must be non-negative",
                parameter_name="max_entities",
                parameter_value=max_entities,
            )
        self.sensor_radius = float(sensor_radius)
        self.run_speed = float(run_speed)
        self.max_entities = int(max_entities)
        self.debug_labels = debug_labels
        self._observation_space = gym.spaces.Dict(
            {
                "scalars": gym.spaces.Box(
                    low=-np.inf,
                    high=np.inf,
                    shape=(SCALAR_OBSERVATION_SIZE,),
                    dtype=OBSERVATION_DTYPE,
                ),
                "entities": gym.spaces.Box(
                    low=-1.0,
                    high=1.0,
                    shape=(self.max_entities, ENTITY_FEATURE_SIZE),
                    dtype=OBSERVATION_DTYPE,
                ),
                "entity_mask": gym.spaces.MultiBinary(self.max_entities),
            }
        )

    @property
    def observation_space(self) -> gym.spaces.Dict:
        return self._observation_space

    def scalar_features(
        self,
        pose: Pose,
        velocity: Vector2,
        angular_velocity: float,
        progress: float,
    ) -> tuple:
        speed_scale = self.run_speed * VELOCITY_NORMALIZATION_FACTOR
        return (
            float(progress),
            velocity.x / speed_scale,
            velocity.z / speed_scale,
            float(angular_velocity),
            pose.position.x / POSITION_X_NORMALIZATION,
            pose.position.z / POSITION_Z_NORMALIZATION,
            pose.yaw / ORIENTATION_HALF_TURN - 1.0,
        )

    def entity_features(
        self,
        pose: Pose,
        entities: Sequence[WorldEntity],
        sensor_radius: Optional[float] = None,
    ) -> tuple:
        """Features of entities within range, nearest first, at most capacity."""
        radius = self.sensor_radius if sensor_radius is None else float(sensor_radius)
        radius_sq = radius * radius
        origin = pose.position

        distances = [
            (origin.squared_distance_to(entity.position), entity) for entity in entities
        ]
        # sorted() is stable, so equidistant entities keep scene order
        in_range = sorted(
            (item for item in distances if item[0] <= radius_sq),
            key=lambda item: item[0],
        )

        features = []
        for _, entity in in_range[: self.max_entities]:
            local = pose.to_local(entity.position)
            features.append(
                EntityFeatures(
                    kind=entity.kind,
                    value=entity.value,
                    relative_x=local.x / radius,
                    relative_z=local.z / radius,
                )
            )
        if len(in_range) > self.max_entities:
            logger.debug(
                "Dropped %d entities beyond capacity %d",
                len(in_range) - self.max_entities,
                self.max_entities,
            )
        return tuple(features)

    def build(
        self,
        pose: Pose,
        velocity: Vector2,
        angular_velocity: float,
        entities: Sequence[WorldEntity],
        progress: float,
        sensor_radius: Optional[float] = None,
    ) -> Observation:
        observation = Observation(
            scalars=self.scalar_features(pose, velocity, angular_velocity, progress),
            entities=self.entity_features(pose, entities, sensor_radius),
        )
        if self.debug_labels and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Observation %s", self.describe(observation))
        return observation

    def to_arrays(self, observation: Observation) -> Dict[str, np.ndarray]:
        """Flatten an observation into arrays matching ``observation_space``."""
        entities, mask = observation.entity_arrays(self.max_entities)
        return {
            "scalars": observation.scalar_array(),
            "entities": entities,
            "entity_mask": mask,
        }

    @staticmethod
    def describe(observation: Observation) -> Dict[str, Any]:
        """Labelled view of the scalar slots for debug output."""
        labelled: Dict[str, Any] = {
            label: round(value, 4)
            for label, value in zip(SCALAR_OBSERVATION_LABELS, observation.scalars)
        }
        labelled["entities"] = len(observation.entities)
        return labelled
