"""
Planar geometry types for the hallway simulation.

The hallway is a horizontal plane with coordinates (x, z): x to the right of
the area, z along the hallway. Yaw is measured in degrees clockwise from +z
when looking down, so yaw 90 faces +x.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Vector2:
    """Immutable planar vector on the (x, z) ground plane."""

    x: float
    z: float

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.z + other.z)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.z - other.z)

    def scale(self, factor: float) -> "Vector2":
        return Vector2(self.x * factor, self.z * factor)

    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.z * other.z

    def squared_length(self) -> float:
        return self.x * self.x + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.squared_length())

    def squared_distance_to(self, other: "Vector2") -> float:
        return (self - other).squared_length()

    def rotated_half_turn(self) -> "Vector2":
        """Rotate 180 degrees about the origin."""
        return Vector2(-self.x, -self.z)

    @classmethod
    def zero(cls) -> "Vector2":
        return cls(0.0, 0.0)


def normalize_yaw(yaw_degrees: float) -> float:
    """Wrap a yaw angle into [0, 360)."""
    wrapped = math.fmod(yaw_degrees, 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    # fmod of a tiny negative number can round up to exactly 360
    return 0.0 if wrapped >= 360.0 else wrapped


def heading_vectors(yaw_degrees: float) -> Tuple[Vector2, Vector2]:
    """Return the (forward, right) unit vectors for a yaw angle."""
    rad = math.radians(yaw_degrees)
    sin_y, cos_y = math.sin(rad), math.cos(rad)
    return Vector2(sin_y, cos_y), Vector2(cos_y, -sin_y)


@dataclass(frozen=True)
class Pose:
    """Agent position and yaw on the ground plane."""

    position: Vector2
    yaw: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "yaw", normalize_yaw(float(self.yaw)))

    @property
    def forward(self) -> Vector2:
        return heading_vectors(self.yaw)[0]

    @property
    def right(self) -> Vector2:
        return heading_vectors(self.yaw)[1]

    def to_local(self, point: Vector2) -> Vector2:
        """Express a world point in the agent frame (x = right, z = forward)."""
        offset = point - self.position
        return Vector2(offset.dot(self.right), offset.dot(self.forward))

    def rotated(self, delta_degrees: float) -> "Pose":
        return Pose(self.position, self.yaw + delta_degrees)

    def moved_to(self, position: Vector2) -> "Pose":
        return Pose(position, self.yaw)
