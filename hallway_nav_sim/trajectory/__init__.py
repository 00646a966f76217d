from .buffer import TrajectoryBuffer
from .replay import ReplayDriver

__all__ = ["TrajectoryBuffer", "ReplayDriver"]
