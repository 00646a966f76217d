"""
TrajectoryBuffer: chronological log of committed interactive decisions.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Optional

from hallway_nav_sim.core.types import Observation, PendingAction, TrajectoryStep
from hallway_nav_sim.utils.exceptions import StateError

__all__ = ["TrajectoryBuffer"]


class TrajectoryBuffer:
    """Ordered sequence of TrajectoryStep, oldest first.

    Steps are frozen dataclasses, so a recorded step cannot be changed after
    it is appended.
    """

    def __init__(self):
        self._steps: Deque[TrajectoryStep] = deque()

    def append(
        self, observation: Observation, action: PendingAction, reward: float
    ) -> TrajectoryStep:
        step = TrajectoryStep(observation=observation, action=action, reward=float(reward))
        self._steps.append(step)
        return step

    def front(self) -> Optional[TrajectoryStep]:
        return self._steps[0] if self._steps else None

    def pop_front(self) -> TrajectoryStep:
        if not self._steps:
            raise StateError("cannot pop from an empty trajectory buffer")
        return self._steps.popleft()

    def clear(self) -> None:
        self._steps.clear()

    def total_reward(self) -> float:
        return sum(step.reward for step in self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __bool__(self) -> bool:
        return bool(self._steps)

    def __iter__(self) -> Iterator[TrajectoryStep]:
        return iter(tuple(self._steps))

    def __repr__(self) -> str:
        return f"TrajectoryBuffer(steps={len(self._steps)})"
