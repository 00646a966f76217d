from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..core.enums import ActionClass
from ..core.types import Decision, Observation
from ..interfaces import Policy


@dataclass
class ConstantPolicy(Policy):
    """Always returns the same class and delay parameter.

    ``ConstantPolicy(ActionClass.FORWARD, 0.0)`` advances and reconsiders
    every typical delay.
    """

    action_class: ActionClass = ActionClass.FORWARD
    delay_parameter: float = 0.0

    def __post_init__(self) -> None:
        self.action_class = ActionClass.coerce(self.action_class)

    def reset(self, *, seed: int | None = None) -> None:
        pass

    def select_action(self, observation: Observation) -> Decision:
        return Decision(self.action_class, self.delay_parameter)


@dataclass
class RandomPolicy(Policy):
    """Uniform random class with a uniform delay parameter in [-1, 1]."""

    seed: Optional[int] = None
    classes: Sequence[ActionClass] = tuple(ActionClass)

    def __post_init__(self) -> None:
        if not self.classes:
            raise ValueError("classes must not be empty")
        self._rng = np.random.default_rng(self.seed)

    def reset(self, *, seed: int | None = None) -> None:
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def select_action(self, observation: Observation) -> Decision:
        index = int(self._rng.integers(0, len(self.classes)))
        return Decision(self.classes[index], float(self._rng.uniform(-1.0, 1.0)))
