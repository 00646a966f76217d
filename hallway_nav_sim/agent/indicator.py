"""
Cosmetic outcome indicator.

On a goal trigger the ground indicator shows GOAL or FAIL and restores
DEFAULT after a fixed amount of frame time. The restore is a scheduled
callback advanced by frame ticks, so it never blocks the tick loop and needs
no threads.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from hallway_nav_sim.core.constants import DEFAULT_INDICATOR_DURATION
from hallway_nav_sim.core.enums import IndicatorState
from hallway_nav_sim.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

__all__ = ["FrameTimer", "OutcomeIndicator"]


class FrameTimer:
    """Callbacks fired once their delay of frame time has elapsed."""

    def __init__(self):
        self._now = 0.0
        self._entries: List[Tuple[float, Callable[[], None]]] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self._entries.append((self._now + max(0.0, delay), callback))

    def update(self, dt: float) -> int:
        """Advance frame time and fire due callbacks in schedule order."""
        self._now += dt
        due = [entry for entry in self._entries if entry[0] <= self._now]
        self._entries = [entry for entry in self._entries if entry[0] > self._now]
        for _, callback in due:
            callback()
        return len(due)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def pending(self) -> int:
        return len(self._entries)


class OutcomeIndicator:
    """Visual GOAL/FAIL flag restored after ``flash_duration`` seconds."""

    def __init__(self, flash_duration: float = DEFAULT_INDICATOR_DURATION):
        if flash_duration < 0:
            raise ValidationError(
                "flash_duration must be non-negative",
                parameter_name="flash_duration",
                parameter_value=flash_duration,
            )
        self.flash_duration = float(flash_duration)
        self.state = IndicatorState.DEFAULT
        self._timer = FrameTimer()
        self._generation = 0

    def flash(self, success: bool) -> None:
        self.state = IndicatorState.GOAL if success else IndicatorState.FAIL
        self._generation += 1
        generation = self._generation
        self._timer.schedule(self.flash_duration, lambda: self._restore(generation))
        logger.debug("Indicator set to %s", self.state.value)

    def _restore(self, generation: int) -> None:
        # a newer flash owns the indicator
        if generation == self._generation:
            self.state = IndicatorState.DEFAULT

    def update(self, frame_dt: float) -> None:
        self._timer.update(frame_dt)
