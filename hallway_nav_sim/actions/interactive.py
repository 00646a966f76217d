"""
InteractiveActionSource: converts free-form key holds into delay-tagged
decisions.

Input is sampled once per frame tick. Keys map to a class with precedence
forward > turn right > turn left; no key is IDLE. When the mapped class
differs from the staged one, the staged action is replaced by the new class
tagged with the time since the last decision, which makes a decision due on
the next fixed tick.

Two classes are tracked:

    window class   the class in effect since the last decision; this is what
                   a committed step records, with the window's duration
    staged class   the latest operator choice; it drives locomotion at once
                   and becomes the next window class on commit

A change sampled at the very start of a window (no time elapsed) replaces the
window class as well, so pressing a key right after a decision starts a new
window instead of committing an empty one.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from hallway_nav_sim.core.clock import DecisionClock
from hallway_nav_sim.core.constants import TIME_EPSILON
from hallway_nav_sim.core.delay_mapping import DEFAULT_DELAY_PROFILE, DelayProfile
from hallway_nav_sim.core.enums import ActionClass, ControlMode
from hallway_nav_sim.core.types import NO_KEYS, Decision, KeyState, PendingAction
from hallway_nav_sim.utils.exceptions import ValidationError

from .base import ActionSource

logger = logging.getLogger(__name__)

__all__ = ["InteractiveActionSource", "ScriptedOperator"]


class InteractiveActionSource(ActionSource):
    """Human-operator action source with a reconsideration ceiling.

    Example:
        >>> source = InteractiveActionSource(reconsideration_ceiling=3.0)
        >>> source.sample(KeyState(forward=True), time_since_last_decision=0.0)
        True
        >>> source.staged
        PendingAction(class_index=<ActionClass.FORWARD: 1>, delay=0.0)
    """

    mode = ControlMode.INTERACTIVE

    def __init__(
        self,
        reconsideration_ceiling: Optional[float] = None,
        delay_profile: DelayProfile = DEFAULT_DELAY_PROFILE,
    ):
        super().__init__(delay_profile)
        ceiling = (
            delay_profile.long
            if reconsideration_ceiling is None
            else float(reconsideration_ceiling)
        )
        if ceiling <= 0:
            raise ValidationError(
                "reconsideration_ceiling must be positive",
                parameter_name="reconsideration_ceiling",
                parameter_value=reconsideration_ceiling,
            )
        self.reconsideration_ceiling = ceiling
        self.staged = PendingAction()
        self.window_class = ActionClass.IDLE

    @property
    def locomotion_class(self) -> ActionClass:
        return self.staged.class_index

    def reset(self) -> None:
        self.staged = PendingAction()
        self.window_class = ActionClass.IDLE

    def sample(self, keys: KeyState, time_since_last_decision: float) -> bool:
        """Stage the class mapped from ``keys``; return True if it changed."""
        chosen = keys.to_action_class()
        if chosen == self.staged.class_index:
            return False
        self.staged = PendingAction(chosen, time_since_last_decision)
        if time_since_last_decision == 0.0:
            self.window_class = chosen
        logger.debug(
            "Staged %s after %.3fs", chosen.name, time_since_last_decision
        )
        return True

    def decision_due(self, clock: DecisionClock) -> bool:
        return clock.is_decision_due(
            self.mode, self.staged.delay, self.reconsideration_ceiling
        )

    def commit(self, time_since_last_decision: float) -> PendingAction:
        """Finalize the current window and open the next one.

        Returns the action to record: the window class with the window's
        duration as its delay.
        """
        finalized = PendingAction(self.window_class, time_since_last_decision)
        self.window_class = self.staged.class_index
        self.staged = self.staged.with_delay(0.0)
        return finalized

    def heuristic_decision(self) -> Decision:
        """Live operator output in protocol form."""
        return Decision(
            self.staged.class_index, self.delay_profile.encode(self.staged.delay)
        )


class ScriptedOperator:
    """Deterministic operator input: key states that start at given times.

    Callable as ``operator(t) -> KeyState`` so it can be handed to the runner
    as an input provider.

    Example:
        >>> operator = ScriptedOperator([(0.0, {"w"}), (2.0, set())])
        >>> operator(1.0).forward, operator(2.5).forward
        (True, False)
    """

    def __init__(self, script: Iterable[Tuple[float, object]]):
        entries: List[Tuple[float, KeyState]] = []
        for start, keys in script:
            if start < 0:
                raise ValidationError(
                    "script times must be non-negative",
                    parameter_name="start",
                    parameter_value=start,
                )
            if not isinstance(keys, KeyState):
                keys = KeyState.from_pressed(keys)
            entries.append((float(start), keys))
        entries.sort(key=lambda entry: entry[0])
        self._times: Sequence[float] = [t for t, _ in entries]
        self._keys: Sequence[KeyState] = [k for _, k in entries]

    def __call__(self, t: float) -> KeyState:
        index = bisect.bisect_right(self._times, t + TIME_EPSILON) - 1
        if index < 0:
            return NO_KEYS
        return self._keys[index]

    def __len__(self) -> int:
        return len(self._times)
