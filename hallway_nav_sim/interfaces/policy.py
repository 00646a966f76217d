"""
Policy Protocol Definition.

Lightweight abstraction for action selection given observations. This enables
plugging in scripted controllers and learned policies interchangeably behind
the in-process backend.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hallway_nav_sim.core.types import Decision, Observation


@runtime_checkable
class Policy(Protocol):
    """Protocol defining a stochastic or deterministic policy.

    Minimal interface:
      - reset(seed): optional seeding hook
      - select_action(observation): returns a Decision whose delay parameter
        is expected in [-1, 1] (values outside are clamped downstream)
    """

    def reset(self, *, seed: int | None = None) -> None:
        pass

    def select_action(self, observation: Observation) -> Decision:
        pass
