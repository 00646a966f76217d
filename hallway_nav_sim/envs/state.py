"""Environment lifecycle state enum."""

from __future__ import annotations

from enum import Enum

__all__ = ["EnvironmentState"]


class EnvironmentState(Enum):
    """Formal states for environment lifecycle."""

    CREATED = "created"  # After __init__(), must reset() before step()
    READY = "ready"  # After reset(), can step()
    TERMINATED = "terminated"  # A target pad was reached
    TRUNCATED = "truncated"  # Episode duration elapsed
    CLOSED = "closed"  # Resources released, terminal state
