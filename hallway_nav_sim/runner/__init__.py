"""Runner package: host loop driving a scheduler's fixed and frame ticks.

Exposes streaming and episode-level helpers with optional callbacks, for reuse
by scripts, notebooks and tests.
"""

from .runner import EpisodeResult, TickEvent, run_episode, stream

__all__ = ["EpisodeResult", "TickEvent", "run_episode", "stream"]
