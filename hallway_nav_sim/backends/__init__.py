"""Training-step protocol backends."""

from .in_process import Experience, ExperienceSource, InProcessBackend

__all__ = ["Experience", "ExperienceSource", "InProcessBackend"]
