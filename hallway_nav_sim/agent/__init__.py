from .indicator import FrameTimer, OutcomeIndicator
from .scheduler import DecisionScheduler

__all__ = ["DecisionScheduler", "FrameTimer", "OutcomeIndicator"]
