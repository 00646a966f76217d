from .exceptions import (
    ConfigurationError,
    ErrorSeverity,
    HallwayNavSimError,
    ProtocolError,
    ReplayInterruptedError,
    StateError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "ErrorSeverity",
    "HallwayNavSimError",
    "ProtocolError",
    "ReplayInterruptedError",
    "StateError",
    "ValidationError",
]
