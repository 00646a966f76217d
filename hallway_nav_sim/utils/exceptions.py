"""
Exception hierarchy for hallway_nav_sim.

Only programming-contract violations raise. Malformed numeric input from the
decision protocol (delay parameters, negative delays) is clamped at the call
site instead of raising.
"""

import enum
import logging
import time
import uuid
from typing import Any, Dict, Optional, Union

RECOVERY_SUGGESTION_MAX_LENGTH = 500

__all__ = [
    "HallwayNavSimError",
    "ValidationError",
    "StateError",
    "ConfigurationError",
    "ProtocolError",
    "ReplayInterruptedError",
    "ErrorSeverity",
]


class ErrorSeverity(enum.IntEnum):
    """Severity levels used to pick the log level of an error."""

    LOW = 1  # Minor issues like validation warnings
    MEDIUM = 2  # Recoverable errors
    HIGH = 3  # Contract violations
    CRITICAL = 4  # Corrupted state, the episode cannot continue

    def should_escalate(self) -> bool:
        return self in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL)


class HallwayNavSimError(Exception):
    """Base exception for all hallway_nav_sim errors.

    Carries a severity, an optional context dictionary and an optional
    recovery suggestion so callers can log a single structured line.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        severity: Union[ErrorSeverity, str] = ErrorSeverity.MEDIUM,
        **kwargs: Any,
    ):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})
        if isinstance(severity, str):
            try:
                self.severity = ErrorSeverity[severity.upper()]
            except KeyError:
                self.severity = ErrorSeverity.MEDIUM
        else:
            self.severity = severity
        self.timestamp = time.time()
        self.error_id = str(uuid.uuid4())
        self.recovery_suggestion: Optional[str] = None
        self.error_details: Dict[str, Any] = {
            k: v
            for k, v in kwargs.items()
            if k not in {"message", "context", "severity"}
        }
        self.logged = False

    def get_error_details(self) -> Dict[str, Any]:
        """Return a JSON-friendly description of the error."""
        details = {
            "error_id": self.error_id,
            "message": self.message,
            "timestamp": self.timestamp,
            "severity": self.severity.name,
            "exception_type": self.__class__.__name__,
            "context": dict(self.context),
            "error_details": dict(self.error_details),
        }
        if self.recovery_suggestion:
            details["recovery_suggestion"] = self.recovery_suggestion
        return details

    def set_recovery_suggestion(self, suggestion: str) -> None:
        if len(suggestion) > RECOVERY_SUGGESTION_MAX_LENGTH:
            suggestion = suggestion[: RECOVERY_SUGGESTION_MAX_LENGTH - 3] + "..."
        self.recovery_suggestion = suggestion
        self.error_details["has_recovery_guidance"] = True

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def log_error(self, logger: Optional[logging.Logger] = None) -> None:
        """Log the error once at a level matching its severity."""
        if self.logged:
            return
        if logger is None:
            logger = logging.getLogger("hallway_nav_sim.exceptions")

        message = f"[{self.error_id}] {self.message}"
        if self.context:
            message += f" | Context: {self.context}"
        if self.recovery_suggestion:
            message += f" | Suggestion: {self.recovery_suggestion}"

        if self.severity == ErrorSeverity.LOW:
            logger.info(message)
        elif self.severity == ErrorSeverity.MEDIUM:
            logger.warning(message)
        elif self.severity == ErrorSeverity.HIGH:
            logger.error(message)
        else:
            logger.critical(message)
        self.logged = True


class ValidationError(HallwayNavSimError, ValueError):
    """Raised when a constructor argument or configured value is invalid."""

    def __init__(
        self,
        message: str,
        parameter_name: Optional[str] = None,
        parameter_value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, severity=ErrorSeverity.LOW, **kwargs)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value
        if parameter_name is not None:
            self.add_context("parameter_name", parameter_name)
            self.add_context("parameter_value", repr(parameter_value))


class StateError(HallwayNavSimError):
    """Raised when an operation is invalid for the current lifecycle phase."""

    def __init__(
        self,
        message: str,
        current_state: Optional[str] = None,
        expected_state: Optional[str] = None,
        **kwargs: Any,
    ):
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.expected_state = expected_state
        if current_state is not None:
            self.add_context("current_state", current_state)
        if expected_state is not None:
            self.add_context("expected_state", expected_state)


class ConfigurationError(HallwayNavSimError):
    """Raised when a configuration cannot be turned into working components."""

    def __init__(
        self,
        message: str,
        config_parameter: Optional[str] = None,
        invalid_value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, severity=ErrorSeverity.MEDIUM, **kwargs)
        self.config_parameter = config_parameter
        self.invalid_value = invalid_value
        if config_parameter is not None:
            self.add_context("config_parameter", config_parameter)
            self.set_recovery_suggestion(
                f"Check the '{config_parameter}' setting against the config model defaults."
            )


class ProtocolError(StateError):
    """Raised when the request/advance decision handshake is misused."""


class ReplayInterruptedError(StateError):
    """Raised when an episode reset is attempted while a replay is draining.

    A partially replayed trajectory has no well-defined recovery, so this is
    reported as critical rather than handled.
    """

    def __init__(self, message: str, remaining_steps: int = 0, **kwargs: Any):
        kwargs["severity"] = ErrorSeverity.CRITICAL
        super().__init__(
            message,
            current_state="replaying",
            expected_state="terminated",
            **kwargs,
        )
        self.remaining_steps = remaining_steps
        self.add_context("remaining_steps", remaining_steps)
