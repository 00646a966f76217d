"""Public package initializer exposing the decision loop, its collaborators and
the Gymnasium environment."""

from __future__ import annotations

from typing import Dict

from .actions import AutonomousActionSource, InteractiveActionSource, ScriptedOperator
from .agent import DecisionScheduler, OutcomeIndicator
from .backends import Experience, ExperienceSource, InProcessBackend
from .config import (
    HallwayConfig,
    create_environment_from_config,
    create_scheduler,
    load_config,
)
from .core import (
    ENVIRONMENT_ID,
    PACKAGE_NAME,
    PACKAGE_VERSION,
    ActionClass,
    ControlMode,
    Decision,
    DecisionClock,
    DelayProfile,
    KeyState,
    Observation,
    PendingAction,
    SchedulerPhase,
    TerminationReason,
    TrajectoryStep,
    decode_delay,
    encode_delay,
)
from .envs import HallwayCueEnv
from .observations import ObservationBuilder
from .policies import ConstantPolicy, RandomPolicy
from .registration import ENV_ID, is_registered, register_env, unregister_env
from .runner import EpisodeResult, run_episode
from .trajectory import ReplayDriver, TrajectoryBuffer
from .world import HallwayRandomizer, HallwayWorld

__version__ = PACKAGE_VERSION


def initialize_package(
    *,
    configure_logging: bool = True,
    log_level: str = "INFO",
    auto_register_environment: bool = True,
) -> Dict[str, object]:
    """Configure logging and register the environment; return a status dict.

    Args:
        configure_logging: Install the loguru sinks and stdlib bridge
        log_level: Level for the loguru sinks
        auto_register_environment: Register ``HallwayCue-v0`` with Gymnasium
    """
    status: Dict[str, object] = {
        "package_name": PACKAGE_NAME,
        "package_version": PACKAGE_VERSION,
        "environment_id": ENVIRONMENT_ID,
        "logging_configured": False,
        "environment_registered": False,
    }

    if configure_logging:
        from .logging import setup_logging

        setup_logging(level=log_level)
        status["logging_configured"] = True

    if auto_register_environment:
        register_env()
        status["environment_registered"] = is_registered()

    return status


def get_package_info() -> Dict[str, object]:
    """Return high-level package metadata for tooling and scripts."""
    return {
        "package_name": PACKAGE_NAME,
        "package_version": PACKAGE_VERSION,
        "environment_id": ENVIRONMENT_ID,
        "environment_registered": is_registered(),
        "control_modes": [mode.value for mode in ControlMode],
    }


__all__ = [
    "__version__",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "ENVIRONMENT_ID",
    "ENV_ID",
    # Core types
    "ActionClass",
    "ControlMode",
    "Decision",
    "DecisionClock",
    "DelayProfile",
    "KeyState",
    "Observation",
    "PendingAction",
    "SchedulerPhase",
    "TerminationReason",
    "TrajectoryStep",
    "decode_delay",
    "encode_delay",
    # Decision loop
    "DecisionScheduler",
    "OutcomeIndicator",
    "InteractiveActionSource",
    "AutonomousActionSource",
    "ScriptedOperator",
    "ObservationBuilder",
    "TrajectoryBuffer",
    "ReplayDriver",
    # Collaborators
    "HallwayWorld",
    "HallwayRandomizer",
    "InProcessBackend",
    "Experience",
    "ExperienceSource",
    "ConstantPolicy",
    "RandomPolicy",
    # Environment and configuration
    "HallwayCueEnv",
    "HallwayConfig",
    "create_scheduler",
    "create_environment_from_config",
    "load_config",
    "register_env",
    "unregister_env",
    "is_registered",
    # Runner
    "run_episode",
    "EpisodeResult",
    # Package helpers
    "initialize_package",
    "get_package_info",
]
