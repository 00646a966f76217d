"""
Gymnasium registration for the hallway environment.

``register_env()`` makes ``gym.make("HallwayCue-v0")`` available. Episode
length is enforced by the environment's own duration limit, so no
``max_episode_steps`` is registered.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import gymnasium

from .core.constants import ENVIRONMENT_ID
from .utils.exceptions import ValidationError

ENV_ID = ENVIRONMENT_ID
ENTRY_POINT = "hallway_nav_sim.envs.hallway_env:HallwayCueEnv"

logger = logging.getLogger(__name__)

__all__ = ["register_env", "unregister_env", "is_registered", "ENV_ID", "ENTRY_POINT"]


def is_registered(env_id: Optional[str] = None) -> bool:
    return (env_id or ENV_ID) in gymnasium.envs.registry


def register_env(
    env_id: Optional[str] = None,
    entry_point: Optional[str] = None,
    kwargs: Optional[Dict[str, Any]] = None,
    force_reregister: bool = False,
) -> str:
    """Register the environment and return its id.

    Example:
        env_id = register_env()
        env = gym.make(env_id, max_episode_duration=10.0)
    """
    effective_env_id = env_id or ENV_ID
    effective_entry_point = entry_point or ENTRY_POINT

    if "-v" not in effective_env_id:
        raise ValidationError(
            f"Environment ID '{effective_env_id}' must carry a '-vN' version suffix",
            parameter_name="env_id",
            parameter_value=effective_env_id,
        )

    if is_registered(effective_env_id):
        if not force_reregister:
            logger.debug("Environment '%s' already registered", effective_env_id)
            return effective_env_id
        unregister_env(effective_env_id)

    gymnasium.register(
        id=effective_env_id,
        entry_point=effective_entry_point,
        disable_env_checker=True,
        kwargs=dict(kwargs or {}),
    )
    logger.info(
        "Registered environment '%s' with entry_point '%s'",
        effective_env_id,
        effective_entry_point,
    )
    return effective_env_id


def unregister_env(env_id: Optional[str] = None) -> bool:
    """Remove an environment spec; returns True if one was removed."""
    effective_env_id = env_id or ENV_ID
    if not is_registered(effective_env_id):
        return False
    del gymnasium.envs.registry[effective_env_id]
    logger.debug("Unregistered environment '%s'", effective_env_id)
    return True
