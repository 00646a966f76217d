"""Configuration package for scheduler and environment setup.

This package provides:
- Pydantic models for component configuration
- Factory functions for config-driven creation
- YAML loading of complete configurations
"""

from .component_configs import (
    AgentSettings,
    DelayConfig,
    EpisodeConfig,
    HallwayConfig,
    HallwayLayoutConfig,
    IndicatorConfig,
    RewardConfig,
    SensorConfig,
)
from .factories import (
    create_action_source,
    create_delay_profile,
    create_environment_from_config,
    create_observation_builder,
    create_randomizer,
    create_rewards,
    create_scheduler,
    create_world,
)
from .loader import DEFAULT_CONFIG_PATH, config_from_dict, dump_config, load_config

__all__ = [
    # Component configs
    "AgentSettings",
    "DelayConfig",
    "EpisodeConfig",
    "HallwayConfig",
    "HallwayLayoutConfig",
    "IndicatorConfig",
    "RewardConfig",
    "SensorConfig",
    # Factories
    "create_action_source",
    "create_delay_profile",
    "create_environment_from_config",
    "create_observation_builder",
    "create_randomizer",
    "create_rewards",
    "create_scheduler",
    "create_world",
    # Loading
    "DEFAULT_CONFIG_PATH",
    "config_from_dict",
    "dump_config",
    "load_config",
]
