"""
Factory functions for creating components, schedulers and environments from
configuration models.

Example:
    >>> from hallway_nav_sim.config import load_config, create_scheduler
    >>>
    >>> config = load_config("conf/interactive.yaml")
    >>> scheduler = create_scheduler(config)
"""

from typing import Optional

from ..actions import AutonomousActionSource, InteractiveActionSource
from ..actions.base import ActionSource
from ..agent import DecisionScheduler, OutcomeIndicator
from ..backends import InProcessBackend
from ..core.delay_mapping import DelayProfile
from ..envs import HallwayCueEnv
from ..interfaces.policy import Policy
from ..interfaces.protocol import DecisionProtocol
from ..observations import ObservationBuilder
from ..rewards import StepCostReward
from ..utils.exceptions import ConfigurationError, ValidationError
from ..world import HallwayRandomizer, HallwayWorld
from .component_configs import (
    AgentSettings,
    DelayConfig,
    EpisodeConfig,
    HallwayConfig,
    HallwayLayoutConfig,
    RewardConfig,
    SensorConfig,
)

__all__ = [
    "create_delay_profile",
    "create_rewards",
    "create_world",
    "create_randomizer",
    "create_observation_builder",
    "create_action_source",
    "create_scheduler",
    "create_environment_from_config",
]


def create_delay_profile(config: DelayConfig) -> DelayProfile:
    """Create the delay mapping anchors from configuration."""
    try:
        return DelayProfile(
            short=config.short_delay,
            typical=config.typical_delay,
            long=config.long_delay,
        )
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid delay configuration: {exc}",
            config_parameter="delay",
            invalid_value=config.model_dump(),
        ) from exc


def create_rewards(config: RewardConfig) -> StepCostReward:
    """Create the step-cost reward from configuration."""
    return StepCostReward(
        tick_cost=config.tick_cost,
        decision_cost=config.decision_cost,
        timeout_penalty=config.timeout_penalty,
        wall_contact_penalty=config.wall_contact_penalty,
        goal_reward=config.goal_reward,
        wrong_target_reward=config.wrong_target_reward,
    )


def create_world(agent: AgentSettings, layout: HallwayLayoutConfig) -> HallwayWorld:
    """Create the hallway physics and trigger model.

    Raises:
        ConfigurationError: If the agent does not fit inside the hallway
    """
    if agent.agent_radius >= min(layout.half_width, layout.half_length):
        raise ConfigurationError(
            "agent_radius must be smaller than the hallway half extents",
            config_parameter="agent.agent_radius",
            invalid_value=agent.agent_radius,
        )
    return HallwayWorld(
        run_speed=agent.run_speed,
        rotation_speed=agent.rotation_speed,
        linear_drag=agent.linear_drag,
        half_width=layout.half_width,
        half_length=layout.half_length,
        agent_radius=agent.agent_radius,
        trigger_radius=layout.trigger_radius,
    )


def create_randomizer(layout: HallwayLayoutConfig) -> Optional[HallwayRandomizer]:
    """Create the scene randomiser, or None for a fixed scene."""
    if not layout.randomize:
        return None
    return HallwayRandomizer(spawn_extent=layout.spawn_extent)


def create_observation_builder(
    sensor: SensorConfig, agent: AgentSettings
) -> ObservationBuilder:
    """Create the observation builder from sensing settings."""
    return ObservationBuilder(
        sensor_radius=agent.sensor_radius,
        run_speed=agent.run_speed,
        max_entities=sensor.max_entities,
        debug_labels=sensor.debug_labels,
    )


def create_action_source(
    episode: EpisodeConfig, delay_profile: DelayProfile
) -> ActionSource:
    """Create the action source for the configured control mode.

    Raises:
        ConfigurationError: If the mode is unknown
    """
    if episode.mode == "interactive":
        return InteractiveActionSource(
            reconsideration_ceiling=episode.reconsideration_ceiling,
            delay_profile=delay_profile,
        )
    elif episode.mode == "autonomous":
        return AutonomousActionSource(delay_profile)
    else:
        raise ConfigurationError(
            f"Invalid control mode: {episode.mode}. Must be 'interactive' or 'autonomous'.",
            config_parameter="episode.mode",
            invalid_value=episode.mode,
        )


def create_scheduler(
    config: Optional[HallwayConfig] = None,
    protocol: Optional[DecisionProtocol] = None,
    policy: Optional[Policy] = None,
) -> DecisionScheduler:
    """Create a fully wired DecisionScheduler.

    Args:
        config: Complete configuration (defaults if None)
        protocol: Training-step protocol; defaults to an InProcessBackend
        policy: Policy for the default backend (ignored if protocol given)

    Returns:
        DecisionScheduler ready for ``begin_episode()``

    Example:
        >>> scheduler = create_scheduler(HallwayConfig(), policy=ConstantPolicy())
        >>> scheduler.begin_episode(seed=0)
    """
    config = config or HallwayConfig()
    if protocol is None:
        protocol = InProcessBackend(policy=policy)

    delay_profile = create_delay_profile(config.delay)
    world = create_world(config.agent, config.layout)
    return DecisionScheduler(
        world=world,
        action_source=create_action_source(config.episode, delay_profile),
        protocol=protocol,
        observation_builder=create_observation_builder(config.sensor, config.agent),
        rewards=create_rewards(config.reward),
        randomizer=create_randomizer(config.layout),
        indicator=OutcomeIndicator(flash_duration=config.indicator.flash_duration),
        max_episode_duration=config.episode.max_duration,
        fixed_dt=config.episode.fixed_dt,
        frame_dt=config.episode.frame_dt,
    )


def create_environment_from_config(
    config: Optional[HallwayConfig] = None, render_mode: Optional[str] = None
) -> HallwayCueEnv:
    """Create a HallwayCueEnv from configuration.

    The environment is policy driven, so the configured mode must be
    'autonomous'.

    Raises:
        ConfigurationError: If the configuration requests interactive mode
    """
    config = config or HallwayConfig()
    if config.episode.mode != "autonomous":
        raise ConfigurationError(
            "HallwayCueEnv only supports autonomous mode",
            config_parameter="episode.mode",
            invalid_value=config.episode.mode,
        )
    world = create_world(config.agent, config.layout)
    return HallwayCueEnv(
        world=world,
        randomizer=create_randomizer(config.layout),
        randomize_scene=config.layout.randomize,
        observation_builder=create_observation_builder(config.sensor, config.agent),
        rewards=create_rewards(config.reward),
        delay_profile=create_delay_profile(config.delay),
        max_episode_duration=config.episode.max_duration,
        fixed_dt=config.episode.fixed_dt,
        max_entities=config.sensor.max_entities,
        render_mode=render_mode,
    )
