"""
Pydantic configuration models for the hallway decision loop.

Every tunable of the scheduler and its collaborators lives in one of these
models; ``HallwayConfig`` composes them and can be loaded from YAML.

Example:
    >>> from hallway_nav_sim.config import HallwayConfig, create_scheduler
    >>>
    >>> config = HallwayConfig(episode=EpisodeConfig(mode="autonomous"))
    >>> scheduler = create_scheduler(config)
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.constants import (
    AGENT_RADIUS,
    AGENT_SPAWN_EXTENT,
    DEFAULT_DECISION_COST,
    DEFAULT_FIXED_DT,
    DEFAULT_FRAME_DT,
    DEFAULT_GOAL_REWARD,
    DEFAULT_INDICATOR_DURATION,
    DEFAULT_LINEAR_DRAG,
    DEFAULT_LONG_DELAY,
    DEFAULT_MAX_ENTITIES,
    DEFAULT_MAX_EPISODE_DURATION,
    DEFAULT_ROTATION_SPEED,
    DEFAULT_RUN_SPEED,
    DEFAULT_SENSOR_RADIUS,
    DEFAULT_SHORT_DELAY,
    DEFAULT_TICK_COST,
    DEFAULT_TIMEOUT_PENALTY,
    DEFAULT_TYPICAL_DELAY,
    DEFAULT_WALL_CONTACT_PENALTY,
    DEFAULT_WRONG_TARGET_REWARD,
    HALLWAY_HALF_LENGTH,
    HALLWAY_HALF_WIDTH,
    TARGET_TRIGGER_RADIUS,
)

__all__ = [
    "DelayConfig",
    "RewardConfig",
    "AgentSettings",
    "SensorConfig",
    "HallwayLayoutConfig",
    "EpisodeConfig",
    "IndicatorConfig",
    "HallwayConfig",
]


class DelayConfig(BaseModel):
    """Anchors of the delay-parameter mapping, in seconds.

    Attributes:
        short_delay: Delay for parameter -1
        typical_delay: Delay for parameter 0
        long_delay: Delay for parameter +1; also the interactive
            reconsideration ceiling

    Example:
        >>> config = DelayConfig(short_delay=0.1, typical_delay=0.4, long_delay=2.0)
    """

    short_delay: float = Field(
        default=DEFAULT_SHORT_DELAY, ge=0.0, description="Delay for parameter -1 (s)"
    )
    typical_delay: float = Field(
        default=DEFAULT_TYPICAL_DELAY, ge=0.0, description="Delay for parameter 0 (s)"
    )
    long_delay: float = Field(
        default=DEFAULT_LONG_DELAY, gt=0.0, description="Delay for parameter +1 (s)"
    )

    @model_validator(mode="after")
    def validate_ordering(self):
        """Anchors must be strictly increasing."""
        if not (self.short_delay < self.typical_delay < self.long_delay):
            raise ValueError(
                "delays must satisfy short_delay < typical_delay < long_delay, got "
                f"({self.short_delay}, {self.typical_delay}, {self.long_delay})"
            )
        return self

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class RewardConfig(BaseModel):
    """Reward magnitudes; costs are non-negative and negated when applied.

    Attributes:
        tick_cost: Cost charged every fixed tick
        decision_cost: Cost charged per committed decision
        timeout_penalty: Cost charged once when the episode times out
        wall_contact_penalty: Cost per second of wall contact
        goal_reward: Reward for reaching the pad that matches the cues
        wrong_target_reward: Reward for reaching the other pad
    """

    tick_cost: float = Field(default=DEFAULT_TICK_COST, ge=0.0)
    decision_cost: float = Field(default=DEFAULT_DECISION_COST, ge=0.0)
    timeout_penalty: float = Field(default=DEFAULT_TIMEOUT_PENALTY, ge=0.0)
    wall_contact_penalty: float = Field(default=DEFAULT_WALL_CONTACT_PENALTY, ge=0.0)
    goal_reward: float = Field(
        default=DEFAULT_GOAL_REWARD, description="Outcome reward for the correct pad"
    )
    wrong_target_reward: float = Field(
        default=DEFAULT_WRONG_TARGET_REWARD,
        description="Outcome reward for the incorrect pad",
    )

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class AgentSettings(BaseModel):
    """Agent body and sensing settings.

    Attributes:
        run_speed: Forward impulse per tick; also the velocity normaliser
        rotation_speed: Turn rate in degrees per second
        linear_drag: Exponential velocity decay rate per second
        sensor_radius: Perception radius for cue and target entities
        agent_radius: Collision radius against the hallway walls
    """

    run_speed: float = Field(default=DEFAULT_RUN_SPEED, gt=0.0)
    rotation_speed: float = Field(default=DEFAULT_ROTATION_SPEED, gt=0.0)
    linear_drag: float = Field(default=DEFAULT_LINEAR_DRAG, ge=0.0)
    sensor_radius: float = Field(default=DEFAULT_SENSOR_RADIUS, gt=0.0)
    agent_radius: float = Field(default=AGENT_RADIUS, ge=0.0)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class SensorConfig(BaseModel):
    """Observation buffer settings.

    Attributes:
        max_entities: Entity buffer capacity; nearer entities win
        debug_labels: Log labelled observation dumps at DEBUG level
    """

    max_entities: int = Field(default=DEFAULT_MAX_ENTITIES, ge=1)
    debug_labels: bool = Field(default=False)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class HallwayLayoutConfig(BaseModel):
    """Hallway geometry and scene randomisation.

    Attributes:
        half_width: Half extent of the hallway along x
        half_length: Half extent of the hallway along z
        trigger_radius: Distance at which a target pad triggers
        spawn_extent: Side of the square the agent spawns in
        randomize: Randomise cues, pads and start pose every episode
    """

    half_width: float = Field(default=HALLWAY_HALF_WIDTH, gt=0.0)
    half_length: float = Field(default=HALLWAY_HALF_LENGTH, gt=0.0)
    trigger_radius: float = Field(default=TARGET_TRIGGER_RADIUS, gt=0.0)
    spawn_extent: float = Field(default=AGENT_SPAWN_EXTENT, ge=0.0)
    randomize: bool = Field(default=True)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class EpisodeConfig(BaseModel):
    """Episode timing and control mode.

    Attributes:
        mode: 'interactive' (operator keys, replayed) or 'autonomous' (policy)
        max_duration: Simulated seconds before the episode times out
        fixed_dt: Physics tick length in seconds
        frame_dt: Render frame length in seconds
        reconsideration_ceiling: Interactive forced-commit interval; None
            uses the long delay anchor
    """

    mode: Literal["interactive", "autonomous"] = Field(default="autonomous")
    max_duration: float = Field(default=DEFAULT_MAX_EPISODE_DURATION, gt=0.0)
    fixed_dt: float = Field(default=DEFAULT_FIXED_DT, gt=0.0)
    frame_dt: float = Field(default=DEFAULT_FRAME_DT, gt=0.0)
    reconsideration_ceiling: Optional[float] = Field(default=None, gt=0.0)

    @model_validator(mode="after")
    def validate_tick_lengths(self):
        """The episode must cover at least one fixed tick."""
        if self.fixed_dt > self.max_duration:
            raise ValueError(
                f"fixed_dt ({self.fixed_dt}) must not exceed max_duration "
                f"({self.max_duration})"
            )
        return self

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class IndicatorConfig(BaseModel):
    """Outcome indicator flash settings."""

    flash_duration: float = Field(default=DEFAULT_INDICATOR_DURATION, ge=0.0)

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class HallwayConfig(BaseModel):
    """Complete configuration for one scheduler or environment.

    Example:
        >>> config = HallwayConfig(
        ...     episode=EpisodeConfig(mode="interactive", max_duration=10.0),
        ...     reward=RewardConfig(goal_reward=1.0, wrong_target_reward=-1.0),
        ... )
    """

    delay: DelayConfig = Field(default_factory=DelayConfig)
    reward: RewardConfig = Field(default_factory=RewardConfig)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    sensor: SensorConfig = Field(default_factory=SensorConfig)
    layout: HallwayLayoutConfig = Field(default_factory=HallwayLayoutConfig)
    episode: EpisodeConfig = Field(default_factory=EpisodeConfig)
    indicator: IndicatorConfig = Field(default_factory=IndicatorConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "delay": {"short_delay": 0.2, "typical_delay": 0.5, "long_delay": 3.0},
                "reward": {"tick_cost": 0.01, "decision_cost": 0.1},
                "episode": {"mode": "autonomous", "max_duration": 30.0},
                "sensor": {"max_entities": 20},
            }
        },
    )
