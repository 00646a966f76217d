"""Core constants used throughout the `hallway_nav_sim` package.

Primitive numerical values live directly in this module. Package identifiers
are loaded from `config/constants.yaml` so the registered environment id and
version are maintained in one place.

The observation normalisation divisors below define the policy's input
contract; changing any of them invalidates previously trained policies.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import numpy as np
import yaml

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "constants.yaml"

_DEFAULT_CONFIG: Dict[str, Any] = {
    "package": {
        "name": "hallway_nav_sim",
        "version": "0.1.0",
        "environment_id": "HallwayCue-v0",
    },
    "testing": {
        "default_seeds": [7, 42, 123, 2024],
    },
}


def _load_constants_config() -> Dict[str, Any]:
    if not CONFIG_PATH.exists():
        return _DEFAULT_CONFIG

    try:
        with CONFIG_PATH.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError):
        return _DEFAULT_CONFIG

    merged = {key: dict(value) for key, value in _DEFAULT_CONFIG.items()}
    for key, value in data.items():
        if isinstance(value, dict):
            merged.setdefault(key, {}).update(value)
        else:
            merged[key] = value
    return merged


_CONFIG = _load_constants_config()

PACKAGE_NAME = _CONFIG["package"].get("name", _DEFAULT_CONFIG["package"]["name"])
PACKAGE_VERSION = _CONFIG["package"].get(
    "version", _DEFAULT_CONFIG["package"]["version"]
)
ENVIRONMENT_ID = _CONFIG["package"].get(
    "environment_id", _DEFAULT_CONFIG["package"]["environment_id"]
)
TEST_SEEDS = list(
    _CONFIG["testing"].get(
        "default_seeds", _DEFAULT_CONFIG["testing"]["default_seeds"]
    )
)


# Timing (seconds)
DEFAULT_FIXED_DT = 0.02
DEFAULT_FRAME_DT = 1.0 / 60.0
DEFAULT_MAX_EPISODE_DURATION = 30.0
# Tolerance for accumulated tick time against a threshold; 25 ticks of 0.02
# must count as 0.5 s even though the float sum lands just below it.
TIME_EPSILON = 1e-6

# Decision delays (short, typical, long); long doubles as the interactive
# reconsideration ceiling.
DEFAULT_SHORT_DELAY = 0.2
DEFAULT_TYPICAL_DELAY = 0.5
DEFAULT_LONG_DELAY = 3.0
DELAY_PARAMETER_RANGE = (-1.0, 1.0)

# Rewards (magnitudes; the scheduler negates costs)
DEFAULT_TICK_COST = 0.01
DEFAULT_DECISION_COST = 0.1
DEFAULT_TIMEOUT_PENALTY = 1.0
DEFAULT_WALL_CONTACT_PENALTY = 0.05
DEFAULT_GOAL_REWARD = 0.0
DEFAULT_WRONG_TARGET_REWARD = 0.0

# Agent body
DEFAULT_RUN_SPEED = 1.5
DEFAULT_ROTATION_SPEED = 200.0  # degrees per second
DEFAULT_LINEAR_DRAG = 10.0  # per second, exponential decay
DEFAULT_SENSOR_RADIUS = 10.0

# Observation contract
SCALAR_OBSERVATION_SIZE = 7
ENTITY_FEATURE_SIZE = 4
DEFAULT_MAX_ENTITIES = 20
VELOCITY_NORMALIZATION_FACTOR = 15.0  # velocity / run_speed / 15
POSITION_X_NORMALIZATION = 10.0
POSITION_Z_NORMALIZATION = 25.0
ORIENTATION_HALF_TURN = 180.0  # yaw / 180 - 1
SCALAR_OBSERVATION_LABELS = (
    "Time",
    "Vel X",
    "Vel Z",
    "Ang Vel",
    "Pos X",
    "Pos Z",
    "Rot",
)
CUE_KIND_FLAG = 1.0
TARGET_KIND_FLAG = 0.0
UNDEFINED_VALUE_FLAG = 0.0

# Hallway layout (area-local coordinates, metres)
HALLWAY_HALF_WIDTH = 10.0
HALLWAY_HALF_LENGTH = 25.0
AGENT_RADIUS = 0.5
AGENT_SPAWN_EXTENT = 5.0
CUE_POSITIONS = ((-4.0, -15.0), (0.0, -15.0), (4.0, -15.0))
TARGET_POSITIONS = ((-5.0, 20.0), (5.0, 20.0))
TARGET_TRIGGER_RADIUS = 1.5

# Outcome indicator
DEFAULT_INDICATOR_DURATION = 0.5

# Interactive key bindings: forward > turn right > turn left
KEY_FORWARD = "w"
KEY_TURN_RIGHT = "d"
KEY_TURN_LEFT = "a"

OBSERVATION_DTYPE = np.float32

LOG_LEVEL_DEFAULT = "INFO"
