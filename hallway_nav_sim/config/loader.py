"""YAML loading for ``HallwayConfig``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..utils.exceptions import ConfigurationError
from .component_configs import HallwayConfig

__all__ = ["DEFAULT_CONFIG_PATH", "load_config", "config_from_dict", "dump_config"]

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default.yaml"

logger = logging.getLogger(__name__)


def config_from_dict(data: Optional[Dict[str, Any]]) -> HallwayConfig:
    """Validate a plain mapping into a HallwayConfig.

    Raises:
        ConfigurationError: If the mapping does not validate
    """
    try:
        return HallwayConfig.model_validate(data or {})
    except PydanticValidationError as exc:
        raise ConfigurationError(
            f"Invalid hallway configuration: {exc.error_count()} error(s)\n{exc}",
            config_parameter="config",
            invalid_value=data,
        ) from exc


def load_config(path: Optional[Union[str, Path]] = None) -> HallwayConfig:
    """Load a HallwayConfig from a YAML file; the packaged defaults if None.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read configuration file {config_path}",
            config_parameter="path",
            invalid_value=str(config_path),
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Malformed YAML in {config_path}: {exc}",
            config_parameter="path",
            invalid_value=str(config_path),
        ) from exc

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(
            f"Top level of {config_path} must be a mapping",
            config_parameter="path",
            invalid_value=type(data).__name__,
        )
    config = config_from_dict(data)
    logger.debug("Loaded configuration from %s (mode=%s)", config_path, config.episode.mode)
    return config


def dump_config(config: HallwayConfig, path: Union[str, Path]) -> Path:
    """Write a HallwayConfig to YAML and return the path."""
    target = Path(path)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(config.model_dump(mode="json"), handle, sort_keys=False)
    return target
