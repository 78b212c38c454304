"""
Configuration loader for SigCop.

Handles loading configuration from YAML files.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import AllCopsConfig, CopConfig, SigCopConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".sigcop.yml"


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def config_from_dict(raw_config: dict[str, Any], known_cops: list[str] | None = None) -> SigCopConfig:
    """Build a config from a RuboCop-style mapping."""
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration must be a mapping of sections")

    raw_config = dict(raw_config)
    all_cops = raw_config.pop("AllCops", None) or {}
    try:
        cops = {name: CopConfig(**(section or {})) for name, section in raw_config.items()}
        config = SigCopConfig(all_cops=AllCopsConfig(**all_cops), cops=cops)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Configuration validation failed:\n{e}")

    if known_cops is not None:
        for name in cops:
            if name not in known_cops:
                logger.warning(f"Unknown cop in configuration: {name}")

    return config


def load_config_from_yaml(config_path: Path, known_cops: list[str] | None = None) -> SigCopConfig:
    """Load configuration from a YAML file."""
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if raw_config is None:
        raise ConfigurationError("Configuration file is empty")

    return config_from_dict(raw_config, known_cops)


def generate_default_config(output_path: Path, cop_names: list[str]) -> None:
    """Generate a default configuration file."""
    default_config: dict[str, Any] = {
        "AllCops": {
            "Include": AllCopsConfig().include,
            "Exclude": AllCopsConfig().exclude,
        },
    }
    for name in cop_names:
        default_config[name] = {"Enabled": True}
        if name.endswith("MethodsShouldHaveSignatures"):
            default_config[name]["LineLengthLimit"] = 120

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)
