"""
Configuration loader with deep merge.

Precedence (lowest to highest):
1. Defaults (defined in the Pydantic schemas)
2. YAML file (--config)
3. Environment variables
4. CLI arguments

The merge is recursive so every key at every level is preserved.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .schema import AppConfig


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two config layers, recursing into nested sections.

    Neither input is modified. Where both layers hold a mapping under the
    same key the mappings are merged; any other value from override
    replaces the one in base.

        >>> deep_merge({"logging": {"level": "warn", "verbose": 0}}, {"logging": {"level": "debug"}})
        {'logging': {'level': 'debug', 'verbose': 0}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_config(config_path: Path | None) -> dict[str, Any]:
    """Read the YAML layer. No path, or an empty document, yields {}.

    Raises:
        FileNotFoundError: If config_path is given but missing.
    """
    if config_path is None:
        return {}

    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def load_env_overrides(env: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Load overrides from environment variables.

    Supported variables:
        CONCINNITAS_LOG_LEVEL: overrides logging.level
        CONCINNITAS_LOG_FILE: overrides logging.file
        CONCINNITAS_REGISTRY_URL: overrides registry.url

    Returns:
        Dictionary with overrides from env vars
    """
    env = os.environ if env is None else env
    overrides: dict[str, Any] = {}

    if log_level := env.get("CONCINNITAS_LOG_LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level.lower()

    if log_file := env.get("CONCINNITAS_LOG_FILE"):
        overrides.setdefault("logging", {})["file"] = log_file

    if registry_url := env.get("CONCINNITAS_REGISTRY_URL"):
        overrides.setdefault("registry", {})["url"] = registry_url

    return overrides


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Apply overrides from CLI arguments.

    Args:
        config_dict: Base configuration (already merged with YAML and env)
        cli_args: Dictionary with CLI arguments

    Returns:
        Configuration with CLI overrides applied
    """
    overrides: dict[str, Any] = {}

    if cli_args.get("log_file"):
        overrides.setdefault("logging", {})["file"] = cli_args["log_file"]

    if cli_args.get("verbose"):
        overrides.setdefault("logging", {})["verbose"] = cli_args["verbose"]

    return deep_merge(config_dict, overrides)


def load_config(
    config_path: Path | None = None,
    cli_args: dict[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load and validate the complete application configuration.

    Args:
        config_path: Path to the YAML configuration file
        cli_args: Dictionary with CLI arguments
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If config_path does not exist
        ValidationError: If the final configuration is invalid
    """
    cli_args = cli_args or {}

    merged = deep_merge(load_yaml_config(config_path), load_env_overrides(env))
    merged = apply_cli_overrides(merged, cli_args)

    # Pydantic fills in the defaults
    return AppConfig(**merged)
