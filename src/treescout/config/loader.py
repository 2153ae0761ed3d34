#
# config/loader.py
#
"""
Loads and validates treescout TOML configuration.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

import attrs
import structlog

from treescout.config.models import DiscoveryConfig, GlobalConfig, SelectionConfig, TreescoutConfig
from treescout.exceptions import ConfigurationError
from treescout.telemetry import StructLogger

log: StructLogger = structlog.get_logger("config.loader")

ENV_LOG_LEVEL = "TREESCOUT_LOG_LEVEL"
ENV_ENGINE_ID = "TREESCOUT_ENGINE_ID"


def _build(model: type, section: Any, section_name: str, path: Path) -> Any:
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Section [{section_name}] must be a table", str(path))
    known = {a.name for a in attrs.fields(model)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigurationError(f"Unknown keys in [{section_name}]: {unknown}", str(path))
    try:
        return model(**section)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid [{section_name}] section: {e}", str(path)) from e


def _apply_env_overrides(data: dict[str, Any]) -> None:
    overrides = {
        ENV_LOG_LEVEL: ("global", "log_level"),
        ENV_ENGINE_ID: ("discovery", "engine_id"),
    }
    for env_var, (section, key) in overrides.items():
        value = os.environ.get(env_var)
        if value:
            log.debug("Applying environment override", env_var=env_var, section=section, key=key)
            data.setdefault(section, {})[key] = value


def load_config(config_path: Path) -> TreescoutConfig:
    """
    Reads a TOML file into a TreescoutConfig.

    Environment variables override the file for the global log level and
    the engine id.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid TOML,
            or fails validation.
    """
    path = Path(config_path)
    log.debug("Loading configuration", path=str(path), emoji_key="load")
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as e:
        raise ConfigurationError("Configuration file not found", str(path)) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file: {e}", str(path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML: {e}", str(path)) from e

    unknown_sections = sorted(set(data) - {"global", "discovery", "selection"})
    if unknown_sections:
        raise ConfigurationError(f"Unknown sections: {unknown_sections}", str(path))

    _apply_env_overrides(data)

    config = TreescoutConfig(
        global_config=_build(GlobalConfig, data.get("global"), "global", path),
        discovery=_build(DiscoveryConfig, data.get("discovery"), "discovery", path),
        selection=_build(SelectionConfig, data.get("selection"), "selection", path),
    )
    log.info("Configuration loaded", path=str(path), engine_id=config.discovery.engine_id)
    return config


def default_config() -> TreescoutConfig:
    """Defaults plus environment overrides, for runs without a config file."""
    data: dict[str, Any] = {}
    _apply_env_overrides(data)
    try:
        return TreescoutConfig(
            global_config=GlobalConfig(**data.get("global", {})),
            discovery=DiscoveryConfig(**data.get("discovery", {})),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid environment override: {e}") from e

# 🔼⚙️
