"""Application configuration with YAML + env vars + CLI override support."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    mode: str = "stdio"  # stdio | sse | streamable-http
    host: str = "127.0.0.1"
    port: int = 8080
    verbose: bool = False


@dataclass
class TilesConfig:
    paths: list[str] = field(default_factory=list)
    extension: str = ".tile"
    recursive: bool = True


@dataclass
class ProtocolConfig:
    default_content_type: str = "application/octet-stream"
    allow_origin: str = "*"
    route_prefix: str = "/tile"


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    tiles: TilesConfig = field(default_factory=TilesConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)


# Environment variable -> "section.field"
_ENV_MAPPING: dict[str, str] = {
    "TILE_DOCS_MODE": "server.mode",
    "TILE_DOCS_HOST": "server.host",
    "TILE_DOCS_PORT": "server.port",
    "TILE_DOCS_VERBOSE": "server.verbose",
    "TILE_DOCS_PATHS": "tiles.paths",
    "TILE_DOCS_EXTENSION": "tiles.extension",
    "TILE_DOCS_DEFAULT_CONTENT_TYPE": "protocol.default_content_type",
    "TILE_DOCS_ALLOW_ORIGIN": "protocol.allow_origin",
}

_TRUE_STRINGS = ("true", "1", "yes", "on")


def load_config(
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load configuration with priority: YAML < env vars < CLI overrides.

    Args:
        config_path: Path to YAML config file. None to skip.
        cli_overrides: Dict of CLI overrides in format {"section.field": value}.
            None values are skipped (means CLI option was not provided).
    """
    config = AppConfig()

    if config_path:
        for dotted, value in _read_yaml(Path(config_path)).items():
            _assign(config, dotted, value)

    for env_name, dotted in _ENV_MAPPING.items():
        _assign(config, dotted, os.environ.get(env_name))

    for dotted, value in (cli_overrides or {}).items():
        _assign(config, dotted, value)

    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    """Flatten a YAML config file into {"section.field": value} pairs."""
    if not path.is_file():
        logger.warning("Config file not found: %s, using defaults", path)
        return {}

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        logger.warning("Config file is not a valid YAML mapping: %s", path)
        return {}

    flat: dict[str, Any] = {}
    for section_name, section_data in data.items():
        if not isinstance(section_data, dict):
            logger.debug("Ignoring non-mapping config section: %s", section_name)
            continue
        for field_name, value in section_data.items():
            flat[f"{section_name}.{field_name}"] = value

    logger.info("Loaded config from %s", path)
    return flat


def _assign(config: AppConfig, dotted: str, value: Any) -> None:
    """Set ``section.field`` on the config; unknown names and None are skipped."""
    if value is None:
        return
    section_name, _, field_name = dotted.partition(".")
    section = getattr(config, section_name, None)
    if section is None or not field_name:
        logger.debug("Unknown config key: %s", dotted)
        return

    field_info = {f.name: f for f in fields(section)}.get(field_name)
    if field_info is None:
        logger.debug("Unknown config key: %s", dotted)
        return
    setattr(section, field_name, _coerce(value, str(field_info.type)))


def _coerce(value: Any, type_name: str) -> Any:
    """Convert raw YAML, env or CLI values to the field's declared type."""
    if type_name.startswith("list"):
        if isinstance(value, str):
            # Path lists from the environment are separated like PATH
            return [part for part in value.split(os.pathsep) if part]
        return [str(item) for item in value]
    if type_name == "bool":
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)
    if type_name == "int":
        return int(value)
    return value
