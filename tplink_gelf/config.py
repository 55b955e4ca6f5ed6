"""Configuration - frozen dataclass built from env vars and an optional YAML file."""

import logging
import os
from dataclasses import dataclass

import yaml

from tplink_gelf.errors import ConfigError
from tplink_gelf.sink import COMPRESSION_ALGORITHMS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    graylog_ip: str = ""
    graylog_port: int = 12201
    listen_host: str = "0.0.0.0"
    listen_port: int = 514
    buffer_size: int = 65536
    default_level: int = 6
    compression: str = "zlib"
    max_errors: int = 100
    dashboard_port: int = 8080

    def __post_init__(self):
        if not self.graylog_ip:
            raise ConfigError("Specify GRAYLOG_IP for the address to send to")
        if not 0 <= self.default_level <= 7:
            raise ConfigError(f"default_level must be 0-7, got {self.default_level}")
        if self.compression not in COMPRESSION_ALGORITHMS:
            raise ConfigError(f"compression must be one of {', '.join(COMPRESSION_ALGORITHMS)}")


# (field, env var, converter)
_SETTINGS = (
    ("graylog_ip", "GRAYLOG_IP", str),
    ("graylog_port", "GRAYLOG_PORT", int),
    ("listen_host", "LISTEN_HOST", str),
    ("listen_port", "LISTEN_PORT", int),
    ("buffer_size", "BUFFER_SIZE", int),
    ("default_level", "DEFAULT_LOG_LEVEL", int),
    ("compression", "GELF_COMPRESSION", lambda v: str(v).lower()),
    ("max_errors", "MAX_ERRORS", int),
    ("dashboard_port", "DASHBOARD_PORT", int),
)


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config; env vars override YAML values, which override defaults."""
    yaml_data = yaml_data or {}
    values = {}
    for name, env_var, convert in _SETTINGS:
        raw = os.environ.get(env_var)
        if raw is None or raw == "":
            raw = yaml_data.get(name)
        if raw is None:
            continue
        try:
            values[name] = convert(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {name}: {raw!r}") from exc
    return Config(**values)
