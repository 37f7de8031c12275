"""
live_resolver configuration system.

Priority order (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Configuration file (YAML)
4. Default values
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from live_resolver.transport import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


# Valid log levels
VALID_LOG_LEVELS = {"debug", "info", "warning", "error"}

# Environment variable mappings
ENV_MAPPINGS = {
    # HTTP
    "LIVE_RESOLVER_HTTP_TIMEOUT": ("http", "timeout"),
    "LIVE_RESOLVER_USER_AGENT": ("http", "user_agent"),
    # Logging
    "LIVE_RESOLVER_LOG_LEVEL": ("logging", "level"),
}


class ConfigError(Exception):
    """Configuration error."""

    pass


@dataclass
class HttpConfig:
    """Transport configuration."""

    timeout: float = DEFAULT_TIMEOUT  # Seconds per request
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class Config:
    """Complete live_resolver configuration."""

    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # Extra request headers per platform key, e.g. {"bilibili": {"Cookie": "..."}}
    headers: dict[str, dict[str, str]] = field(default_factory=dict)

    def headers_for(self, platform: str) -> Optional[dict[str, str]]:
        """Configured headers for a platform, or None."""
        return dict(self.headers[platform]) if self.headers.get(platform) else None


def validate_config(config: Config) -> None:
    """
    Validate configuration.

    Raises:
        ConfigError: If configuration is invalid
    """
    errors = []

    # HTTP
    if isinstance(config.http.timeout, bool) or not isinstance(config.http.timeout, (int, float)):
        errors.append(f"Invalid HTTP timeout: {config.http.timeout!r}")
    elif config.http.timeout <= 0:
        errors.append(f"HTTP timeout must be positive: {config.http.timeout}")

    if not isinstance(config.http.user_agent, str) or not config.http.user_agent.strip():
        errors.append("User-Agent must be a non-empty string")

    # Headers
    if not isinstance(config.headers, dict):
        errors.append("headers must be a mapping of platform -> {name: value}")
    else:
        for platform, headers in config.headers.items():
            if not isinstance(headers, dict):
                errors.append(f"headers.{platform} must be a mapping")
                continue
            for name, value in headers.items():
                if not isinstance(name, str) or not isinstance(value, str):
                    errors.append(f"headers.{platform}.{name} must be a string")

    # Logging
    if str(config.logging.level).lower() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid log level: {config.logging.level}. "
            f"Valid values: {sorted(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigError("Configuration validation failed:\n  - " + "\n  - ".join(errors))


def load_yaml_config(path: Path) -> dict:
    """
    Load configuration from YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file cannot be read or parsed
    """
    if not path.exists():
        logger.debug(f"Config file not found: {path}")
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML config: {e}")
    except IOError as e:
        raise ConfigError(f"Error reading config file: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _set_nested(d: dict, path: tuple, value: Any) -> None:
    """Set a nested dictionary value using a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def load_env_config() -> dict:
    """
    Load configuration from environment variables.

    Returns:
        Configuration dictionary with values from environment
    """
    result: dict = {}

    for env_var, path in ENV_MAPPINGS.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue
        if env_var == "LIVE_RESOLVER_HTTP_TIMEOUT":
            try:
                value = float(value)
            except ValueError:
                logger.warning(f"Invalid number for {env_var}: {value}")
                continue
        _set_nested(result, path, value)

    return result


def _deep_merge(base: dict, override: dict) -> None:
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def merge_configs(*configs: dict) -> dict:
    """
    Deep merge multiple configuration dictionaries.
    Later configs override earlier ones.
    """
    result: dict = {}
    for config in configs:
        _deep_merge(result, config)
    return result


def _normalize_headers(headers: Any) -> Any:
    """Stringify platform keys; YAML reads `173:` as an int."""
    if not isinstance(headers, dict):
        return headers
    return {str(platform): value for platform, value in headers.items()}


def dict_to_config(d: dict) -> Config:
    """
    Convert a dictionary to Config dataclass.

    Raises:
        ConfigError: If a section is not a mapping
    """
    config = Config()
    errors = []

    for section in ("http", "logging"):
        if d.get(section) is not None and not isinstance(d[section], dict):
            errors.append(f"'{section}' section must be a mapping, got {d[section]!r}")
    if errors:
        raise ConfigError("Configuration validation failed:\n  - " + "\n  - ".join(errors))

    # HTTP
    if "http" in d:
        h = d["http"] or {}
        config.http.timeout = h.get("timeout", config.http.timeout)
        config.http.user_agent = h.get("user_agent", config.http.user_agent)

    # Logging
    if "logging" in d:
        config.logging.level = (d["logging"] or {}).get("level", config.logging.level)

    # Headers
    if "headers" in d:
        config.headers = _normalize_headers(d["headers"] or {})

    return config


def load_config(
    config_path: Optional[Path] = None,
    cli_args: Optional[dict] = None,
) -> Config:
    """
    Load configuration from all sources.

    Priority (highest to lowest):
    1. CLI arguments
    2. Environment variables
    3. Config file
    4. Defaults

    Args:
        config_path: Path to YAML config file
        cli_args: Dictionary of CLI arguments

    Returns:
        Merged Config object

    Raises:
        ConfigError: If configuration is invalid
    """
    configs = []

    if config_path:
        file_config = load_yaml_config(config_path)
        if file_config:
            if "headers" in file_config:
                file_config["headers"] = _normalize_headers(file_config["headers"])
            configs.append(file_config)
            logger.debug(f"Loaded config from {config_path}")

    env_config = load_env_config()
    if env_config:
        configs.append(env_config)
        logger.debug("Loaded config from environment variables")

    if cli_args:
        configs.append(cli_args)
        logger.debug("Loaded config from CLI arguments")

    merged = merge_configs(*configs) if configs else {}
    config = dict_to_config(merged)
    validate_config(config)

    return config
