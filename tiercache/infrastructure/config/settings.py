"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (~/.tiercache/config.yaml).
"""

import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".tiercache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "TIERCACHE_"

DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_CACHE_ROOT_NAME = "file_cache"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys (cache: {ttl: 1} -> cache.ttl)."""
    flat: Dict[str, Any] = {}
    for k, v in data.items():
        dotted = f"{prefix}{k}"
        if isinstance(v, dict):
            flat.update(_flatten(v, f"{dotted}."))
        else:
            flat[dotted] = v
    return flat


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables win
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() re-reads it."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _coerce(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value by dotted key.

    Priority:
    1. Test configuration
    2. Environment variable (TIERCACHE_ + upper-cased key, dots as underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'cache.default_ttl_seconds'.
        default: Default value if the key is not found.

    Returns:
        The configuration value.
    """
    if key in _test_config:
        return _test_config[key]

    env_key = ENV_PREFIX + key.upper().replace(".", "_")
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
        logger.warning(f"Unexpected boolean config value: '{value}'. Defaulting to {default}.")
        return default
    if value is None:
        return default
    return bool(value)


# --- Convenience Functions ---

def get_cache_root_name() -> str:
    """Top-level directory name shared by all caches."""
    return str(get_config("cache.root_name", DEFAULT_CACHE_ROOT_NAME))


def get_default_ttl() -> timedelta:
    """Default entry lifetime."""
    raw = get_config("cache.default_ttl_seconds", DEFAULT_TTL_SECONDS)
    try:
        seconds = float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid cache.default_ttl_seconds '{raw}', using {DEFAULT_TTL_SECONDS}s")
        seconds = DEFAULT_TTL_SECONDS
    return timedelta(seconds=seconds)


def get_use_memory_cache() -> bool:
    return _as_bool(get_config("cache.use_memory"), True)


def get_logging_enabled() -> bool:
    return _as_bool(get_config("cache.logging"), False)


def get_temp_root() -> Optional[str]:
    """Overrides the system temporary directory when set."""
    root = get_config("cache.temp_root")
    return str(root) if root else None


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Set configuration values that override everything else.

    Args:
        config_dict: Dictionary of configuration values to set.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
