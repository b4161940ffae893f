"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (~/.merakidash/config.yaml). Typed accessors turn
the loose key/value store into the policy objects the engine consumes.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from merakidash.domain.models.policies import (
    DEFAULT_BASE_URL, RateLimitSettings, RetryPolicy, TransportSettings
)

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".merakidash"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "MERAKIDASH_"
# Environment variable used by Cisco's own SDKs; honored for convenience.
API_KEY_ENV_VAR = "MERAKI_DASHBOARD_API_KEY"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_runtime_config: Dict[str, Any] = {}
_loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML sections into dotted keys ('engine.max_attempts')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat


def load_configuration(
    config_file: Optional[Path] = None,
    env_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Test overrides (set_config_for_testing)
    2. Runtime overrides (set_config, e.g. from CLI flags)
    3. Environment Variables
    4. .env file
    5. YAML configuration file
    6. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file (DEFAULT_CONFIG_FILE if None).
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a mapping.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (ENV VARS already set take precedence)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no file found).")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def _coerce(value: str) -> Any:
    """Converts common string forms from the environment."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def env_var_name(key: str) -> str:
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dotted key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Runtime overrides (set_config)
    3. Environment variable MERAKIDASH_<KEY>
    4. Loaded config (YAML)
    5. Default value

    Args:
        key: The configuration key, e.g. 'engine.max_attempts'
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    if key in _runtime_config:
        return _runtime_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the rest of the process.

    Survives load_configuration(force=True) and wins over the environment.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    logger.debug(f"Setting config: {key} = {value if 'api_key' not in key else '***'}")
    _runtime_config[key] = value


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_api_key() -> Optional[str]:
    """Gets the Dashboard API key (MERAKI_DASHBOARD_API_KEY or meraki.api_key)."""
    if "meraki.api_key" in _test_config:
        key = _test_config["meraki.api_key"]
    else:
        key = os.getenv(API_KEY_ENV_VAR) or get_config("meraki.api_key")
    return str(key) if key else None


def get_base_url() -> str:
    return str(get_config("meraki.base_url", DEFAULT_BASE_URL))


def get_retry_policy() -> RetryPolicy:
    """Builds the engine's RetryPolicy from configuration."""
    defaults = RetryPolicy()
    return RetryPolicy.from_values(
        max_attempts=int(get_config("engine.max_attempts", defaults.max_attempts)),
        initial_backoff=float(get_config("engine.initial_backoff", defaults.initial_backoff)),
        backoff_factor=float(get_config("engine.backoff_factor", defaults.backoff_factor)),
        max_backoff=float(get_config("engine.max_backoff", defaults.max_backoff)),
        max_total_wait=float(get_config("engine.max_total_wait", defaults.max_total_wait)),
        retryable_statuses=get_config("engine.retryable_statuses", sorted(defaults.retryable_statuses)),
        retry_non_idempotent=bool(get_config("engine.retry_non_idempotent", defaults.retry_non_idempotent)),
        max_pages=int(get_config("engine.max_pages", defaults.max_pages)),
    )


def get_rate_limit_settings() -> RateLimitSettings:
    defaults = RateLimitSettings()
    return RateLimitSettings(
        max_requests=int(get_config("rate_limit.max_requests", defaults.max_requests)),
        time_window=float(get_config("rate_limit.time_window", defaults.time_window)),
        default_hold=float(get_config("rate_limit.default_hold", defaults.default_hold)),
    )


def get_transport_settings() -> TransportSettings:
    defaults = TransportSettings()
    return TransportSettings(
        base_url=get_base_url(),
        connect_timeout=float(get_config("http.connect_timeout", defaults.connect_timeout)),
        read_timeout=float(get_config("http.timeout", defaults.read_timeout)),
        pool_maxsize=int(get_config("http.pool_maxsize", defaults.pool_maxsize)),
        verify_ssl=bool(get_config("http.verify_ssl", defaults.verify_ssl)),
    )


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration keys: {sorted(config_dict)}")


def clear_test_config() -> None:
    """Clear all testing and runtime override values."""
    _test_config.clear()
    _runtime_config.clear()
    logger.debug("Cleared testing configuration")
