"""Loading of the optional ``runcontext.yaml`` configuration file.

Example ``runcontext.yaml``::

    config_providers:
      com.databricks.config.DatabricksClientSettingsProvider: my_pkg.settings:ClientSettings
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = "runcontext.yaml"
CONFIG_PATH_ENV_VAR = "RUNCONTEXT_CONFIG"

logger = logging.getLogger(__name__)


def get_config_path() -> str:
    return os.environ.get(CONFIG_PATH_ENV_VAR, DEFAULT_CONFIG_PATH)


def load_runcontext_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the runcontext configuration.

    Args:
        config_path (Optional[str]): Path to the YAML file. Defaults to the
          ``RUNCONTEXT_CONFIG`` environment variable, then ``runcontext.yaml``.

    Returns:
        Dict[str, Any]: The parsed configuration, or an empty dict if the file
          does not exist or is empty.

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
          ``config_providers`` is malformed.
    """
    config_path = config_path or get_config_path()
    if not os.path.exists(config_path):
        logger.debug(f"No runcontext config found at {config_path}")
        return {}

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Expected a mapping in {config_path}, got {type(config).__name__}")

    providers = config.get("config_providers", {}) or {}
    if not isinstance(providers, dict):
        raise ConfigError(f"'config_providers' in {config_path} must be a mapping")
    for name, target in providers.items():
        if not isinstance(name, str) or not isinstance(target, str):
            raise ConfigError(
                f"Invalid provider entry {name!r}: {target!r} in {config_path}. "
                f"Expected 'provider name: package.module:attribute'"
            )
    config["config_providers"] = providers
    return config
