"""Configuration file loading and runtime overrides.

Settings come from a YAML (or JSON) file passed with ``-c/--config`` and are
applied onto ``Constants``. A broken or unreadable config is logged and
ignored so the CLI keeps working with defaults.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a configuration mapping from file.

    Args:
        config_path: Path to YAML/JSON config file.

    Returns:
        Configuration dict (empty when missing or invalid).
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config: %s", e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", config_path)
        return {}
    return data


def _str_list(value: Any) -> Optional[list]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    return None


def apply_config(config: Dict[str, Any]) -> None:
    """Apply known config keys onto Constants; unknown keys are ignored."""
    registry_urls = _str_list(config.get("registry_urls"))
    if registry_urls:
        Constants.REGISTRY_URLS_APK = registry_urls

    base_packages = _str_list(config.get("base_packages"))
    if base_packages is not None:
        Constants.APKO_BASE_PACKAGES = base_packages

    arch = config.get("arch")
    if isinstance(arch, str) and arch:
        Constants.DEFAULT_ARCH = arch

    lock_file_name = config.get("lock_file_name")
    if isinstance(lock_file_name, str) and lock_file_name:
        Constants.APKO_LOCK_FILE = lock_file_name

    for key, attr in (("request_timeout", "REQUEST_TIMEOUT"), ("lock_timeout", "APKO_LOCK_TIMEOUT")):
        value = config.get(key)
        if value is None:
            continue
        try:
            setattr(Constants, attr, int(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s: %r", key, value)
