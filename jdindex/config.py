"""
User configuration for jd.

A YAML file layered over built-in defaults:

    root: ~/Documents        # index root used when none is given
    strict: false            # refuse to show/cd/add on an index with problems
    log_level: WARNING
    ignore:                  # names the scanner skips (globs)
      - .DS_Store
      - "*.pyc"

Resolution:
    1. JD_CONFIG env var (path to config.yaml)
    2. $XDG_CONFIG_HOME/jd/config.yaml (~/.config/jd/config.yaml)
    3. No file = defaults

JD_ROOT overrides `root` from any file.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from jdindex.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULTS = {
    "root": None,
    "strict": False,
    "log_level": "WARNING",
    "ignore": [
        ".DS_Store",
        ".git",
        "__pycache__",
        ".Trash",
        "*.pyc",
    ],
}

CONFIG_FILENAME = "config.yaml"


def find_config_file() -> Optional[Path]:
    """Find the config file, if any."""
    # 1. Explicit env var
    env_path = os.environ.get("JD_CONFIG")
    if env_path:
        p = Path(env_path).expanduser()
        if p.exists():
            return p
        logger.warning("JD_CONFIG points at %s, which does not exist", p)
        return None

    # 2. XDG config dir
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    candidate = Path(config_home) / "jd" / CONFIG_FILENAME
    if candidate.exists():
        return candidate

    return None


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dicts. Override values win.
    Lists are replaced, not appended.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_file: Optional[Path] = None) -> dict:
    """Load the effective configuration: defaults, then the file, then env."""
    effective = copy.deepcopy(DEFAULTS)

    if config_file is None:
        config_file = find_config_file()
    if config_file is not None:
        try:
            with open(config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(config_file, e) from e
        if not isinstance(data, dict):
            raise ConfigError(config_file, "expected a mapping at the top level")
        if not isinstance(data.get("ignore", []), list):
            raise ConfigError(config_file, "'ignore' must be a list of patterns")
        effective = deep_merge(effective, data)
        logger.debug("Loaded config from %s", config_file)

    env_root = os.environ.get("JD_ROOT")
    if env_root:
        effective["root"] = env_root
    return effective


def get_setting(config: dict, key: str, default: Any = None) -> Any:
    """Get a setting, with dotted keys for nested values ("a.b")."""
    current: Any = config
    for part in key.split("."):
        if not isinstance(current, dict):
            return default
        current = current.get(part)
    return current if current is not None else default


def configured_root(config: dict) -> Optional[Path]:
    root = get_setting(config, "root")
    if root is None:
        return None
    return Path(str(root)).expanduser()
