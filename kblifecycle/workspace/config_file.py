"""Reading and writing workspace config files (dendron.yml and local overrides)."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from kblifecycle.core.exceptions import ConfigFileError
from kblifecycle.core.models import ConfigScope

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "dendron.yml"
LOCAL_CONFIG_FILE_NAME = "dendronrc.yml"
GLOBAL_CONFIG_DIR = ".dendron"


def config_path(ws_root) -> Path:
    """Path of the main config file of a workspace."""
    return Path(ws_root) / CONFIG_FILE_NAME


def local_config_path(scope: ConfigScope, ws_root, home=None) -> Path:
    """
    Path of the local override file for ``scope``.

    WORKSPACE and LOCAL overrides live next to dendron.yml; GLOBAL overrides
    live under ``<home>/.dendron``.
    """
    scope = ConfigScope(scope)
    if scope == ConfigScope.GLOBAL:
        base = Path(home).expanduser() if home is not None else Path.home()
        return base / GLOBAL_CONFIG_DIR / LOCAL_CONFIG_FILE_NAME
    return Path(ws_root) / LOCAL_CONFIG_FILE_NAME


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, f"top level is a {type(data).__name__}, expected a mapping")
    return data


def _write_yaml(path: Path, data: Dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False, allow_unicode=True)
    except OSError as e:
        raise ConfigFileError(path, str(e)) from e


def read_raw_config(ws_root) -> Dict[str, Any]:
    """
    Read dendron.yml exactly as stored (no defaults applied).

    Raises:
        ConfigFileError: If the file is missing, unreadable or not a mapping
    """
    path = config_path(ws_root)
    if not path.exists():
        raise ConfigFileError(path, "file not found")
    return _read_yaml(path)


def write_config(ws_root, config: Dict[str, Any]) -> Path:
    """Write ``config`` to dendron.yml, replacing its contents."""
    path = config_path(ws_root)
    _write_yaml(path, config)
    logger.info(f"Wrote workspace config {path}")
    return path


def read_local_config(scope: ConfigScope, ws_root, home=None) -> Optional[Dict[str, Any]]:
    """Read the override file of ``scope``; ``None`` if it does not exist."""
    path = local_config_path(scope, ws_root, home)
    if not path.exists():
        return None
    return _read_yaml(path)


def write_local_config(ws_root, config: Dict[str, Any], scope: ConfigScope, home=None) -> Path:
    """Write a partial config document as the override file of ``scope``."""
    path = local_config_path(scope, ws_root, home)
    _write_yaml(path, config)
    logger.info(f"Wrote {ConfigScope(scope).value} config override {path}")
    return path
