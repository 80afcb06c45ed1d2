"""Workspace config files and effective config."""

from kblifecycle.workspace.config_file import (
    CONFIG_FILE_NAME,
    LOCAL_CONFIG_FILE_NAME,
    local_config_path,
    read_local_config,
    read_raw_config,
    write_config,
    write_local_config,
)
from kblifecycle.workspace.workspace import Workspace

__all__ = [
    "CONFIG_FILE_NAME",
    "LOCAL_CONFIG_FILE_NAME",
    "Workspace",
    "local_config_path",
    "read_local_config",
    "read_raw_config",
    "write_config",
    "write_local_config",
]
