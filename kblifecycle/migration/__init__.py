"""Config migration: missing defaults, deprecated paths, deep-path access."""

from kblifecycle.migration.engine import (
    detect_deprecated_configs,
    detect_missing_defaults,
    remove_deprecated_configs,
)
from kblifecycle.migration.paths import MISSING, delete_path, get_path

__all__ = [
    "MISSING",
    "delete_path",
    "detect_deprecated_configs",
    "detect_missing_defaults",
    "get_path",
    "remove_deprecated_configs",
]
