"""Config document schema, defaults and deprecations."""

from kblifecycle.schema.defaults import DEPRECATED_PATHS, gen_default_config
from kblifecycle.schema.sections import CURRENT_CONFIG_VERSION, DendronConfig

__all__ = [
    "CURRENT_CONFIG_VERSION",
    "DEPRECATED_PATHS",
    "DendronConfig",
    "gen_default_config",
]
