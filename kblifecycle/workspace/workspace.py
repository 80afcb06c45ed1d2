"""A workspace root and its effective config."""

import logging
from pathlib import Path
from typing import Any, Dict, List

from kblifecycle.core.models import ConfigScope, ScopedOverride
from kblifecycle.merge.scoped import merge_scopes
from kblifecycle.schema.sections import DendronConfig
from kblifecycle.workspace.config_file import config_path, read_local_config, read_raw_config

logger = logging.getLogger(__name__)

# Applied in this order: the workspace-local file wins over the user-wide one.
OVERRIDE_SCOPES = (ConfigScope.GLOBAL, ConfigScope.WORKSPACE)


class Workspace:
    """
    Workspace rooted at a directory containing dendron.yml.

    Config is re-read from disk on every access so that edits made by the
    user (or by a backfill) are always visible.
    """

    def __init__(self, ws_root, home=None):
        self.ws_root = Path(ws_root).expanduser()
        self.home = home

    def __repr__(self) -> str:
        return f"Workspace({str(self.ws_root)!r})"

    def exists(self) -> bool:
        """True if the root holds a config file."""
        return config_path(self.ws_root).exists()

    @property
    def raw_config(self) -> Dict[str, Any]:
        """dendron.yml as stored, without defaults or overrides."""
        return read_raw_config(self.ws_root)

    def overrides(self) -> List[ScopedOverride]:
        """Local override fragments that exist on disk, in precedence order."""
        found = []
        for scope in OVERRIDE_SCOPES:
            fragment = read_local_config(scope, self.ws_root, self.home)
            if fragment:
                found.append(ScopedOverride(scope=scope, config=fragment))
        return found

    @property
    def config(self) -> Dict[str, Any]:
        """Effective config: dendron.yml merged with the local overrides."""
        overrides = self.overrides()
        if overrides:
            logger.debug(f"{self!r}: applying {[o.scope.value for o in overrides]} overrides")
        return merge_scopes(self.raw_config, overrides)

    @property
    def typed_config(self) -> DendronConfig:
        """Effective config validated against the schema, defaults filled in."""
        return DendronConfig.model_validate(self.config)
