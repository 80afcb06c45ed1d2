"""Version-pinned default config document and the deprecated path registry."""

from copy import deepcopy
from typing import Any, Dict, Tuple

from kblifecycle.core.models import DeprecatedPath
from kblifecycle.schema.sections import DendronConfig

_DEFAULT_CONFIG: Dict[str, Any] = DendronConfig().to_raw()

# Ordered: detection reports paths in this order.
DEPRECATED_PATHS: Tuple[DeprecatedPath, ...] = (
    DeprecatedPath("dev.enableWebUI", since_version=5),
    DeprecatedPath("dev.enableLinkCandidates", since_version=5),
    DeprecatedPath("dev.enableNextPub", since_version=5),
    DeprecatedPath("workspace.enableHandlebarTemplates", since_version=5),
    DeprecatedPath("workspace.enableSmartRefs", since_version=5),
    DeprecatedPath("commands.lookup.note.selectionType", since_version=4),
    DeprecatedPath("publishing.enableHierarchyDisplay", since_version=4),
)


def gen_default_config() -> Dict[str, Any]:
    """Return a fresh copy of the default document for the current version."""
    return deepcopy(_DEFAULT_CONFIG)
