"""Missing-default and deprecated-key detection for raw config documents.

All functions are pure: inputs are copied before any change and the
caller decides whether to persist the result.
"""

import logging
from collections.abc import Mapping, MutableMapping
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from kblifecycle.core.models import DeprecatedPath, MigrationResult
from kblifecycle.migration.paths import (
    MISSING,
    delete_path,
    get_path,
    iter_leaf_paths,
    join_path,
)
from kblifecycle.schema.defaults import DEPRECATED_PATHS, gen_default_config

logger = logging.getLogger(__name__)

# Free-form tables compared as a whole, not key by key.
OPAQUE_PATHS = frozenset({
    "workspace.task.statusSymbols",
    "workspace.task.prioritySymbols",
})

DeprecatedPathLike = Union[str, DeprecatedPath]


def copy_document(doc: Any) -> Dict[str, Any]:
    """Deep-copy ``doc`` into plain dicts; anything but a mapping becomes ``{}``."""
    if not isinstance(doc, Mapping):
        return {}
    return {key: _copy_value(value) for key, value in doc.items()}


def _copy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return deepcopy(value)


def _is_absent(value: Any) -> bool:
    return value is MISSING or value is None


def detect_missing_defaults(
    config: Any,
    defaults: Optional[Mapping] = None,
) -> MigrationResult:
    """
    Find default leaves missing from ``config`` and backfill them.

    Only keys declared in the defaults are inspected. Values already in
    ``config`` are never overwritten, including falsy ones. When a value
    is present but is not a mapping where the defaults expect one, that
    path is reported and replaced by the whole default subtree.

    Args:
        config: Raw config document (``None`` or non-mappings count as empty)
        defaults: Default document, the current version's defaults if omitted

    Returns:
        MigrationResult with the backfilled copy and the dotted paths filled in
    """
    if defaults is None:
        defaults = gen_default_config()

    backfilled = copy_document(config)
    missing: List[str] = []

    for leaf in iter_leaf_paths(defaults, OPAQUE_PATHS):
        current: MutableMapping = backfilled
        for depth, key in enumerate(leaf):
            prefix = leaf[: depth + 1]
            value = current.get(key, MISSING)

            if _is_absent(value):
                default_value = _copy_value(get_path(defaults, prefix))
                current[key] = default_value
                if depth < len(leaf) - 1:
                    missing.extend(
                        join_path(prefix + sub)
                        for sub in iter_leaf_paths(default_value, _relative_opaque(prefix))
                    )
                else:
                    missing.append(join_path(prefix))
                break

            if depth == len(leaf) - 1:
                break

            if not isinstance(value, MutableMapping):
                logger.warning(
                    f"Config value at '{join_path(prefix)}' should be a mapping, "
                    f"got {type(value).__name__}; replacing with defaults"
                )
                current[key] = _copy_value(get_path(defaults, prefix))
                missing.append(join_path(prefix))
                break

            current = value

    if missing:
        logger.debug(f"Missing default config paths: {missing}")

    return MigrationResult(
        needs_backfill=bool(missing),
        backfilled_config=backfilled,
        missing_paths=missing,
    )


def _relative_opaque(prefix: Tuple[str, ...]) -> frozenset:
    """Opaque paths re-rooted under ``prefix``."""
    root = join_path(prefix) + "."
    return frozenset(p[len(root):] for p in OPAQUE_PATHS if p.startswith(root))


def detect_deprecated_configs(
    config: Any,
    deprecated_paths: Optional[Iterable[DeprecatedPathLike]] = None,
) -> List[str]:
    """
    List the deprecated paths present in ``config``, in registry order.

    A path counts as present when its key exists, whatever its value.
    """
    if deprecated_paths is None:
        deprecated_paths = DEPRECATED_PATHS
    if not isinstance(config, Mapping):
        return []

    found = [
        str(path)
        for path in deprecated_paths
        if get_path(config, str(path)) is not MISSING
    ]
    if found:
        logger.debug(f"Deprecated config paths present: {found}")
    return found


def remove_deprecated_configs(
    config: Any,
    deprecated_paths: Optional[Iterable[DeprecatedPathLike]] = None,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Return a copy of ``config`` without its deprecated paths.

    Sections left empty by a removal are dropped as well.

    Returns:
        Tuple of (cleaned document, removed dotted paths)
    """
    if deprecated_paths is None:
        deprecated_paths = DEPRECATED_PATHS
    deprecated_paths = list(deprecated_paths)

    cleaned = copy_document(config)
    removed = []
    for path in detect_deprecated_configs(cleaned, deprecated_paths):
        if delete_path(cleaned, path, prune=True):
            removed.append(path)

    if removed:
        logger.info(f"Removed deprecated config paths: {removed}")
    return cleaned, removed
