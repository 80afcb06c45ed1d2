"""Merge a base config document with scoped override fragments."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Tuple, Union

from kblifecycle.core.models import ConfigScope, ScopedOverride
from kblifecycle.migration.engine import copy_document
from kblifecycle.migration.paths import join_path

logger = logging.getLogger(__name__)

# List leaves that accumulate across scopes instead of being replaced.
APPENDABLE_LIST_PATHS = frozenset({"workspace.vaults"})

OverrideLike = Union[ScopedOverride, Tuple[Union[ConfigScope, str], Mapping]]


def _unpack(override: OverrideLike) -> Tuple[ConfigScope, Mapping]:
    if isinstance(override, ScopedOverride):
        return override.scope, override.config
    scope, fragment = override
    return ConfigScope(scope), fragment


def _entry_key(entry: Any) -> Any:
    """Identity of a list entry for de-duplication (vaults are keyed by fsPath)."""
    if isinstance(entry, Mapping) and "fsPath" in entry:
        return ("fsPath", entry["fsPath"])
    return None


def _concat(front: List[Any], back: List[Any]) -> List[Any]:
    """``front`` followed by the entries of ``back`` not already in ``front``."""
    seen = {_entry_key(item) for item in front} - {None}
    merged = list(front)
    for item in back:
        key = _entry_key(item)
        if key is not None and key in seen:
            continue
        merged.append(item)
    return merged


def _merge_into(target: Dict[str, Any], overlay: Mapping, prefix: Tuple[str, ...]) -> None:
    for key, value in overlay.items():
        if value is None:
            continue
        path = prefix + (key,)
        current = target.get(key)

        if (
            join_path(path) in APPENDABLE_LIST_PATHS
            and isinstance(value, list)
            and isinstance(current, list)
        ):
            target[key] = _concat(value, current)
        elif isinstance(value, Mapping) and isinstance(current, dict):
            _merge_into(current, value, path)
        else:
            target[key] = value


def merge_scopes(base: Mapping, overrides: Iterable[OverrideLike] = ()) -> Dict[str, Any]:
    """
    Combine ``base`` with scoped override fragments.

    Overrides apply in order, so a later scope wins over an earlier one and
    every scope wins over ``base`` for the keys it defines. Appendable lists
    (``workspace.vaults``) are concatenated with the override's entries
    first; a base vault whose ``fsPath`` already appears in the override is
    dropped, so each vault is listed once. Inputs are not modified.

    Args:
        base: Base (workspace) config document
        overrides: Ordered ScopedOverride objects or (scope, fragment) pairs

    Returns:
        The effective config document
    """
    result = copy_document(base)
    for override in overrides:
        scope, fragment = _unpack(override)
        if not isinstance(fragment, Mapping) or not fragment:
            continue
        logger.debug(f"Applying {scope.value} config override: {sorted(fragment)}")
        _merge_into(result, copy_document(fragment), ())
    return result
