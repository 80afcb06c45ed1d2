"""Deep-path access over raw config documents.

Paths are dotted strings (``workspace.journal.name``) or tuples of keys.
``MISSING`` marks an absent key so that it can be told apart from a key
explicitly set to ``None``.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, FrozenSet, Iterator, Sequence, Tuple, Union

from kblifecycle.core.exceptions import InvalidConfigPathError

PathLike = Union[str, Sequence[str]]


class _Missing:
    """Sentinel type for absent keys."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def split_path(path: PathLike) -> Tuple[str, ...]:
    """Split a dotted path into its keys."""
    if isinstance(path, str):
        keys = tuple(path.split("."))
        if any(key == "" for key in keys):
            raise InvalidConfigPathError(path)
        return keys
    return tuple(path)


def join_path(keys: Sequence[str]) -> str:
    return ".".join(keys)


def get_path(doc: Any, path: PathLike, default: Any = MISSING) -> Any:
    """Resolve ``path`` in ``doc``; return ``default`` if any step is absent."""
    current = doc
    for key in split_path(path):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def delete_path(doc: MutableMapping, path: PathLike, prune: bool = False) -> bool:
    """
    Delete ``path`` from ``doc``.

    Args:
        doc: Document to modify in place
        path: Path to delete
        prune: Also delete parent mappings left empty by the deletion

    Returns:
        True if a key was deleted
    """
    keys = split_path(path)
    parents = []
    current = doc
    for key in keys[:-1]:
        child = current.get(key) if isinstance(current, Mapping) else None
        if not isinstance(child, MutableMapping):
            return False
        parents.append((current, key))
        current = child

    if not isinstance(current, MutableMapping) or keys[-1] not in current:
        return False
    del current[keys[-1]]

    if prune:
        for parent, key in reversed(parents):
            if parent[key]:
                break
            del parent[key]
    return True


def iter_leaf_paths(
    doc: Mapping,
    opaque: FrozenSet[str] = frozenset(),
    prefix: Tuple[str, ...] = (),
) -> Iterator[Tuple[str, ...]]:
    """
    Yield the key tuple of every leaf in ``doc``.

    A leaf is a non-mapping value, an empty mapping, or a mapping whose
    dotted path is listed in ``opaque`` (free-form tables such as symbol maps).
    """
    for key, value in doc.items():
        path = prefix + (key,)
        if isinstance(value, Mapping) and value and join_path(path) not in opaque:
            yield from iter_leaf_paths(value, opaque, path)
        else:
            yield path
