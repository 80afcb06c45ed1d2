"""Durable key-value store for usage metadata (install, lookup and survey times).

The store is an injected handle with an explicit ``open``/``close``
lifecycle rather than a process-wide singleton, so the heuristic can be
driven by an in-memory store in tests.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from kblifecycle.core.exceptions import MetadataStoreError, UnknownMetadataFieldError
from kblifecycle.core.models import MetadataRecord

logger = logging.getLogger(__name__)


def _record_from(data: Dict[str, Any]) -> MetadataRecord:
    """Build a record, dropping individual fields that fail validation."""
    try:
        return MetadataRecord.model_validate(data)
    except ValidationError:
        valid = {}
        for key, value in data.items():
            try:
                MetadataRecord.model_validate({key: value})
            except ValidationError as e:
                logger.warning(f"Ignoring invalid metadata field {key}={value!r}: {e.errors()[0]['msg']}")
                continue
            valid[key] = value
        return MetadataRecord.model_validate(valid)


class MetadataStore(ABC):
    """
    Base class for metadata stores.

    Field names may be given in camelCase (``lastLookupTime``) or
    snake_case (``last_lookup_time``). Setting a field to ``None`` unsets it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._opened = False

    def open(self) -> "MetadataStore":
        """Load persisted state. Idempotent."""
        with self._lock:
            if not self._opened:
                self._load()
                self._opened = True
        return self

    def close(self) -> None:
        """Release the store. Further reads and writes raise."""
        with self._lock:
            self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    def __enter__(self) -> "MetadataStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_open(self) -> None:
        if not self._opened:
            raise MetadataStoreError(
                f"{type(self).__name__} is not open",
                "Call open() or use the store as a context manager",
            )

    @staticmethod
    def _normalize(field: str, value: Any):
        """Return the camelCase key and a JSON-ready value for ``field``."""
        attr = MetadataRecord.field_for(field)
        if attr is None:
            raise UnknownMetadataFieldError(field, MetadataRecord.aliases())
        alias = MetadataRecord.model_fields[attr].alias or attr

        if value is None:
            return alias, None

        try:
            record = MetadataRecord.model_validate({alias: value})
        except ValidationError as e:
            raise MetadataStoreError(
                f"Invalid value for metadata field '{alias}': {value!r}",
                e.errors()[0]["msg"],
            ) from e

        stored = getattr(record, attr)
        if isinstance(stored, Enum):
            stored = stored.value
        return alias, stored

    def get_meta(self) -> MetadataRecord:
        """Return the current record; unset fields are ``None``."""
        with self._lock:
            self._require_open()
            return _record_from(dict(self._read_all()))

    def set_meta(self, field: str, value: Any) -> None:
        """Set (or with ``None``, unset) one field and persist it."""
        alias, stored = self._normalize(field, value)
        with self._lock:
            self._require_open()
            data = dict(self._read_all())
            if stored is None:
                data.pop(alias, None)
            else:
                data[alias] = stored
            self._write_all(data)
        logger.debug(f"Metadata {alias} set to {stored!r}")

    @abstractmethod
    def _load(self) -> None:
        """Load persisted state (called once by open)."""

    @abstractmethod
    def _read_all(self) -> Dict[str, Any]:
        """Current raw data keyed by camelCase names."""

    @abstractmethod
    def _write_all(self, data: Dict[str, Any]) -> None:
        """Replace and persist the raw data."""


class InMemoryMetadataStore(MetadataStore):
    """Metadata store kept in memory; used by tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        super().__init__()
        self._initial = dict(initial or {})
        self._data: Dict[str, Any] = {}

    def _load(self) -> None:
        self._data = dict(self._initial)

    def _read_all(self) -> Dict[str, Any]:
        return self._data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self._data = data


class JsonMetadataStore(MetadataStore):
    """
    Metadata store persisted as a JSON object.

    Writes go to a temporary file that replaces the target, so a crash
    never leaves a truncated file. A corrupt file is logged and treated as
    empty: unset fields mean "never happened".
    """

    def __init__(self, path):
        """
        Initialize JSON metadata store.

        Args:
            path: Path to the JSON file (created on first write)
        """
        super().__init__()
        self.path = Path(path).expanduser()
        self._data: Dict[str, Any] = {}

    def _load(self) -> None:
        """Load metadata from the JSON file."""
        if not self.path.exists():
            self._data = {}
            logger.info(f"No metadata file at {self.path}, starting empty")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load metadata file {self.path}: {e}")
            self._data = {}
            return

        if not isinstance(data, dict):
            logger.error(f"Metadata file {self.path} does not contain an object, ignoring it")
            self._data = {}
            return

        self._data = data
        logger.debug(f"Loaded {len(data)} metadata fields from {self.path}")

    def _read_all(self) -> Dict[str, Any]:
        return self._data

    def _write_all(self, data: Dict[str, Any]) -> None:
        """Save metadata to the JSON file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Failed to save metadata file {self.path}: {e}")
            raise MetadataStoreError(
                f"Cannot write metadata file {self.path}: {e}",
                "Check that the directory exists and is writable",
            ) from e

        self._data = data
