"""Key-value persistence for whole collections of records.

Every key holds one JSON text blob: either a list of records (collections) or
a single record (the session pointer). Mutations are always
read-entire-collection, modify in memory, write-entire-collection; the store
itself never merges concurrent writers, the last write for a key wins.
Callers that share a store across threads serialize access themselves (see
``MockTestManager``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)


class CollectionStore(ABC):
    """Durable mapping of stable keys to JSON-encoded blobs."""

    @abstractmethod
    def _read_text(self, key: str) -> str | None:
        """Return the raw blob for ``key`` or None when it was never written."""

    @abstractmethod
    def _write_text(self, key: str, text: str) -> None:
        """Replace the blob for ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Forget ``key`` entirely; a no-op when it is absent."""

    def contains(self, key: str) -> bool:
        return self._read_text(key) is not None

    def read_collection(self, key: str) -> list[dict[str, Any]]:
        """Return the stored list, or an empty list when absent or unreadable."""
        decoded = self._decode(key)
        if decoded is None:
            return []
        if not isinstance(decoded, list):
            logger.warning("Ignoring non-list content stored under %s", key)
            return []
        return decoded

    def write_collection(self, key: str, items: list[dict[str, Any]]) -> None:
        self._write_text(key, json.dumps(list(items), ensure_ascii=False))

    def read_value(self, key: str) -> dict[str, Any] | None:
        decoded = self._decode(key)
        if decoded is None:
            return None
        if not isinstance(decoded, dict):
            logger.warning("Ignoring non-object content stored under %s", key)
            return None
        return decoded

    def write_value(self, key: str, value: dict[str, Any]) -> None:
        self._write_text(key, json.dumps(value, ensure_ascii=False))

    def _decode(self, key: str) -> Any:
        text = self._read_text(key)
        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Unreadable blob under %s (%s); treating it as empty", key, exc)
            return None


class MemoryStore(CollectionStore):
    """In-process store holding the same JSON text blobs as the file store."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def _read_text(self, key: str) -> str | None:
        return self._blobs.get(key)

    def _write_text(self, key: str, text: str) -> None:
        self._blobs[key] = text

    def remove(self, key: str) -> None:
        self._blobs.pop(key, None)


class JsonFileStore(CollectionStore):
    """Stores each key as ``<root_dir>/<key>.json``."""

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root_dir / f"{key}.json"

    def _read_text(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read %s (%s); treating it as empty", path, exc)
            return ""

    def _write_text(self, key: str, text: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            temp_path.write_text(text, encoding="utf-8")
            os.replace(temp_path, path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


class SerializableRecord(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


RecordT = TypeVar("RecordT", bound=SerializableRecord)


class RecordCollection(Generic[RecordT]):
    """Typed view of one collection key: ``load()`` and ``save(items)``."""

    def __init__(
        self,
        store: CollectionStore,
        key: str,
        decode: Callable[[dict[str, Any]], RecordT],
    ) -> None:
        self._store = store
        self._key = key
        self._decode = decode

    @property
    def key(self) -> str:
        return self._key

    def exists(self) -> bool:
        return self._store.contains(self._key)

    def load(self) -> list[RecordT]:
        records: list[RecordT] = []
        for item in self._store.read_collection(self._key):
            try:
                records.append(self._decode(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed record in %s: %r", self._key, exc)
        return records

    def save(self, items: list[RecordT]) -> None:
        self._store.write_collection(self._key, [item.to_dict() for item in items])
