"""Key-value persistence for vote history and recent activity.

Two JSON documents live in the store: one mapping original term to
translation to vote record, and one array of recent activity items.
A malformed payload is treated as empty; corruption is logged, never raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from .models.activity import ActivityItem
from .models.votes import TermHistory, VoteRecord
from .paths import DataPaths

logger = logging.getLogger(__name__)

VOTES_KEY = "medterm_data"
ACTIVITY_KEY = "medterm_activity"
ACTIVITY_LIMIT = 10


class StorageCorruption(Exception):
    """A persisted payload could not be decoded into the expected shape."""
    pass


class KeyValueStore(Protocol):
    def read(self, key: str) -> Optional[bytes]:
        ...

    def write(self, key: str, data: bytes) -> None:
        ...


class MemoryStore:
    """In-memory store for tests and embedding."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def read(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)


class FileStore:
    """One JSON file per key under a data directory."""

    def __init__(self, paths: DataPaths):
        self.paths = paths

    @classmethod
    def at(cls, root: Path) -> "FileStore":
        return cls(DataPaths(root))

    def read(self, key: str) -> Optional[bytes]:
        path = self.paths.file_for_key(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, data: bytes) -> None:
        """Write a document atomically using a temporary file."""
        self.paths.ensure()
        path = self.paths.file_for_key(key)
        temp_file = path.with_suffix(".tmp")
        try:
            temp_file.write_bytes(data)
            temp_file.replace(path)
            logger.debug(f"Saved {key} to {path}")
        except OSError as e:
            logger.error(f"Failed to save {key} to {path}: {e}")
            temp_file.unlink(missing_ok=True)
            raise


def _decode(raw: Optional[bytes], expected: type) -> Any:
    if not raw:
        return None
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StorageCorruption(f"unparsable payload: {e}") from e
    if not isinstance(parsed, expected):
        raise StorageCorruption(f"expected {expected.__name__}, got {type(parsed).__name__}")
    return parsed


def _encode(data: Any) -> bytes:
    return json.dumps(data, ensure_ascii=False).encode("utf-8")


def load_term_history(store: KeyValueStore) -> TermHistory:
    """Load the full vote history; corrupt data reads as empty."""
    try:
        parsed = _decode(store.read(VOTES_KEY), dict)
    except StorageCorruption as e:
        logger.warning(f"Failed to parse vote data, using empty history: {e}")
        return {}
    if parsed is None:
        return {}

    history: TermHistory = {}
    for original, records in parsed.items():
        if not isinstance(records, dict):
            logger.warning(f"Skipping malformed history for {original!r}")
            continue
        term_records: dict[str, VoteRecord] = {}
        for translation, record in records.items():
            try:
                term_records[translation] = VoteRecord.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Skipping malformed record {original!r} -> {translation!r}: {e}")
        history[original] = term_records
    return history


def save_term_history(store: KeyValueStore, history: TermHistory) -> None:
    data = {
        original: {
            translation: record.model_dump(mode="json", by_alias=True)
            for translation, record in records.items()
        }
        for original, records in history.items()
    }
    store.write(VOTES_KEY, _encode(data))


def load_activity(store: KeyValueStore) -> list[ActivityItem]:
    """Load the recent activity list; corrupt data reads as empty."""
    try:
        parsed = _decode(store.read(ACTIVITY_KEY), list)
    except StorageCorruption as e:
        logger.warning(f"Failed to parse recent activity, using empty log: {e}")
        return []
    if parsed is None:
        return []

    items: list[ActivityItem] = []
    for entry in parsed:
        try:
            items.append(ActivityItem.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping malformed activity entry: {e}")
    return items


def save_activity(store: KeyValueStore, items: list[ActivityItem], limit: int = ACTIVITY_LIMIT) -> None:
    data = [item.model_dump(mode="json") for item in items[:limit]]
    store.write(ACTIVITY_KEY, _encode(data))
