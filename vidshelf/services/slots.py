"""Named key-value slots backing the persisted video collection.

Each slot holds one string value. The file-backed store keeps every slot in a
single JSON object and rewrites it atomically on each write.
"""

import json
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import structlog

from vidshelf.core.config import StorageConfig

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Exception raised for slot storage errors."""

    pass


class SlotStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if the slot is empty."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""


class MemorySlotStore(SlotStore):
    """In-process slot store; contents are lost on exit."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value


class JsonFileSlotStore(SlotStore):
    """Slot store persisted to a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("slot_file_unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("slot_file_not_an_object", path=str(self.path))
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """Write value under key.

        Raises:
            StorageError: If the slot file cannot be written.
        """
        slots = self._read_all()
        slots[key] = value
        try:
            self._atomic_write(json.dumps(slots, ensure_ascii=False))
        except OSError as e:
            logger.error("slot_write_failed", path=str(self.path), key=key, error=str(e))
            raise StorageError(f"Failed to write slot file {self.path}: {e}") from e

        logger.debug("slot_written", key=key, size=len(value))

    def _atomic_write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + f".tmp.{uuid.uuid4().hex}")
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        finally:
            tmp.unlink(missing_ok=True)


def create_slot_store(config: StorageConfig) -> SlotStore:
    """Create the file-backed slot store for the configured path."""
    store = JsonFileSlotStore(Path(config.slot_path))
    logger.info("slot_store_configured", slot_path=config.slot_path)
    return store
