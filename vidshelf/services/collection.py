"""Collection store for bookmarked videos.

Owns the ordered, newest-first, id-unique list of VideoRecords and mirrors it
to a single persisted slot. Every mutation re-serializes the whole collection.
"""

import json
from typing import List, Optional

import structlog

from vidshelf.core.display import DisplayFormatter
from vidshelf.core.metrics import MetricsCollector
from vidshelf.models.video import SubtitleAttachment, VideoRecord
from vidshelf.services.slots import SlotStore, StorageError

logger = structlog.get_logger(__name__)

DEFAULT_SLOT_KEY = "youtubeVideos"


class DuplicateVideoError(Exception):
    """Raised when adding a video whose id is already in the collection."""

    def __init__(self, video_id: str):
        super().__init__(f"Video already exists: {video_id}")
        self.video_id = video_id


class IndexOutOfRangeError(IndexError):
    """Raised when a mutation targets an index outside the collection."""

    pass


class PersistenceParseError(ValueError):
    """Raised internally when the persisted slot cannot be parsed."""

    pass


class CollectionStore:
    """In-memory video collection mirrored to a persisted slot.

    Single reader/writer; callers get copies of the list and address records
    by index.
    """

    def __init__(
        self,
        slots: SlotStore,
        slot_key: str = DEFAULT_SLOT_KEY,
        formatter: Optional[DisplayFormatter] = None,
    ) -> None:
        """Initialize the collection store.

        Args:
            slots: Persistence backend.
            slot_key: Name of the slot holding the serialized collection.
            formatter: Formatter used to stamp added_at.
        """
        self.slots = slots
        self.slot_key = slot_key
        self.formatter = formatter or DisplayFormatter()
        self._videos: List[VideoRecord] = []

    def load(self) -> None:
        """Load the collection from the persisted slot.

        A missing slot yields an empty collection. A corrupt slot is logged
        and also yields an empty collection; this never raises.
        """
        try:
            self._videos = self._parse(self.slots.get(self.slot_key))
        except PersistenceParseError as e:
            logger.warning("collection_load_failed", slot_key=self.slot_key, error=str(e))
            self._videos = []
        except Exception as e:
            logger.error(
                "collection_load_error",
                slot_key=self.slot_key,
                error=str(e),
                exc_info=True,
            )
            self._videos = []

        MetricsCollector.update_collection_size(len(self._videos))
        logger.info("collection_loaded", slot_key=self.slot_key, count=len(self._videos))

    @staticmethod
    def _parse(raw: Optional[str]) -> List[VideoRecord]:
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PersistenceParseError(f"Slot is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise PersistenceParseError(f"Slot holds {type(data).__name__}, expected a list")
        try:
            return [VideoRecord.from_dict(entry) for entry in data]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceParseError(f"Slot holds an invalid record: {e!r}") from e

    def _persist(self) -> None:
        payload = json.dumps([v.to_dict() for v in self._videos], ensure_ascii=False)
        self.slots.set(self.slot_key, payload)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._videos):
            raise IndexOutOfRangeError(
                f"Index {index} out of range for collection of {len(self._videos)}"
            )

    @property
    def videos(self) -> List[VideoRecord]:
        """Snapshot of the collection, newest first."""
        return list(self._videos)

    def __len__(self) -> int:
        return len(self._videos)

    @property
    def subtitle_count(self) -> int:
        return sum(1 for v in self._videos if v.subtitle is not None)

    def contains(self, video_id: str) -> bool:
        return any(v.id == video_id for v in self._videos)

    def get(self, index: int) -> VideoRecord:
        self._check_index(index)
        return self._videos[index]

    def add(self, record: VideoRecord) -> VideoRecord:
        """Prepend a record and persist.

        Raises:
            DuplicateVideoError: If a record with the same id exists. Nothing
                is mutated or written in that case.
        """
        if self.contains(record.id):
            raise DuplicateVideoError(record.id)

        record.added_at = self.formatter.now()
        self._videos.insert(0, record)
        try:
            self._persist()
        except StorageError:
            self._videos.pop(0)
            raise

        MetricsCollector.record_mutation("add", len(self._videos))
        logger.info("video_added", video_id=record.id, count=len(self._videos))
        return record

    def remove_at(self, index: int) -> VideoRecord:
        """Remove the record at index and persist.

        Raises:
            IndexOutOfRangeError: If index is outside the collection.
            StorageError: If the slot cannot be written; the record is restored.
        """
        self._check_index(index)
        removed = self._videos.pop(index)
        try:
            self._persist()
        except StorageError:
            self._videos.insert(index, removed)
            raise

        MetricsCollector.record_mutation("remove", len(self._videos))
        logger.info("video_removed", video_id=removed.id, index=index)
        return removed

    def attach_subtitle(self, index: int, attachment: SubtitleAttachment) -> VideoRecord:
        """Replace the subtitle at index with attachment and persist.

        Raises:
            IndexOutOfRangeError: If index is outside the collection.
        """
        return self._replace_subtitle(index, attachment)

    def detach_subtitle(self, index: int) -> VideoRecord:
        """Clear the subtitle at index and persist.

        Raises:
            IndexOutOfRangeError: If index is outside the collection.
        """
        return self._replace_subtitle(index, None)

    def _replace_subtitle(
        self, index: int, attachment: Optional[SubtitleAttachment]
    ) -> VideoRecord:
        self._check_index(index)
        record = self._videos[index]
        previous = record.subtitle
        record.subtitle = attachment
        try:
            self._persist()
        except StorageError:
            record.subtitle = previous
            raise

        operation = "attach_subtitle" if attachment else "detach_subtitle"
        MetricsCollector.record_mutation(operation, len(self._videos))
        logger.info(
            "subtitle_updated",
            video_id=record.id,
            index=index,
            attached=attachment is not None,
        )
        return record
