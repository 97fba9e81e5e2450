"""Library service: the command surface behind the video library API.

Orchestrates the add-video flow (extract -> fetch -> normalize -> store) and
the subtitle and delete operations, posting a transient status message for
every user-facing outcome.
"""

import asyncio
from typing import Optional

import structlog

from vidshelf.core.display import DisplayFormatter
from vidshelf.core.validation import subtitle_validator
from vidshelf.models.video import SubtitleAttachment, VideoRecord
from vidshelf.providers.base import MetadataProvider
from vidshelf.providers.exceptions import ProviderError
from vidshelf.services.collection import CollectionStore, DuplicateVideoError
from vidshelf.services.extractor import InvalidInputError, parse_video_input
from vidshelf.services.normalizer import normalize_video
from vidshelf.services.notifications import NotificationLevel, NotificationQueue
from vidshelf.services.slots import StorageError

logger = structlog.get_logger(__name__)


class AddInProgressError(Exception):
    """Raised when an add is submitted while another is still in flight."""

    pass


class UnsupportedSubtitleError(ValueError):
    """Raised when an uploaded subtitle has an unsupported file type."""

    pass


class SubtitleNotFoundError(LookupError):
    """Raised when a video has no subtitle to hand back."""

    pass


class LibraryService:
    """Add, delete and subtitle operations over the video collection."""

    def __init__(
        self,
        store: CollectionStore,
        provider: MetadataProvider,
        notifications: Optional[NotificationQueue] = None,
        formatter: Optional[DisplayFormatter] = None,
        add_ttl: float = 5.0,
        subtitle_ttl: float = 3.0,
    ) -> None:
        """Initialize the library service.

        Args:
            store: Collection store holding the videos.
            provider: Metadata gateway.
            notifications: Queue for transient status messages.
            formatter: Display formatter for snapshot strings.
            add_ttl: Lifetime of add-video messages in seconds.
            subtitle_ttl: Lifetime of subtitle messages in seconds.
        """
        self.store = store
        self.provider = provider
        self.notifications = notifications or NotificationQueue(default_ttl=add_ttl)
        self.formatter = formatter or store.formatter
        self.add_ttl = add_ttl
        self.subtitle_ttl = subtitle_ttl
        self._add_lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """True while a metadata fetch is in flight."""
        return self._add_lock.locked()

    def _notify(self, message: str, level: NotificationLevel, ttl: float) -> None:
        self.notifications.post(message, level=level, ttl=ttl)

    async def add_video(self, raw_input: Optional[str]) -> VideoRecord:
        """
        Add a video from a pasted URL or ID.

        Args:
            raw_input: Untrimmed user input

        Returns:
            The stored record

        Raises:
            InvalidInputError: If the input is empty or unparseable
            DuplicateVideoError: If the video is already in the collection
            AddInProgressError: If another add is still in flight
            ProviderError: If the provider lookup or normalization fails
            StorageError: If the collection cannot be saved
        """
        try:
            video_id = parse_video_input(raw_input)
            if self.store.contains(video_id):
                raise DuplicateVideoError(video_id)
            if self.busy:
                raise AddInProgressError("Another video is still being added")

            async with self._add_lock:
                item = await self.provider.fetch_video_metadata(video_id)
                record = normalize_video(item, video_id, self.formatter)
                # add() re-checks for duplicates
                self.store.add(record)

        except DuplicateVideoError as e:
            self._notify(
                "This video is already in the collection", NotificationLevel.ERROR, self.add_ttl
            )
            logger.info("add_video_rejected", error_type=type(e).__name__, video_id=e.video_id)
            raise
        except (InvalidInputError, AddInProgressError, ProviderError) as e:
            self._notify(str(e), NotificationLevel.ERROR, self.add_ttl)
            logger.info("add_video_rejected", error_type=type(e).__name__, error=str(e))
            raise
        except StorageError as e:
            self._notify("Failed to save the collection", NotificationLevel.ERROR, self.add_ttl)
            logger.error("add_video_not_saved", video_id=video_id, error=str(e))
            raise

        self._notify("Video added", NotificationLevel.SUCCESS, self.add_ttl)
        return record

    def delete_video(self, index: int) -> VideoRecord:
        """Remove the video at index.

        Raises:
            IndexOutOfRangeError: If index is outside the collection.
        """
        return self.store.remove_at(index)

    def attach_subtitle(self, index: int, filename: str, content: str) -> VideoRecord:
        """
        Attach an uploaded subtitle to the video at index, replacing any existing one.

        Args:
            index: Position of the video in the collection
            filename: Original filename, kept as the download name
            content: Decoded text of the file, stored verbatim

        Raises:
            UnsupportedSubtitleError: If the file type is not accepted
            IndexOutOfRangeError: If index is outside the collection
        """
        validation = subtitle_validator.validate_filename(filename)
        if not validation.is_valid:
            self._notify(validation.error_message or "", NotificationLevel.ERROR, self.subtitle_ttl)
            raise UnsupportedSubtitleError(validation.error_message)

        attachment = SubtitleAttachment(
            name=validation.sanitized_value or filename,
            size=len(content.encode("utf-8")),
            content=content,
            uploaded_at=self.formatter.now(),
        )
        record = self.store.attach_subtitle(index, attachment)
        self._notify("Subtitle uploaded", NotificationLevel.SUCCESS, self.subtitle_ttl)
        return record

    def detach_subtitle(self, index: int) -> VideoRecord:
        """Remove the subtitle from the video at index.

        Raises:
            IndexOutOfRangeError: If index is outside the collection.
        """
        record = self.store.detach_subtitle(index)
        self._notify("Subtitle removed", NotificationLevel.SUCCESS, self.subtitle_ttl)
        return record

    def get_subtitle(self, index: int) -> SubtitleAttachment:
        """Return the subtitle attached to the video at index.

        Raises:
            IndexOutOfRangeError: If index is outside the collection.
            SubtitleNotFoundError: If the video has no subtitle.
        """
        record = self.store.get(index)
        if record.subtitle is None:
            raise SubtitleNotFoundError(f"Video {record.id} has no subtitle")
        return record.subtitle


# Global library service instance
_library_service: Optional[LibraryService] = None


def configure_library_service(
    store: CollectionStore,
    provider: MetadataProvider,
    notifications: Optional[NotificationQueue] = None,
    add_ttl: float = 5.0,
    subtitle_ttl: float = 3.0,
) -> LibraryService:
    """Configure and initialize the global library service.

    Returns:
        Configured LibraryService instance.
    """
    global _library_service
    _library_service = LibraryService(
        store=store,
        provider=provider,
        notifications=notifications,
        add_ttl=add_ttl,
        subtitle_ttl=subtitle_ttl,
    )
    return _library_service


def get_library_service() -> LibraryService:
    """Get the global library service instance.

    Raises:
        RuntimeError: If the library service is not configured.
    """
    if _library_service is None:
        raise RuntimeError(
            "Library service not configured. Call configure_library_service() first."
        )
    return _library_service
