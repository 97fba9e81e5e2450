"""Service layer implementations."""

from vidshelf.services.collection import (
    CollectionStore,
    DuplicateVideoError,
    IndexOutOfRangeError,
    PersistenceParseError,
)
from vidshelf.services.extractor import (
    InvalidFormatError,
    InvalidInputError,
    MissingInputError,
    extract_video_id,
    parse_video_input,
)
from vidshelf.services.library import (
    AddInProgressError,
    LibraryService,
    SubtitleNotFoundError,
    UnsupportedSubtitleError,
    configure_library_service,
    get_library_service,
)
from vidshelf.services.normalizer import normalize_video
from vidshelf.services.notifications import Notification, NotificationLevel, NotificationQueue
from vidshelf.services.slots import (
    JsonFileSlotStore,
    MemorySlotStore,
    SlotStore,
    StorageError,
    create_slot_store,
)

__all__ = [
    # Collection store
    "CollectionStore",
    "DuplicateVideoError",
    "IndexOutOfRangeError",
    "PersistenceParseError",
    # Extractor
    "InvalidFormatError",
    "InvalidInputError",
    "MissingInputError",
    "extract_video_id",
    "parse_video_input",
    # Library service
    "AddInProgressError",
    "LibraryService",
    "SubtitleNotFoundError",
    "UnsupportedSubtitleError",
    "configure_library_service",
    "get_library_service",
    # Normalizer
    "normalize_video",
    # Notifications
    "Notification",
    "NotificationLevel",
    "NotificationQueue",
    # Slots
    "JsonFileSlotStore",
    "MemorySlotStore",
    "SlotStore",
    "StorageError",
    "create_slot_store",
]
