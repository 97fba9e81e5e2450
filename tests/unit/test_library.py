"""Tests for the library service.

Covers the add-video flow, the in-flight guard, subtitle management and the
status messages posted for each outcome.
"""

import asyncio
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import requests

from vidshelf.core.config import YouTubeConfig
from vidshelf.core.display import DisplayFormatter
from vidshelf.providers.base import MetadataProvider
from vidshelf.providers.exceptions import (
    InvalidVideoIdError,
    MalformedProviderResponseError,
    QuotaExceededError,
    VideoNotFoundError,
)
from vidshelf.providers.youtube import YouTubeMetadataProvider
from vidshelf.services import library as library_module
from vidshelf.services.collection import CollectionStore, DuplicateVideoError, IndexOutOfRangeError
from vidshelf.services.extractor import InvalidFormatError, MissingInputError
from vidshelf.services.library import (
    AddInProgressError,
    LibraryService,
    SubtitleNotFoundError,
    UnsupportedSubtitleError,
    configure_library_service,
    get_library_service,
)
from vidshelf.services.notifications import NotificationLevel, NotificationQueue
from vidshelf.services.slots import MemorySlotStore, SlotStore, StorageError

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_provider(sample_item: Dict[str, Any]) -> MagicMock:
    provider = MagicMock(spec=MetadataProvider)
    provider.is_configured = True
    provider.fetch_video_metadata = AsyncMock(return_value=sample_item)
    return provider


@pytest.fixture
def store(formatter: DisplayFormatter) -> CollectionStore:
    collection = CollectionStore(MemorySlotStore(), formatter=formatter)
    collection.load()
    return collection


@pytest.fixture
def service(store: CollectionStore, mock_provider: MagicMock) -> LibraryService:
    return LibraryService(store=store, provider=mock_provider)


def messages(service: LibraryService) -> List[tuple]:
    return [(n.message, n.level) for n in service.notifications.active()]


# ============================================================================
# Add video
# ============================================================================


class TestAddVideo:
    """Test LibraryService.add_video"""

    @pytest.mark.asyncio
    async def test_add_from_url(self, service: LibraryService, mock_provider: MagicMock) -> None:
        """Test a pasted URL is fetched, normalized and stored first"""
        record = await service.add_video("  https://youtu.be/dQw4w9WgXcQ  ")

        mock_provider.fetch_video_metadata.assert_awaited_once_with("dQw4w9WgXcQ")
        assert record.id == "dQw4w9WgXcQ"
        assert record.view_count == "1,234,567"
        assert record.added_at == "2024/03/05 14:07:09"
        assert service.store.videos[0] == record
        assert messages(service) == [("Video added", NotificationLevel.SUCCESS)]

    @pytest.mark.asyncio
    async def test_empty_input(self, service: LibraryService, mock_provider: MagicMock) -> None:
        with pytest.raises(MissingInputError):
            await service.add_video("   ")

        mock_provider.fetch_video_metadata.assert_not_awaited()
        assert messages(service) == [
            ("Please enter a YouTube video URL or ID", NotificationLevel.ERROR)
        ]

    @pytest.mark.asyncio
    async def test_unrecognized_input(
        self, service: LibraryService, mock_provider: MagicMock
    ) -> None:
        with pytest.raises(InvalidFormatError):
            await service.add_video("https://vimeo.com/1")

        mock_provider.fetch_video_metadata.assert_not_awaited()
        assert messages(service) == [("Invalid YouTube URL or ID", NotificationLevel.ERROR)]

    @pytest.mark.asyncio
    async def test_duplicate_skips_provider(
        self, service: LibraryService, mock_provider: MagicMock
    ) -> None:
        """Test a known video is rejected before any provider call"""
        await service.add_video("dQw4w9WgXcQ")
        mock_provider.fetch_video_metadata.reset_mock()
        service.notifications.clear()

        with pytest.raises(DuplicateVideoError):
            await service.add_video("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        mock_provider.fetch_video_metadata.assert_not_awaited()
        assert len(service.store) == 1
        assert messages(service) == [
            ("This video is already in the collection", NotificationLevel.ERROR)
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            QuotaExceededError("API quota exhausted or key is invalid"),
            VideoNotFoundError("Video not found: dQw4w9WgXcQ"),
        ],
    )
    async def test_provider_failure(
        self, service: LibraryService, mock_provider: MagicMock, error: Exception
    ) -> None:
        """Test provider errors are surfaced and leave the collection unchanged"""
        mock_provider.fetch_video_metadata.side_effect = error

        with pytest.raises(type(error)):
            await service.add_video("dQw4w9WgXcQ")

        assert len(service.store) == 0
        assert messages(service) == [(str(error), NotificationLevel.ERROR)]
        assert not service.busy

    @pytest.mark.asyncio
    async def test_malformed_item(
        self,
        service: LibraryService,
        mock_provider: MagicMock,
        sample_item: Dict[str, Any],
    ) -> None:
        """Test normalization failures are reported like provider errors"""
        del sample_item["snippet"]["thumbnails"]
        mock_provider.fetch_video_metadata.return_value = sample_item

        with pytest.raises(MalformedProviderResponseError):
            await service.add_video("dQw4w9WgXcQ")

        assert len(service.store) == 0
        assert messages(service)[0][1] == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_concurrent_add_rejected(
        self,
        service: LibraryService,
        mock_provider: MagicMock,
        sample_item: Dict[str, Any],
    ) -> None:
        """Test a second add is refused while the first is in flight"""
        release = asyncio.Event()

        async def slow_fetch(video_id: str) -> Dict[str, Any]:
            await release.wait()
            return sample_item

        mock_provider.fetch_video_metadata.side_effect = slow_fetch

        first = asyncio.create_task(service.add_video("dQw4w9WgXcQ"))
        await asyncio.sleep(0)
        assert service.busy

        with pytest.raises(AddInProgressError):
            await service.add_video("aaaaaaaaaaa")

        release.set()
        await first

        assert not service.busy
        assert [v.id for v in service.store.videos] == ["dQw4w9WgXcQ"]
        mock_provider.fetch_video_metadata.assert_awaited_once_with("dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_malformed_url_id_rejected_by_gateway(self, store: CollectionStore) -> None:
        """Test a loosely extracted URL ID is refused before any API request"""
        session = MagicMock(spec=requests.Session)
        provider = YouTubeMetadataProvider(YouTubeConfig(api_key="test-key"), session=session)
        service = LibraryService(store=store, provider=provider)

        with pytest.raises(InvalidVideoIdError):
            await service.add_video("https://youtu.be/short")

        session.get.assert_not_called()
        assert len(service.store) == 0
        assert messages(service) == [
            ("Invalid video ID format: 'short'", NotificationLevel.ERROR)
        ]

    @pytest.mark.asyncio
    async def test_save_failure_is_reported(self, service: LibraryService) -> None:
        """Test a failed write posts an error and leaves the collection empty"""
        service.store.slots = MagicMock(spec=SlotStore)
        service.store.slots.set.side_effect = StorageError("Failed to write slot file /x: full")

        with pytest.raises(StorageError):
            await service.add_video("dQw4w9WgXcQ")

        assert len(service.store) == 0
        assert not service.busy
        assert messages(service) == [("Failed to save the collection", NotificationLevel.ERROR)]


# ============================================================================
# Delete and subtitles
# ============================================================================


class TestDeleteVideo:
    """Test LibraryService.delete_video"""

    @pytest.mark.asyncio
    async def test_delete(self, service: LibraryService) -> None:
        await service.add_video("dQw4w9WgXcQ")

        removed = service.delete_video(0)

        assert removed.id == "dQw4w9WgXcQ"
        assert len(service.store) == 0

    def test_delete_out_of_range(self, service: LibraryService) -> None:
        with pytest.raises(IndexOutOfRangeError):
            service.delete_video(0)


class TestSubtitles:
    """Test subtitle attach, fetch and detach"""

    @pytest.mark.asyncio
    async def test_attach(self, service: LibraryService) -> None:
        """Test the subtitle is stored verbatim with its UTF-8 byte size"""
        await service.add_video("dQw4w9WgXcQ")
        service.notifications.clear()
        content = "1\n00:00:01,000 --> 00:00:02,000\n你好\n"

        record = service.attach_subtitle(0, "chinese.srt", content)

        assert record.subtitle is not None
        assert record.subtitle.name == "chinese.srt"
        assert record.subtitle.content == content
        assert record.subtitle.size == len(content.encode("utf-8"))
        assert record.subtitle.uploaded_at == "2024/03/05 14:07:09"
        assert messages(service) == [("Subtitle uploaded", NotificationLevel.SUCCESS)]

    @pytest.mark.asyncio
    async def test_attach_strips_client_path(self, service: LibraryService) -> None:
        await service.add_video("dQw4w9WgXcQ")

        record = service.attach_subtitle(0, "C:\\Users\\me\\subs\\en.VTT", "WEBVTT")

        assert record.subtitle.name == "en.VTT"

    @pytest.mark.asyncio
    async def test_attach_unsupported_type(self, service: LibraryService) -> None:
        """Test unsupported files are rejected and the record is untouched"""
        await service.add_video("dQw4w9WgXcQ")
        service.notifications.clear()

        with pytest.raises(UnsupportedSubtitleError):
            service.attach_subtitle(0, "notes.pdf", "x")

        assert service.store.get(0).subtitle is None
        assert messages(service)[0][1] == NotificationLevel.ERROR

    def test_attach_out_of_range(self, service: LibraryService) -> None:
        with pytest.raises(IndexOutOfRangeError):
            service.attach_subtitle(3, "en.srt", "x")

    @pytest.mark.asyncio
    async def test_get_and_detach(self, service: LibraryService) -> None:
        await service.add_video("dQw4w9WgXcQ")
        service.attach_subtitle(0, "en.srt", "hello")

        assert service.get_subtitle(0).content == "hello"

        service.notifications.clear()
        service.detach_subtitle(0)

        assert messages(service) == [("Subtitle removed", NotificationLevel.SUCCESS)]
        with pytest.raises(SubtitleNotFoundError):
            service.get_subtitle(0)

    @pytest.mark.asyncio
    async def test_subtitle_ttl(self, store: CollectionStore, mock_provider: MagicMock) -> None:
        """Test subtitle messages use the shorter lifetime"""
        now = [0.0]
        queue = NotificationQueue(clock=lambda: now[0])
        service = LibraryService(store, mock_provider, notifications=queue)
        await service.add_video("dQw4w9WgXcQ")
        service.attach_subtitle(0, "en.srt", "hello")

        now[0] = 3.0
        assert [n.message for n in queue.active()] == ["Video added"]
        now[0] = 5.0
        assert queue.active() == []


class TestGlobalService:
    """Test the global service accessors"""

    def test_configure_and_get(
        self,
        store: CollectionStore,
        mock_provider: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(library_module, "_library_service", None)

        with pytest.raises(RuntimeError):
            get_library_service()

        service = configure_library_service(store=store, provider=mock_provider)

        assert get_library_service() is service
