"""Tests for the YouTube Data API provider.

The requests session is mocked; no network traffic is made.
"""

from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
import requests

from vidshelf.core.config import YouTubeConfig
from vidshelf.providers.exceptions import (
    InvalidVideoIdError,
    ProviderError,
    ProviderHTTPError,
    ProviderUnconfiguredError,
    QuotaExceededError,
    VideoNotFoundError,
)
from vidshelf.providers.youtube import YouTubeMetadataProvider

# ============================================================================
# FIXTURES
# ============================================================================


def make_response(status_code: int = 200, payload: Any = None) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload
    return response


@pytest.fixture
def mock_session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def provider(mock_session: MagicMock) -> YouTubeMetadataProvider:
    config = YouTubeConfig(api_key="test-key", api_base_url="https://yt.example/v3/")
    return YouTubeMetadataProvider(config, session=mock_session)


# ============================================================================
# TESTS
# ============================================================================


class TestConfiguration:
    """Test provider configuration"""

    def test_configured(self, provider: YouTubeMetadataProvider) -> None:
        assert provider.is_configured
        assert provider.videos_url == "https://yt.example/v3/videos"

    def test_unconfigured(self, mock_session: MagicMock) -> None:
        provider = YouTubeMetadataProvider(YouTubeConfig(), session=mock_session)

        assert not provider.is_configured

    def test_blank_key_is_unconfigured(self, mock_session: MagicMock) -> None:
        provider = YouTubeMetadataProvider(YouTubeConfig(api_key="   "), session=mock_session)

        assert not provider.is_configured


class TestFetchVideoMetadata:
    """Test fetch_video_metadata"""

    @pytest.mark.asyncio
    async def test_success(
        self,
        provider: YouTubeMetadataProvider,
        mock_session: MagicMock,
        sample_item: Dict[str, Any],
    ) -> None:
        """Test the first item is returned verbatim"""
        mock_session.get.return_value = make_response(200, {"items": [sample_item, {}]})

        item = await provider.fetch_video_metadata("dQw4w9WgXcQ")

        assert item == sample_item
        mock_session.get.assert_called_once_with(
            "https://yt.example/v3/videos",
            params={"id": "dQw4w9WgXcQ", "key": "test-key", "part": "snippet,statistics"},
            timeout=10.0,
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("video_id", ["", "short", "dQw4w9WgXcQ!", "dQw4w9WgXcQQ"])
    async def test_invalid_id_never_calls_api(
        self, provider: YouTubeMetadataProvider, mock_session: MagicMock, video_id: str
    ) -> None:
        with pytest.raises(InvalidVideoIdError):
            await provider.fetch_video_metadata(video_id)

        mock_session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_unconfigured(self, mock_session: MagicMock) -> None:
        provider = YouTubeMetadataProvider(YouTubeConfig(), session=mock_session)

        with pytest.raises(ProviderUnconfiguredError):
            await provider.fetch_video_metadata("dQw4w9WgXcQ")

        mock_session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_quota_exceeded(
        self, provider: YouTubeMetadataProvider, mock_session: MagicMock
    ) -> None:
        mock_session.get.return_value = make_response(403, {"error": {"code": 403}})

        with pytest.raises(QuotaExceededError):
            await provider.fetch_video_metadata("dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_other_http_error(
        self, provider: YouTubeMetadataProvider, mock_session: MagicMock
    ) -> None:
        mock_session.get.return_value = make_response(500)

        with pytest.raises(ProviderHTTPError) as exc_info:
            await provider.fetch_video_metadata("dQw4w9WgXcQ")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"items": []}, {}, {"items": None}, []])
    async def test_no_items(
        self, provider: YouTubeMetadataProvider, mock_session: MagicMock, payload: Any
    ) -> None:
        mock_session.get.return_value = make_response(200, payload)

        with pytest.raises(VideoNotFoundError):
            await provider.fetch_video_metadata("dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_unreadable_body(
        self, provider: YouTubeMetadataProvider, mock_session: MagicMock
    ) -> None:
        response = make_response(200)
        response.json.side_effect = ValueError("not json")
        mock_session.get.return_value = response

        with pytest.raises(ProviderError, match="unreadable"):
            await provider.fetch_video_metadata("dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_transport_error_hides_key(
        self, provider: YouTubeMetadataProvider, mock_session: MagicMock
    ) -> None:
        """Test transport failures do not leak the request URL or key"""
        mock_session.get.side_effect = requests.ConnectionError(
            "https://yt.example/v3/videos?key=test-key refused"
        )

        with pytest.raises(ProviderError) as exc_info:
            await provider.fetch_video_metadata("dQw4w9WgXcQ")

        assert "test-key" not in str(exc_info.value)
