"""YouTube Data API metadata provider.

This is the only component that holds the API key; callers only ever see the
raw video item or a typed provider error.
"""

import asyncio
import time
from typing import Any, Dict, Optional

import requests
import structlog

from vidshelf.core.config import YouTubeConfig
from vidshelf.core.logging import hash_api_key
from vidshelf.core.metrics import MetricsCollector
from vidshelf.core.validation import is_valid_video_id
from vidshelf.providers.base import MetadataProvider
from vidshelf.providers.exceptions import (
    InvalidVideoIdError,
    ProviderError,
    ProviderHTTPError,
    ProviderUnconfiguredError,
    QuotaExceededError,
    VideoNotFoundError,
)

logger = structlog.get_logger(__name__)


class YouTubeMetadataProvider(MetadataProvider):
    """Fetches video snippet and statistics from the YouTube Data API v3."""

    PARTS = "snippet,statistics"

    def __init__(
        self,
        config: Optional[YouTubeConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the YouTube provider.

        Args:
            config: YouTube API configuration
            session: Optional requests session, injectable for tests
        """
        self.config = config or YouTubeConfig()
        self.api_key = self.config.api_key
        self.videos_url = f"{self.config.api_base_url.rstrip('/')}/videos"
        self.timeout = self.config.timeout
        self.session = session or requests.Session()

        logger.info(
            "YouTube provider initialized",
            configured=self.is_configured,
            api_key=hash_api_key(self.api_key) if self.api_key else None,
            timeout=self.timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def fetch_video_metadata(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch the raw video item for video_id.

        Args:
            video_id: Canonical 11-character video ID

        Returns:
            The first matching item, verbatim

        Raises:
            InvalidVideoIdError: If video_id is not a canonical ID
            ProviderUnconfiguredError: If no API key is configured
            QuotaExceededError: On HTTP 403 from the provider
            VideoNotFoundError: If the provider returns no items
            ProviderHTTPError: On any other non-success status
            ProviderError: On transport failures or unreadable bodies
        """
        if not is_valid_video_id(video_id):
            raise InvalidVideoIdError(f"Invalid video ID format: {video_id!r}")

        if not self.is_configured:
            logger.error("YouTube API key not configured")
            raise ProviderUnconfiguredError("YouTube API key is not configured")

        start = time.monotonic()
        outcome = "error"
        try:
            item = await asyncio.to_thread(self._fetch, video_id)
            outcome = "success"
            return item
        except QuotaExceededError:
            outcome = "quota_exceeded"
            raise
        except VideoNotFoundError:
            outcome = "not_found"
            raise
        finally:
            MetricsCollector.record_provider_lookup(outcome, time.monotonic() - start)

    def _fetch(self, video_id: str) -> Dict[str, Any]:
        """Blocking request to the videos endpoint."""
        params = {"id": video_id, "key": self.api_key, "part": self.PARTS}

        logger.debug("Requesting video metadata", video_id=video_id)
        try:
            response = self.session.get(self.videos_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            # Never include the request URL: it carries the key
            logger.error(
                "YouTube API request failed",
                video_id=video_id,
                error_type=type(e).__name__,
            )
            raise ProviderError(f"YouTube API request failed: {type(e).__name__}") from e

        if not response.ok:
            if response.status_code == 403:
                logger.warning("YouTube API access denied", video_id=video_id)
                raise QuotaExceededError("API quota exhausted or key is invalid")
            logger.error(
                "YouTube API error response",
                video_id=video_id,
                status_code=response.status_code,
            )
            raise ProviderHTTPError(
                f"YouTube API responded with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("YouTube API returned an unreadable body") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not items:
            logger.info("Video not found", video_id=video_id)
            raise VideoNotFoundError(f"Video not found: {video_id}")

        logger.info("Video metadata retrieved", video_id=video_id)
        return items[0]
