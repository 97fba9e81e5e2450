"""Abstract base class for video metadata providers."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class MetadataProvider(ABC):
    """Abstract base class for video metadata providers."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the provider has the credential it needs."""
        pass

    @abstractmethod
    async def fetch_video_metadata(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch the raw metadata resource for one video.

        Args:
            video_id: Canonical 11-character video ID

        Returns:
            The provider's raw video item, unmodified

        Raises:
            InvalidVideoIdError: If video_id is not a canonical ID
            ProviderUnconfiguredError: If no credential is configured
            QuotaExceededError: If the provider denies access
            VideoNotFoundError: If the provider has no such video
            ProviderHTTPError: For any other non-success response
        """
        pass
