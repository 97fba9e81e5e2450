"""Video metadata provider implementations."""

from vidshelf.providers.base import MetadataProvider
from vidshelf.providers.exceptions import (
    InvalidVideoIdError,
    MalformedProviderResponseError,
    MissingThumbnailError,
    ProviderError,
    ProviderHTTPError,
    ProviderUnconfiguredError,
    QuotaExceededError,
    VideoNotFoundError,
)
from vidshelf.providers.youtube import YouTubeMetadataProvider

__all__ = [
    "MetadataProvider",
    "YouTubeMetadataProvider",
    "ProviderError",
    "InvalidVideoIdError",
    "ProviderUnconfiguredError",
    "QuotaExceededError",
    "VideoNotFoundError",
    "ProviderHTTPError",
    "MalformedProviderResponseError",
    "MissingThumbnailError",
]
