"""Provider-specific exceptions."""

from typing import Optional


class ProviderError(Exception):
    """Base exception for provider errors."""

    pass


class InvalidVideoIdError(ProviderError):
    """Raised when an identifier is not a canonical 11-character video ID."""

    pass


class ProviderUnconfiguredError(ProviderError):
    """Raised when no provider credential is configured."""

    pass


class QuotaExceededError(ProviderError):
    """Raised when the provider denies access (quota used up or key rejected)."""

    pass


class VideoNotFoundError(ProviderError):
    """Raised when the provider returns no matching video."""

    pass


class ProviderHTTPError(ProviderError):
    """Raised for any other non-success provider response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedProviderResponseError(ProviderError):
    """Raised when a provider item lacks the data needed to build a record."""

    pass


class MissingThumbnailError(MalformedProviderResponseError):
    """Raised when a provider item has neither a high nor a default thumbnail."""

    pass
