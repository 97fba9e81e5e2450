"""YouTube metadata proxy endpoint.

Relays one video's raw Data API item to the caller while keeping the API key
on the server.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from vidshelf.api.schemas import ErrorDetail
from vidshelf.core.validation import video_id_validator
from vidshelf.providers.base import MetadataProvider
from vidshelf.providers.exceptions import (
    InvalidVideoIdError,
    ProviderError,
    ProviderUnconfiguredError,
    QuotaExceededError,
    VideoNotFoundError,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["youtube"])


# Dependency placeholder for the metadata provider
async def get_metadata_provider() -> MetadataProvider:
    """Get metadata provider instance."""
    raise NotImplementedError("Metadata provider dependency not configured")


def _error(status_code: int, error_code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error_code": error_code, "message": message},
    )


@router.get(
    "/youtube",
    responses={
        400: {"model": ErrorDetail, "description": "Missing or malformed video ID"},
        403: {"model": ErrorDetail, "description": "Quota exhausted or key rejected"},
        404: {"model": ErrorDetail, "description": "Video not found"},
        500: {"model": ErrorDetail, "description": "Unconfigured key or provider error"},
    },
)
async def get_youtube_video(
    video_id: Optional[str] = Query(  # noqa: B008
        None, alias="videoId", description="11-character video ID"
    ),
    provider: MetadataProvider = Depends(get_metadata_provider),  # noqa: B008
) -> Dict[str, Any]:
    """
    Get the raw YouTube Data API item for one video.

    Args:
        video_id: Canonical 11-character video ID
        provider: Metadata provider instance

    Returns:
        The provider's video item (snippet + statistics), unmodified

    Raises:
        HTTPException: If the ID is invalid or the lookup fails
    """
    validation = video_id_validator.validate(video_id)
    if not validation.is_valid:
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            "INVALID_VIDEO_ID",
            validation.error_message or "Invalid video ID format",
        )

    logger.info("video_metadata_requested", video_id=video_id)

    try:
        item = await provider.fetch_video_metadata(video_id)  # type: ignore[arg-type]
    except InvalidVideoIdError as e:
        raise _error(status.HTTP_400_BAD_REQUEST, "INVALID_VIDEO_ID", str(e))
    except ProviderUnconfiguredError as e:
        raise _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "PROVIDER_UNCONFIGURED", str(e))
    except QuotaExceededError as e:
        raise _error(status.HTTP_403_FORBIDDEN, "QUOTA_EXCEEDED", str(e))
    except VideoNotFoundError as e:
        raise _error(status.HTTP_404_NOT_FOUND, "VIDEO_NOT_FOUND", str(e))
    except ProviderError as e:
        logger.error("provider_error", video_id=video_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error_code": "PROVIDER_ERROR",
                "message": "Failed to fetch video information",
                "details": str(e),
            },
        )

    # An item shell without a snippet is as good as missing
    if not item.get("snippet"):
        raise _error(status.HTTP_404_NOT_FOUND, "VIDEO_NOT_FOUND", "Video details are unavailable")

    return item
